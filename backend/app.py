"""
Flask API for the take-home pay engine
Serves single-country calculations and multi-country comparisons
"""

from dataclasses import asdict

from flask import Flask, jsonify, request
from flask_cors import CORS

from config import setup_logging, get_logger
from comparison import compare, comparison_inputs_from_dict
from fx import FxRates
from registry import (
    build_inputs,
    calculate_net_salary,
    contribution_limits_dict,
    get_calculator,
    get_supported_countries,
)
from validators import validate_params, GROSS_SALARY, PAY_FREQUENCY, REGION

setup_logging()
logger = get_logger(__name__)

app = Flask(__name__)
CORS(app)  # Enable CORS for the web frontend

# Input field holding the region code, where it isn't called "region"
REGION_FIELDS = {"US": "state", "DE": "state", "CH": "canton"}


# ─── Global Error Handlers ───────────────────────────────────────────────────


@app.errorhandler(404)
def not_found(e):
    """Return JSON instead of HTML for 404 errors."""
    return jsonify({"error": "Resource not found"}), 404


@app.errorhandler(ValueError)
def handle_value_error(e):
    """Catch unhandled ValueErrors (bad inputs, unknown countries) as 400s."""
    logger.warning("ValueError: %s", e)
    return jsonify({"error": str(e)}), 400


@app.errorhandler(Exception)
def handle_exception(e):
    """Catch-all for unhandled exceptions, returned as a 500 JSON response."""
    logger.exception("Unhandled exception: %s", e)
    return jsonify({"error": "Internal server error"}), 500


@app.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint"""
    return jsonify({"status": "ok", "message": "Take-home pay API is running"})


@app.route("/api/countries", methods=["GET"])
def get_countries():
    """List supported countries in display order"""
    countries = get_supported_countries()
    return jsonify({"count": len(countries), "countries": countries})


@app.route("/api/countries/<string:code>", methods=["GET"])
def get_country(code):
    """Config, regions, default inputs and contribution limits for one country"""
    calculator = get_calculator(code.upper())
    defaults = calculator.default_inputs()
    return jsonify({
        "config": calculator.config.to_dict(),
        "regions": [region.to_dict() for region in calculator.get_regions()],
        "default_inputs": asdict(defaults),
        "contribution_limits": contribution_limits_dict(calculator.config.code),
    })


@app.route("/api/calculate/<string:code>", methods=["GET"])
def quick_calculate(code):
    """
    Calculate net pay from the country's defaults plus a few query params.

    Query params (all optional):
      - gross_salary: Annual gross in local currency (default: country default)
      - pay_frequency: annual, monthly, biweekly or weekly (default: monthly)
      - region: State / province / canton code for countries with regions
    """
    code = code.upper()
    calculator = get_calculator(code)

    params = validate_params(request.args, [GROSS_SALARY, PAY_FREQUENCY, REGION])

    payload = {}
    if params["gross_salary"] is not None:
        payload["gross_salary"] = params["gross_salary"]
    if params["pay_frequency"] is not None:
        payload["pay_frequency"] = params["pay_frequency"]
    if params["region"] is not None:
        if not calculator.config.supports_regions:
            return jsonify({"error": f"{calculator.config.name} has no regions"}), 400
        payload[REGION_FIELDS.get(code, "region")] = params["region"]

    inputs = build_inputs(code, payload)
    return jsonify({
        "inputs": asdict(inputs),
        "result": calculate_net_salary(inputs).to_dict(),
    })


@app.route("/api/calculate", methods=["POST"])
def calculate():
    """
    Calculate net pay for one country.

    Body (JSON): {"country": "<code>", ...input fields}
    Fields not given are taken from the country's default inputs; nested
    contributions / tax_reliefs objects may be partial.
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Request body must be JSON"}), 400
    if not isinstance(data, dict) or "country" not in data:
        return jsonify({"error": "'country' is required"}), 400

    code = str(data["country"]).upper()
    inputs = build_inputs(code, {**data, "country": code})
    result = calculate_net_salary(inputs)

    return jsonify({
        "result": result.to_dict(),
        "contribution_limits": contribution_limits_dict(code, inputs),
    })


@app.route("/api/compare", methods=["POST"])
def compare_countries():
    """
    Compare net pay across all supported countries.

    Body (JSON):
      - inputs: base_salary, base_currency, marital_status, number_of_children,
                baseline_country, assumptions {...}
      - fx: {base, rates, updated_at} or null (null yields is_ready: false)
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Request body must be JSON"}), 400
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    inputs = comparison_inputs_from_dict(data.get("inputs") or {})
    fx_payload = data.get("fx")
    fx_rates = FxRates.from_payload(fx_payload) if fx_payload is not None else None
    if fx_rates is not None and fx_rates.base != inputs.base_currency:
        return jsonify({
            "error": f"fx.base ('{fx_rates.base}') does not match base_currency ('{inputs.base_currency}')"
        }), 400

    return jsonify(compare(inputs, fx_rates).to_dict())


if __name__ == "__main__":
    print("🚀 Starting Take-Home Pay API...")
    print("📍 API will be available at: http://localhost:5000")
    print("\n📚 Endpoints:")
    print("   GET  /api/health")
    print("   GET  /api/countries")
    print("   GET  /api/countries/<code>")
    print("   GET  /api/calculate/<code>")
    print("   GET  /api/calculate/<code>?gross_salary=85000&pay_frequency=biweekly&region=NY")
    print("   POST /api/calculate       {\"country\": \"SG\", \"gross_salary\": 120000}")
    print("   POST /api/compare         {\"inputs\": {...}, \"fx\": {\"base\": \"USD\", \"rates\": {...}}}")
    print("\n🔗 Test it: http://localhost:5000/api/calculate/US?gross_salary=100000\n")

    app.run(debug=True, host="0.0.0.0", port=5000)
