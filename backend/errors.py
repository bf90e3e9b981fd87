"""
Domain errors raised by the calculation engine.

Both subclass ValueError so the Flask error handler maps them to 400.
"""


class UnsupportedCountry(ValueError):
    """Registry lookup for a country code that has no calculator."""

    def __init__(self, code):
        self.code = code
        super().__init__(f"Unsupported country: '{code}'")


class InvalidCountryInput(ValueError):
    """A calculator was handed inputs tagged for a different country."""

    def __init__(self, expected: str, got: str):
        self.expected = expected
        self.got = got
        super().__init__(f"{expected} calculator cannot calculate inputs for '{got}'")
