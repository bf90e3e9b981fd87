"""
Per-country calculators.

Each module exposes CONFIG, an inputs dataclass, calculate(),
default_inputs(), get_regions(), get_contribution_limits() and a
CALCULATOR bundle that the registry picks up.
"""
