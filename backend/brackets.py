"""
Tax Bracket Module
==================
Progressive bracket math shared by every country calculator.

Bracket tables are written the compact way, as (upper_threshold, rate) tuples
with float('inf') as the last threshold, and converted once at import time
into TaxBracket lists:

    FEDERAL = build_brackets([(12250, 0.10), (49850, 0.12), (float('inf'), 0.22)])
    tax = apply_brackets(taxable_income, FEDERAL)
"""

import math
from dataclasses import dataclass


INF = float("inf")


@dataclass(frozen=True)
class TaxBracket:
    """Half-open income interval [lower, upper) taxed at a marginal rate."""
    lower: float
    upper: float
    rate: float

    def to_dict(self) -> dict:
        return {
            "min": self.lower,
            "max": None if math.isinf(self.upper) else self.upper,
            "rate": self.rate,
        }


def build_brackets(thresholds: list[tuple[float, float]]) -> list[TaxBracket]:
    """
    Convert (upper_threshold, rate) tuples into contiguous TaxBrackets.
    The first bracket starts at 0.
    """
    brackets = []
    prev_threshold = 0.0
    for threshold, rate in thresholds:
        brackets.append(TaxBracket(prev_threshold, threshold, rate))
        prev_threshold = threshold
    return brackets


def validate_brackets(brackets: list[TaxBracket]) -> None:
    """
    Check the bracket invariant: contiguous, ascending, starting at 0,
    ending at +inf, with non-decreasing marginal rates.
    """
    if not brackets:
        raise ValueError("bracket list must not be empty")
    if brackets[0].lower != 0:
        raise ValueError(f"first bracket must start at 0, got {brackets[0].lower}")
    if not math.isinf(brackets[-1].upper):
        raise ValueError(f"last bracket must be open-ended, got {brackets[-1].upper}")
    for prev, cur in zip(brackets, brackets[1:]):
        if cur.lower != prev.upper:
            raise ValueError(f"gap between brackets at {prev.upper} and {cur.lower}")
        if cur.upper <= cur.lower:
            raise ValueError(f"bracket [{cur.lower}, {cur.upper}) is empty")
        if cur.rate < prev.rate:
            raise ValueError(f"rate decreases from {prev.rate} to {cur.rate} at {cur.lower}")


def apply_brackets(income: float, brackets: list[TaxBracket]) -> float:
    """Apply progressive tax brackets. Returns total tax (unrounded)."""
    tax = 0.0
    for bracket in brackets:
        if income <= bracket.lower:
            break
        tax += (min(income, bracket.upper) - bracket.lower) * bracket.rate
    return tax


def bracket_breakdown(income: float, brackets: list[TaxBracket]) -> list[dict]:
    """Per-bracket slice of income and tax, for display."""
    rows = []
    for bracket in brackets:
        if income <= bracket.lower:
            break
        taxable = min(income, bracket.upper) - bracket.lower
        rows.append({
            **bracket.to_dict(),
            "taxable_amount": taxable,
            "tax": taxable * bracket.rate,
        })
    return rows


def marginal_rate(income: float, brackets: list[TaxBracket]) -> float:
    """Rate of the bracket the next unit of income falls into."""
    for bracket in brackets:
        if income < bracket.upper:
            return bracket.rate
    return brackets[-1].rate


# ─── Rounding ────────────────────────────────────────────────────────────────


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for non-negative amounts (builtin round() is banker's)."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def floor_to(value: float, step: float) -> float:
    """Round down to a multiple of step (e.g. 1000 rupiah, 0.05 francs)."""
    return math.floor(value / step + 1e-9) * step
