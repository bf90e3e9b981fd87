"""
Contribution Limits
===================
Statutory limits for voluntary / pre-tax contribution elections, and the
normalisation step that applies them before a calculator runs.

Individual limits are applied first. Shared ceilings (several wrappers
drawing on one combined allowance) are then applied in the declared
priority order of their members: earlier members keep their full amount,
later members receive what is left.
"""

from dataclasses import dataclass, asdict
from typing import Iterable


@dataclass(frozen=True)
class ContributionLimit:
    limit: float
    name: str
    description: str
    pre_tax: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SharedCap:
    """One ceiling shared by several contribution kinds, in priority order."""
    name: str
    limit: float
    members: tuple


def normalize_contributions(
    elections: dict[str, float],
    limits: dict[str, ContributionLimit],
    shared_caps: Iterable[SharedCap] = (),
) -> dict[str, float]:
    """
    Clamp contribution elections to their limits.

    Args:
        elections: contribution kind -> elected annual amount
        limits: contribution kind -> ContributionLimit (kinds without an
                entry are only clamped at zero)
        shared_caps: joint ceilings, applied after the individual limits

    Returns:
        New dict with the same keys and clamped amounts
    """
    result = {}
    for kind, amount in elections.items():
        amount = max(0.0, amount)
        if kind in limits:
            amount = min(amount, limits[kind].limit)
        result[kind] = amount

    for cap in shared_caps:
        remaining = max(0.0, cap.limit)
        for kind in cap.members:
            if kind not in result:
                continue
            result[kind] = min(result[kind], remaining)
            remaining -= result[kind]

    return result


def gross_cap(gross: float, members: tuple) -> SharedCap:
    """Voluntary contributions can never exceed the salary they come out of."""
    return SharedCap(name="gross_salary", limit=gross, members=members)


def limits_to_dict(limits: dict[str, ContributionLimit]) -> dict:
    return {kind: limit.to_dict() for kind, limit in limits.items()}
