# src/core/finance/errors.py
"""
Typed errors for the underwriting engine.

Exports
-------
- UnderwritingError, InvalidDealInputError
- validate_deal(deal)
"""

from __future__ import annotations

from src.schemas.models import MFDeal, SFRDeal


class UnderwritingError(ValueError):
    """Base class for engine failures."""


class InvalidDealInputError(UnderwritingError):
    """Deal inputs are inconsistent; raised before any computation starts."""


def validate_deal(deal: SFRDeal | MFDeal) -> None:
    """
    Cross-field checks that field-level validation cannot express.

    Raises:
        InvalidDealInputError listing every problem found.
    """
    problems: list[str] = []

    if deal.purchase_price <= 0:
        problems.append("purchase_price must be > 0")
    if deal.down_payment > deal.purchase_price:
        problems.append("down_payment cannot exceed purchase_price")
    if deal.loan_amount > 0 and deal.loan_term <= 0:
        problems.append("loan_term must be >= 1 when the purchase is financed")
    if deal.long_term.projection_years < 1:
        problems.append("long_term.projection_years must be >= 1")

    if isinstance(deal, MFDeal):
        if not deal.unit_types or deal.total_units <= 0:
            problems.append("multi-family deal needs at least one unit")
        for u in deal.unit_types:
            if u.occupied > u.count:
                problems.append(f"unit group {u.label!r}: occupied ({u.occupied}) exceeds count ({u.count})")

    if problems:
        raise InvalidDealInputError("Invalid deal input: " + "; ".join(problems))


__all__ = ["UnderwritingError", "InvalidDealInputError", "validate_deal"]
