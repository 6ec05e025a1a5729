"""Pricing engine: discount, VAT, gross, cash discount and reverse-derived net.

All functions are pure. Out-of-range values are never clamped here; callers
check them with :func:`is_valid_pricing_input` before trusting a result.
"""
from __future__ import annotations

from dataclasses import asdict, is_dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from .models import DiscountKind, PricingInput, PricingResult, PricingTerms

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        return ZERO
    return result if result.is_finite() else ZERO


def compute_pricing(pricing_input: PricingInput) -> PricingResult:
    net_total = to_decimal(pricing_input.net_total)
    discount_value = to_decimal(pricing_input.discount_value)
    vat_rate = to_decimal(pricing_input.vat_rate_percent)
    cash_discount_rate = to_decimal(pricing_input.cash_discount_rate_percent)

    if DiscountKind(pricing_input.discount_kind) is DiscountKind.PERCENTAGE:
        discount_amount = net_total * (discount_value / HUNDRED)
    else:
        discount_amount = discount_value

    net_after_discount = net_total - discount_amount
    vat_amount = net_after_discount * (vat_rate / HUNDRED)
    gross_total = net_after_discount + vat_amount
    cash_discount_amount = gross_total * (cash_discount_rate / HUNDRED)
    final_gross_total = gross_total - cash_discount_amount

    # Removes VAT from the post-cash-discount gross at the same rate as above.
    if vat_rate > 0:
        final_net_total = final_gross_total / (1 + vat_rate / HUNDRED)
    else:
        final_net_total = final_gross_total

    return PricingResult(
        net_total=net_total,
        discount_amount=discount_amount,
        net_after_discount=net_after_discount,
        vat_amount=vat_amount,
        gross_total=gross_total,
        cash_discount_amount=cash_discount_amount,
        final_gross_total=final_gross_total,
        final_net_total=final_net_total,
    )


def convert_discount(value: object, kind: DiscountKind, net_total: object) -> Decimal:
    """Return the discount in the other representation, for display only.

    A percentage becomes an amount of ``net_total``; an amount becomes the
    percentage it represents. A zero net total has no meaningful percentage
    and yields zero.
    """
    value = to_decimal(value)
    net_total = to_decimal(net_total)
    if DiscountKind(kind) is DiscountKind.PERCENTAGE:
        return net_total * (value / HUNDRED)
    if net_total == 0:
        return ZERO
    return value / net_total * HUNDRED


def _read_term(value: object) -> Decimal | None:
    """Read a pricing term strictly; ``None`` marks text or numbers no form could hold."""
    if value is None:
        return ZERO
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def _within_percent_range(value: Decimal | None) -> bool:
    return value is not None and ZERO <= value <= HUNDRED


def is_valid_pricing_input(partial: Mapping[str, Any] | PricingInput | PricingTerms) -> bool:
    if is_dataclass(partial):
        partial = asdict(partial)
    discount_value = _read_term(partial.get("discount_value"))
    vat_rate = _read_term(partial.get("vat_rate_percent"))
    cash_discount_rate = _read_term(partial.get("cash_discount_rate_percent"))
    try:
        discount_kind = DiscountKind(partial.get("discount_kind") or DiscountKind.PERCENTAGE)
    except ValueError:
        return False

    if discount_value is None:
        return False
    if discount_kind is DiscountKind.PERCENTAGE and not _within_percent_range(discount_value):
        return False
    if not _within_percent_range(vat_rate):
        return False
    if not _within_percent_range(cash_discount_rate):
        return False
    return True


def pricing_warnings(pricing_input: PricingInput) -> tuple[str, ...]:
    """Non-blocking hints for the UI about arithmetically allowed but odd inputs."""
    warnings: list[str] = []
    net_total = to_decimal(pricing_input.net_total)
    discount_value = to_decimal(pricing_input.discount_value)
    if DiscountKind(pricing_input.discount_kind) is DiscountKind.FIXED and discount_value > net_total:
        warnings.append(
            f"Fixed discount {discount_value} exceeds the net total {net_total}; totals become negative"
        )
    return tuple(warnings)
