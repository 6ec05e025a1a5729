"""Domain models for the supplier quote form.

Pricing records are plain immutable values; form records mirror the rows of
the remote data store.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

SUBMITTED_STATUS = "abgegeben"


class DiscountKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class PricingInput:
    """Snapshot of every value the pricing engine reads."""

    net_total: Decimal
    discount_value: Decimal = Decimal("0")
    discount_kind: DiscountKind = DiscountKind.PERCENTAGE
    vat_rate_percent: Decimal = Decimal("0")
    cash_discount_rate_percent: Decimal = Decimal("0")
    cash_discount_days: int = 0


@dataclass(frozen=True)
class PricingResult:
    net_total: Decimal
    discount_amount: Decimal
    net_after_discount: Decimal
    vat_amount: Decimal
    gross_total: Decimal
    cash_discount_amount: Decimal
    final_gross_total: Decimal
    final_net_total: Decimal


@dataclass(frozen=True)
class PricingTerms:
    """Persisted pricing parameters of a form (everything except the net total)."""

    discount_value: Decimal = Decimal("0")
    discount_kind: DiscountKind = DiscountKind.PERCENTAGE
    vat_rate_percent: Decimal = Decimal("19")
    cash_discount_rate_percent: Decimal = Decimal("0")
    cash_discount_days: int = 0

    def to_input(self, net_total: Decimal) -> PricingInput:
        return PricingInput(
            net_total=net_total,
            discount_value=self.discount_value,
            discount_kind=self.discount_kind,
            vat_rate_percent=self.vat_rate_percent,
            cash_discount_rate_percent=self.cash_discount_rate_percent,
            cash_discount_days=self.cash_discount_days,
        )


@dataclass(frozen=True)
class FormMeta:
    """Header record of a price request sent to one supplier."""

    id: str
    supplier_name: str
    status: str | None = None
    calculation_id: str | None = None
    general_comment: str | None = None
    pricing_terms: PricingTerms = field(default_factory=PricingTerms)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_submitted(self) -> bool:
        return self.status == SUBMITTED_STATUS


@dataclass(frozen=True)
class FormPosition:
    """One line item of a price request."""

    id: str
    meta_id: str
    description: str
    oz: str | None = None
    quantity: Decimal | None = None
    unit: str | None = None
    unit_price_net: Decimal | None = None
    external_ref: str | None = None
    long_text: str | None = None
    comment: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
