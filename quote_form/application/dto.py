"""Application-level DTOs for the quote form."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from quote_form.domain.models import FormMeta, FormPosition, PricingResult, PricingTerms


@dataclass(slots=True, frozen=True)
class QuoteFormView:
    meta: FormMeta
    positions: Sequence[FormPosition]
    pricing: PricingResult
    warnings: Sequence[str] = field(default_factory=tuple)

    @property
    def is_submitted(self) -> bool:
        return self.meta.is_submitted


@dataclass(slots=True, frozen=True)
class SubmissionRequest:
    form_id: str | None
    positions: Sequence[FormPosition]
    raw_price_inputs: Mapping[str, str]
    general_comment: str
    pricing_terms: PricingTerms
    confirm_incomplete: bool = False


@dataclass(slots=True, frozen=True)
class SubmissionResponse:
    meta: FormMeta
    positions: Sequence[FormPosition]
    pricing: PricingResult
    warnings: Sequence[str] = field(default_factory=tuple)
