"""Application services orchestrating loading and submitting a quote form."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Sequence

from quote_form.application.dto import QuoteFormView, SubmissionRequest, SubmissionResponse
from quote_form.domain.errors import (
    ConfirmationRequiredError,
    FormAlreadySubmittedError,
    ForeignPositionError,
    FormNotFoundError,
    InvalidPricingTermsError,
    MissingFormIdError,
    NoPricesError,
)
from quote_form.domain.models import SUBMITTED_STATUS, FormMeta, FormPosition, PricingResult, PricingTerms
from quote_form.domain.pricing import compute_pricing, is_valid_pricing_input, pricing_warnings
from quote_form.domain.repositories import QuoteFormRepository, SubmissionNotifier
from quote_form.domain.services import has_priced_positions, net_total, positions_missing_prices
from quote_form.infrastructure.parsing.numbers import parse_number, sanitize_price_input

logger = logging.getLogger(__name__)


def summarize(positions: Sequence[FormPosition], terms: PricingTerms) -> tuple[PricingResult, tuple[str, ...]]:
    """Recompute the pricing breakdown from the current positions and terms."""
    pricing_input = terms.to_input(net_total(positions))
    return compute_pricing(pricing_input), pricing_warnings(pricing_input)


@dataclass(slots=True)
class QuoteFormContext:
    repository: QuoteFormRepository
    notifier: SubmissionNotifier


def _require_meta(repository: QuoteFormRepository, form_id: str | None) -> FormMeta:
    if not form_id:
        raise MissingFormIdError()
    meta = repository.get_meta(form_id)
    if meta is None:
        raise FormNotFoundError(form_id)
    return meta


class LoadQuoteFormUseCase:
    def __init__(self, context: QuoteFormContext) -> None:
        self._context = context

    def execute(self, form_id: str | None) -> QuoteFormView:
        meta = _require_meta(self._context.repository, form_id)
        positions = list(self._context.repository.list_positions(meta.id))
        pricing, warnings = summarize(positions, meta.pricing_terms)
        return QuoteFormView(meta=meta, positions=positions, pricing=pricing, warnings=warnings)


class SubmitQuoteUseCase:
    def __init__(self, context: QuoteFormContext) -> None:
        self._context = context

    def execute(self, request: SubmissionRequest) -> SubmissionResponse:
        repository = self._context.repository
        meta = _require_meta(repository, request.form_id)
        if meta.is_submitted:
            raise FormAlreadySubmittedError(meta.id)

        positions = list(request.positions)
        foreign = [p.id for p in positions if p.meta_id != meta.id]
        if foreign:
            raise ForeignPositionError(meta.id, foreign)
        if not has_priced_positions(positions):
            raise NoPricesError()
        missing = positions_missing_prices(positions, request.raw_price_inputs)
        if missing and not request.confirm_incomplete:
            raise ConfirmationRequiredError(missing)
        if not is_valid_pricing_input(request.pricing_terms):
            raise InvalidPricingTermsError()

        repository.save_submission(
            meta.id, positions, request.general_comment, request.pricing_terms, SUBMITTED_STATUS
        )
        logger.info("Offer %s submitted with %d positions (%d without price)", meta.id, len(positions), len(missing))

        self._context.notifier.notify_submitted(meta.id)

        submitted_meta = replace(
            meta,
            status=SUBMITTED_STATUS,
            general_comment=request.general_comment,
            pricing_terms=request.pricing_terms,
        )
        pricing, warnings = summarize(positions, request.pricing_terms)
        return SubmissionResponse(meta=submitted_meta, positions=positions, pricing=pricing, warnings=warnings)


def apply_price_input(position: FormPosition, raw_text: str) -> tuple[FormPosition, str]:
    """Apply a typed price to ``position``; returns the position and the cleaned text."""
    cleaned = sanitize_price_input(raw_text)
    price = parse_number(cleaned) if cleaned else Decimal("0")
    return replace(position, unit_price_net=price), cleaned


def apply_comment(position: FormPosition, enabled: bool, text: str | None) -> FormPosition:
    # A disabled comment box clears the stored comment.
    if not enabled:
        return replace(position, comment=None)
    return replace(position, comment=text or None)
