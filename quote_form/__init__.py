"""Supplier quote form: pricing engine, form store and submission workflow."""
from quote_form.application.use_cases import (
    LoadQuoteFormUseCase,
    QuoteFormContext,
    SubmitQuoteUseCase,
    summarize,
)
from quote_form.domain.models import DiscountKind, PricingInput, PricingResult, PricingTerms
from quote_form.domain.pricing import compute_pricing, is_valid_pricing_input
from quote_form.infrastructure.parsing.numbers import format_number, parse_number
from quote_form.infrastructure.storage.json_store import JsonQuoteFormRepository
from quote_form.infrastructure.webhook import DocumentWebhookNotifier

__all__ = [
    "LoadQuoteFormUseCase",
    "QuoteFormContext",
    "SubmitQuoteUseCase",
    "summarize",
    "DiscountKind",
    "PricingInput",
    "PricingResult",
    "PricingTerms",
    "compute_pricing",
    "is_valid_pricing_input",
    "format_number",
    "parse_number",
    "JsonQuoteFormRepository",
    "DocumentWebhookNotifier",
]
