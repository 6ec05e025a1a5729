"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from .models import FormMeta, FormPosition, PricingTerms


class QuoteFormRepository(Protocol):
    """Reads and writes form headers and their positions."""

    def get_meta(self, form_id: str) -> FormMeta | None:
        ...

    def list_positions(self, form_id: str) -> Sequence[FormPosition]:
        ...

    def update_positions(self, form_id: str, positions: Sequence[FormPosition]) -> None:
        ...

    def update_general_comment(self, form_id: str, comment: str) -> None:
        ...

    def update_pricing_terms(self, form_id: str, terms: PricingTerms) -> None:
        ...

    def update_status(self, form_id: str, status: str) -> None:
        ...

    def save_submission(
        self,
        form_id: str,
        positions: Sequence[FormPosition],
        general_comment: str,
        terms: PricingTerms,
        status: str,
    ) -> None:
        """Write prices, comments, terms and status together or not at all."""
        ...


class SubmissionNotifier(Protocol):
    """Told once a form has been submitted."""

    def notify_submitted(self, form_id: str) -> None:
        ...
