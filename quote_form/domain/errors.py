"""Errors raised by the quote form application layer."""
from __future__ import annotations

from typing import Sequence

from .models import FormPosition


class QuoteFormError(Exception):
    """Base class for failures the front-ends show to the supplier."""


class MissingFormIdError(QuoteFormError):
    def __init__(self) -> None:
        super().__init__("Keine Formular-ID angegeben")


class FormNotFoundError(QuoteFormError):
    def __init__(self, form_id: str) -> None:
        super().__init__("Formular nicht gefunden")
        self.form_id = form_id


class FormAlreadySubmittedError(QuoteFormError):
    def __init__(self, form_id: str) -> None:
        super().__init__("Dieses Angebot wurde bereits abgegeben")
        self.form_id = form_id


class NoPricesError(QuoteFormError):
    def __init__(self) -> None:
        super().__init__("Bitte geben Sie mindestens einen Preis ein, um das Angebot abzuschicken.")


class ConfirmationRequiredError(QuoteFormError):
    def __init__(self, positions: Sequence[FormPosition]) -> None:
        super().__init__(
            "Einige Preise wurden nicht ausgefüllt. Bitte bestätigen Sie das Abschicken ohne alle Einträge."
        )
        self.positions = tuple(positions)


class InvalidPricingTermsError(QuoteFormError):
    def __init__(self) -> None:
        super().__init__("Ungültige Konditionen: Prozentwerte müssen zwischen 0 und 100 liegen")


class StorageError(QuoteFormError):
    """Raised when the form store cannot be read or written."""


class ForeignPositionError(QuoteFormError):
    def __init__(self, form_id: str, position_ids: Sequence[str]) -> None:
        super().__init__("Einige Positionen gehören nicht zu diesem Formular")
        self.form_id = form_id
        self.position_ids = tuple(position_ids)
