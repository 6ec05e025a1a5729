"""JSON file store holding the ``form_meta`` and ``form_positionen`` tables."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Sequence

from quote_form.domain.errors import StorageError
from quote_form.domain.models import DiscountKind, FormMeta, FormPosition, PricingTerms
from quote_form.domain.repositories import QuoteFormRepository

logger = logging.getLogger(__name__)

META_TABLE = "form_meta"
POSITIONS_TABLE = "form_positionen"


def _decimal_or_none(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def _datetime_or_none(value: Any) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))


def _json_number(value: Decimal | None) -> float | int | None:
    if value is None:
        return None
    return int(value) if value == value.to_integral_value() else float(value)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _decimal_or(value: Any, default: Decimal) -> Decimal:
    parsed = _decimal_or_none(value)
    return default if parsed is None else parsed


def terms_from_row(row: dict[str, Any], defaults: PricingTerms | None = None) -> PricingTerms:
    defaults = defaults or PricingTerms()
    return PricingTerms(
        discount_value=_decimal_or(row.get("nachlass"), defaults.discount_value),
        discount_kind=DiscountKind(row.get("nachlass_typ") or defaults.discount_kind),
        vat_rate_percent=_decimal_or(row.get("mwst_satz"), defaults.vat_rate_percent),
        cash_discount_rate_percent=_decimal_or(row.get("skonto_satz"), defaults.cash_discount_rate_percent),
        cash_discount_days=int(row.get("skonto_tage") or 0),
    )


def _terms_to_row(terms: PricingTerms) -> dict[str, Any]:
    return {
        "nachlass": _json_number(terms.discount_value),
        "nachlass_typ": DiscountKind(terms.discount_kind).value,
        "mwst_satz": _json_number(terms.vat_rate_percent),
        "skonto_satz": _json_number(terms.cash_discount_rate_percent),
        "skonto_tage": terms.cash_discount_days,
    }


def meta_from_row(row: dict[str, Any], default_terms: PricingTerms | None = None) -> FormMeta:
    return FormMeta(
        id=str(row["id"]),
        supplier_name=row.get("lieferantenname") or "",
        status=row.get("status"),
        calculation_id=row.get("kalkulation_id"),
        general_comment=row.get("allgemeiner_kommentar"),
        pricing_terms=terms_from_row(row, default_terms),
        created_at=_datetime_or_none(row.get("created_at")),
        updated_at=_datetime_or_none(row.get("updated_at")),
    )


def position_from_row(row: dict[str, Any]) -> FormPosition:
    return FormPosition(
        id=str(row["id"]),
        meta_id=str(row["meta_id"]),
        description=row.get("bezeichnung") or "",
        oz=row.get("oz"),
        quantity=_decimal_or_none(row.get("menge")),
        unit=row.get("einheit"),
        unit_price_net=_decimal_or_none(row.get("einzelpreis_netto")),
        external_ref=row.get("ninox_nr"),
        long_text=row.get("langtext"),
        comment=row.get("kommentar"),
        created_at=_datetime_or_none(row.get("created_at")),
        updated_at=_datetime_or_none(row.get("updated_at")),
    )


class JsonQuoteFormRepository(QuoteFormRepository):
    def __init__(self, path: Path, default_terms: PricingTerms | None = None) -> None:
        self._path = Path(path)
        self._default_terms = default_terms or PricingTerms()

    def get_meta(self, form_id: str) -> FormMeta | None:
        row = self._find(self._read()[META_TABLE], form_id)
        return meta_from_row(row, self._default_terms) if row is not None else None

    def list_positions(self, form_id: str) -> Sequence[FormPosition]:
        rows = [row for row in self._read()[POSITIONS_TABLE] if str(row.get("meta_id")) == form_id]
        rows.sort(key=lambda row: row.get("oz") or "")
        return [position_from_row(row) for row in rows]

    def update_positions(self, form_id: str, positions: Sequence[FormPosition]) -> None:
        data = self._read()
        self._apply_positions(data, form_id, positions)
        self._write(data)
        logger.info("Saved %d positions of form %s", len(positions), form_id)

    def update_general_comment(self, form_id: str, comment: str) -> None:
        self._update_meta(form_id, {"allgemeiner_kommentar": comment})

    def update_pricing_terms(self, form_id: str, terms: PricingTerms) -> None:
        self._update_meta(form_id, _terms_to_row(terms))

    def update_status(self, form_id: str, status: str) -> None:
        self._update_meta(form_id, {"status": status})
        logger.info("Form %s set to status %s", form_id, status)

    def save_submission(
        self,
        form_id: str,
        positions: Sequence[FormPosition],
        general_comment: str,
        terms: PricingTerms,
        status: str,
    ) -> None:
        data = self._read()
        self._apply_positions(data, form_id, positions)
        values = {"allgemeiner_kommentar": general_comment, **_terms_to_row(terms), "status": status}
        self._apply_meta(data, form_id, values)
        self._write(data)
        logger.info("Form %s saved with %d positions and status %s", form_id, len(positions), status)

    def _apply_positions(
        self, data: dict[str, list[dict[str, Any]]], form_id: str, positions: Sequence[FormPosition]
    ) -> None:
        rows = [row for row in data[POSITIONS_TABLE] if str(row.get("meta_id")) == form_id]
        for position in positions:
            row = self._find(rows, position.id)
            if row is None:
                raise StorageError("Fehler beim Speichern der Preise")
            row["einzelpreis_netto"] = _json_number(position.unit_price_net)
            row["kommentar"] = position.comment
            row["updated_at"] = _now()

    def _apply_meta(self, data: dict[str, list[dict[str, Any]]], form_id: str, values: dict[str, Any]) -> None:
        row = self._find(data[META_TABLE], form_id)
        if row is None:
            raise StorageError(f"Formular {form_id} nicht gefunden")
        row.update(values)
        row["updated_at"] = _now()

    def _update_meta(self, form_id: str, values: dict[str, Any]) -> None:
        data = self._read()
        self._apply_meta(data, form_id, values)
        self._write(data)

    @staticmethod
    def _find(rows: list[dict[str, Any]], row_id: str) -> dict[str, Any] | None:
        for row in rows:
            if str(row.get("id")) == row_id:
                return row
        return None

    def _read(self) -> dict[str, list[dict[str, Any]]]:
        if not self._path.exists():
            return {META_TABLE: [], POSITIONS_TABLE: []}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Formulardaten konnten nicht gelesen werden: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError("Formulardaten haben ein unbekanntes Format")
        data.setdefault(META_TABLE, [])
        data.setdefault(POSITIONS_TABLE, [])
        return data

    def _write(self, data: dict[str, list[dict[str, Any]]]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Written beside the target, then swapped in whole.
            staging = self._path.with_name(self._path.name + ".tmp")
            staging.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            staging.replace(self._path)
        except OSError as exc:
            raise StorageError(f"Formulardaten konnten nicht gespeichert werden: {exc}") from exc
