"""Offer report generators: table rows, CSV, HTML and XLSX downloads."""
from __future__ import annotations

import csv
import html
import io
from typing import Sequence

import pandas as pd

from quote_form.domain.models import FormMeta, FormPosition, PricingResult
from quote_form.domain.services import line_total
from quote_form.infrastructure.parsing.numbers import format_number

PRICING_LABELS = (
    ("net_total", "Gesamtbetrag Netto"),
    ("discount_amount", "Nachlass"),
    ("net_after_discount", "Netto nach Nachlass"),
    ("vat_amount", "MwSt"),
    ("gross_total", "Gesamtbetrag Brutto"),
    ("cash_discount_amount", "Skonto"),
    ("final_gross_total", "Gesamtbetrag Brutto (skontiert)"),
    ("final_net_total", "Gesamtbetrag Netto inkl. Nachlass"),
)


def _optional(value: object) -> str:
    return "" if value is None else str(value)


def positions_to_rows(positions: Sequence[FormPosition]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for position in positions:
        rows.append(
            {
                "oz": _optional(position.oz),
                "bezeichnung": position.description,
                "menge": _optional(position.quantity),
                "einheit": _optional(position.unit),
                "einzelpreis_netto": format_number(position.unit_price_net or 0),
                "gesamtpreis_netto": format_number(line_total(position)),
                "kommentar": _optional(position.comment),
            }
        )
    return rows


def pricing_to_rows(result: PricingResult) -> list[dict[str, str]]:
    return [
        {"position": label, "betrag": format_number(getattr(result, field))}
        for field, label in PRICING_LABELS
    ]


def render_csv(positions: Sequence[FormPosition]) -> bytes:
    rows = positions_to_rows(positions)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [], delimiter=";")
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def _table(rows: list[dict[str, str]]) -> str:
    header = "".join(f"<th>{html.escape(col)}</th>" for col in rows[0].keys())
    body = "".join(
        "<tr>" + "".join(f"<td>{html.escape(value)}</td>" for value in row.values()) + "</tr>"
        for row in rows
    )
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body}</tbody></table>"


def render_html(meta: FormMeta, positions: Sequence[FormPosition], pricing: PricingResult) -> str:
    rows = positions_to_rows(positions)
    parts = [f"<h1>{html.escape(meta.supplier_name)}</h1>"]
    if meta.calculation_id:
        parts.append(f"<p>Angebotsformular &bull; {html.escape(meta.calculation_id)}</p>")
    parts.append(_table(rows) if rows else "<p>Keine Positionen.</p>")
    parts.append(_table(pricing_to_rows(pricing)))
    if meta.general_comment:
        parts.append(f"<p>{html.escape(meta.general_comment)}</p>")
    return "".join(parts)


def render_xlsx(positions: Sequence[FormPosition], pricing: PricingResult) -> bytes:
    positions_df = pd.DataFrame(
        [
            {
                "oz": position.oz,
                "bezeichnung": position.description,
                "menge": float(position.quantity) if position.quantity is not None else None,
                "einheit": position.unit,
                "einzelpreis_netto": float(position.unit_price_net or 0),
                "gesamtpreis_netto": float(line_total(position)),
                "kommentar": position.comment,
            }
            for position in positions
        ],
        columns=["oz", "bezeichnung", "menge", "einheit", "einzelpreis_netto", "gesamtpreis_netto", "kommentar"],
    )
    summary_df = pd.DataFrame(
        [{"position": label, "betrag": float(getattr(pricing, field))} for field, label in PRICING_LABELS]
    )
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        positions_df.to_excel(writer, sheet_name="Positionen", index=False)
        summary_df.to_excel(writer, sheet_name="Summen", index=False)
    buf.seek(0)
    return buf.getvalue()
