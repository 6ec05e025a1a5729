"""Streamlit front-end for the supplier quote form."""
from __future__ import annotations

import logging
from decimal import Decimal

import pandas as pd
import streamlit as st

from quote_form import (
    DocumentWebhookNotifier,
    JsonQuoteFormRepository,
    LoadQuoteFormUseCase,
    QuoteFormContext,
    SubmitQuoteUseCase,
    summarize,
)
from quote_form.application.archive.use_cases import ArchiveSubmissionUseCase
from quote_form.application.dto import QuoteFormView, SubmissionRequest, SubmissionResponse
from quote_form.application.use_cases import apply_comment, apply_price_input
from quote_form.config import SETTINGS
from quote_form.domain.errors import ConfirmationRequiredError, QuoteFormError
from quote_form.domain.models import DiscountKind, PricingTerms
from quote_form.domain.pricing import convert_discount, is_valid_pricing_input
from quote_form.domain.services import has_priced_positions, positions_missing_prices
from quote_form.infrastructure.archive.file_repository import FileSystemSubmissionArchive
from quote_form.infrastructure.parsing.numbers import ReadingKind, format_number, read_number
from quote_form.logging_setup import configure_logging
from quote_form.presentation.offer_report import (
    positions_to_rows,
    pricing_to_rows,
    render_csv,
    render_html,
    render_xlsx,
)
from quote_form.presentation.url_params import get_form_id

configure_logging(SETTINGS.log_level)
logger = logging.getLogger(__name__)
st.set_page_config(page_title="Angebotsformular", layout="wide")


def build_context() -> QuoteFormContext:
    default_terms = PricingTerms(vat_rate_percent=SETTINGS.default_vat_rate)
    return QuoteFormContext(
        repository=JsonQuoteFormRepository(SETTINGS.store_path, default_terms=default_terms),
        notifier=DocumentWebhookNotifier(SETTINGS.webhook_url, SETTINGS.webhook_timeout),
    )


def init_state(view: QuoteFormView) -> None:
    if st.session_state.get("form_id") == view.meta.id:
        return
    st.session_state["form_id"] = view.meta.id
    st.session_state["positions"] = list(view.positions)
    st.session_state["price_inputs"] = {
        p.id: format_number(p.unit_price_net) for p in view.positions if p.unit_price_net and p.unit_price_net > 0
    }
    st.session_state["comment_enabled"] = {p.id: True for p in view.positions if p.comment}
    st.session_state["general_comment"] = view.meta.general_comment or ""
    terms = view.meta.pricing_terms
    st.session_state["terms_text"] = {
        "discount": format_number(terms.discount_value),
        "vat": format_number(terms.vat_rate_percent),
        "cash_discount": format_number(terms.cash_discount_rate_percent),
    }
    st.session_state["discount_kind"] = DiscountKind(terms.discount_kind).value
    st.session_state["cash_discount_days"] = terms.cash_discount_days


def read_terms_input() -> tuple[PricingTerms, list[str]]:
    problems: list[str] = []
    values: dict[str, Decimal] = {}
    for key, label in (("discount", "Nachlass"), ("vat", "MwSt"), ("cash_discount", "Skonto")):
        reading = read_number(st.session_state["terms_text"][key])
        if reading.is_value:
            values[key] = reading.value
        else:
            values[key] = Decimal("0")
            if reading.kind is ReadingKind.INVALID:
                problems.append(f"{label}: ungültige Zahl")
    terms = PricingTerms(
        discount_value=values["discount"],
        discount_kind=DiscountKind(st.session_state["discount_kind"]),
        vat_rate_percent=values["vat"],
        cash_discount_rate_percent=values["cash_discount"],
        cash_discount_days=int(st.session_state["cash_discount_days"]),
    )
    return terms, problems


def render_pricing(positions, terms: PricingTerms):
    pricing, warnings = summarize(positions, terms)
    st.dataframe(pd.DataFrame(pricing_to_rows(pricing)), hide_index=True, use_container_width=True)
    for warning in warnings:
        st.warning(warning)
    return pricing


def archive_submission(response: SubmissionResponse) -> None:
    try:
        ArchiveSubmissionUseCase(FileSystemSubmissionArchive(SETTINGS.archive_dir)).execute(
            response.meta, list(response.positions), response.pricing
        )
    except QuoteFormError:
        logger.exception("Archiving offer %s failed", response.meta.id)
        # Shown on the locked view after the rerun.
        st.session_state["archive_warning"] = (
            "Ihr Angebot wurde gespeichert, die Archivkopie konnte jedoch nicht angelegt werden."
        )


def render_header(view: QuoteFormView) -> None:
    meta = view.meta
    st.title(meta.supplier_name)
    st.caption(f"Angebotsformular • {meta.calculation_id or 'Preisabfrage'}")
    if meta.status:
        st.markdown(f"**Status:** {'Abgegeben' if meta.is_submitted else 'Entwurf'}")


def render_submitted(view: QuoteFormView) -> None:
    archive_warning = st.session_state.pop("archive_warning", None)
    if archive_warning:
        st.warning(archive_warning)
    st.success(
        "Vielen Dank! Ihre Preise wurden erfolgreich übermittelt und gespeichert. "
        "Das Formular ist nun gesperrt und kann nicht mehr bearbeitet werden."
    )
    st.subheader("Abgegebenes Angebot")
    st.dataframe(pd.DataFrame(positions_to_rows(view.positions)), hide_index=True, use_container_width=True)
    st.subheader("Summen")
    st.dataframe(pd.DataFrame(pricing_to_rows(view.pricing)), hide_index=True, use_container_width=True)
    st.markdown("**Allgemeiner Kommentar**")
    st.write(view.meta.general_comment or "Kein allgemeiner Kommentar hinterlassen")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button(
            "Angebot als CSV",
            data=render_csv(view.positions),
            file_name=f"angebot_{view.meta.id}.csv",
            mime="text/csv",
        )
    with col2:
        st.download_button(
            "Angebot als HTML",
            data=render_html(view.meta, view.positions, view.pricing).encode("utf-8"),
            file_name=f"angebot_{view.meta.id}.html",
            mime="text/html",
        )
    with col3:
        st.download_button(
            "Angebot als Excel",
            data=render_xlsx(view.positions, view.pricing),
            file_name=f"angebot_{view.meta.id}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )


def render_positions_editor() -> None:
    positions = st.session_state["positions"]
    price_inputs: dict[str, str] = st.session_state["price_inputs"]
    comment_enabled: dict[str, bool] = st.session_state["comment_enabled"]

    show_long_texts = False
    if any(p.long_text and p.long_text.strip() for p in positions):
        show_long_texts = st.toggle("Alle Langtexte anzeigen", key="global_long_text")

    updated = []
    for index, position in enumerate(positions):
        with st.container(border=True):
            col_desc, col_unit, col_price = st.columns([6, 1, 2])
            with col_desc:
                st.markdown(f"**{position.oz or f'#{index + 1}'}** {position.description}")
                if position.long_text and position.long_text.strip():
                    with st.expander("Langtext", expanded=show_long_texts):
                        st.text(position.long_text)
            with col_unit:
                if position.unit:
                    st.caption(f"Einheit: {position.unit}")
                if position.quantity is not None:
                    st.caption(f"Menge: {position.quantity}")
            with col_price:
                raw = st.text_input(
                    "Einzelpreis netto (€)",
                    value=price_inputs.get(position.id, ""),
                    placeholder="0,00",
                    key=f"price_{position.id}",
                )
            position, cleaned = apply_price_input(position, raw)
            if cleaned:
                price_inputs[position.id] = cleaned
            else:
                price_inputs.pop(position.id, None)

            enabled = st.checkbox(
                "Kommentar hinzufügen",
                value=comment_enabled.get(position.id, False),
                key=f"comment_toggle_{position.id}",
            )
            comment_enabled[position.id] = enabled
            text = None
            if enabled:
                text = st.text_area(
                    "Ihr Kommentar zu dieser Position...",
                    value=position.comment or "",
                    key=f"comment_{position.id}",
                )
            updated.append(apply_comment(position, enabled, text))
    st.session_state["positions"] = updated


def render_terms_editor() -> None:
    terms_text = st.session_state["terms_text"]
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.session_state["discount_kind"] = st.radio(
            "Nachlass",
            options=[kind.value for kind in DiscountKind],
            format_func=lambda value: "%" if value == DiscountKind.PERCENTAGE.value else "€",
            index=0 if st.session_state["discount_kind"] == DiscountKind.PERCENTAGE.value else 1,
            horizontal=True,
        )
        terms_text["discount"] = st.text_input("Nachlass-Wert", value=terms_text["discount"])
    with col2:
        terms_text["vat"] = st.text_input("MwSt (%)", value=terms_text["vat"])
    with col3:
        terms_text["cash_discount"] = st.text_input("Skonto (%)", value=terms_text["cash_discount"])
    with col4:
        st.session_state["cash_discount_days"] = st.number_input(
            "Skonto-Tage", min_value=0, step=1, value=int(st.session_state["cash_discount_days"])
        )


form_id = get_form_id(st.query_params)
context = build_context()

try:
    view = LoadQuoteFormUseCase(context).execute(form_id)
except QuoteFormError as exc:
    st.error(f"Formular nicht gefunden: {exc}")
    st.caption("Bitte überprüfen Sie den Link oder wenden Sie sich an den Absender.")
    st.stop()

render_header(view)

if view.is_submitted:
    render_submitted(view)
else:
    init_state(view)
    st.subheader("Positionen & Preise")
    st.caption("Bitte geben Sie Ihre Einzelpreise netto ein")
    render_positions_editor()

    st.subheader("Konditionen")
    render_terms_editor()
    terms, problems = read_terms_input()
    for problem in problems:
        st.warning(problem)
    if not is_valid_pricing_input(terms):
        st.error("Prozentwerte müssen zwischen 0 und 100 liegen.")

    positions = st.session_state["positions"]
    st.subheader("Summen")
    pricing = render_pricing(positions, terms)
    if terms.discount_kind == DiscountKind.PERCENTAGE:
        st.caption(f"Nachlass entspricht {format_number(pricing.discount_amount)} €")
    else:
        share = convert_discount(terms.discount_value, terms.discount_kind, pricing.net_total)
        st.caption(f"Nachlass entspricht {format_number(share)} %")

    st.session_state["general_comment"] = st.text_area(
        "Allgemeiner Kommentar (optional)",
        value=st.session_state["general_comment"],
        placeholder="Hier können Sie zusätzliche Hinweise oder Informationen hinterlassen …",
    )

    st.info("Mit dem Absenden bestätige ich die Richtigkeit der Preise und erkenne die Vergabebedingungen an.")
    missing = positions_missing_prices(positions, st.session_state["price_inputs"])
    confirm = False
    if missing:
        confirm = st.checkbox(
            "Einige Preise wurden nicht ausgefüllt. Trotzdem abschicken",
            key="confirm_incomplete",
        )

    priced = has_priced_positions(positions)
    if not priced:
        st.caption("Bitte geben Sie mindestens einen Preis ein, um das Angebot abzuschicken.")

    if st.button("Abschicken", type="primary", disabled=not priced):
        request = SubmissionRequest(
            form_id=view.meta.id,
            positions=positions,
            raw_price_inputs=st.session_state["price_inputs"],
            general_comment=st.session_state["general_comment"],
            pricing_terms=terms,
            confirm_incomplete=confirm,
        )
        try:
            with st.spinner("Sende..."):
                response = SubmitQuoteUseCase(context).execute(request)
        except ConfirmationRequiredError as exc:
            st.warning(str(exc))
        except QuoteFormError as exc:
            st.error(str(exc))
        else:
            archive_submission(response)
            st.session_state["form_id"] = None
            st.rerun()

st.caption(f"Angebotsformular • Version 2.0 • Formular-ID: {form_id}")
