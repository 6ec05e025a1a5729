from dataclasses import replace
from decimal import Decimal

import pytest

from quote_form.application.dto import SubmissionRequest
from quote_form.application.use_cases import (
    LoadQuoteFormUseCase,
    QuoteFormContext,
    SubmitQuoteUseCase,
    apply_comment,
    apply_price_input,
)
from quote_form.domain.errors import (
    ConfirmationRequiredError,
    FormAlreadySubmittedError,
    ForeignPositionError,
    FormNotFoundError,
    InvalidPricingTermsError,
    MissingFormIdError,
    NoPricesError,
    StorageError,
)
from quote_form.domain.models import DiscountKind, PricingTerms


@pytest.fixture
def context(repository, notifier) -> QuoteFormContext:
    return QuoteFormContext(repository=repository, notifier=notifier)


def priced_request(context, form_id, **overrides) -> SubmissionRequest:
    positions = list(context.repository.list_positions(form_id))
    positions = [replace(p, unit_price_net=Decimal("38.90")) if p.id == "pos-2" else p for p in positions]
    values = dict(
        form_id=form_id,
        positions=positions,
        raw_price_inputs={"pos-1": "450,50", "pos-2": "38,90"},
        general_comment="Angebot freibleibend",
        pricing_terms=PricingTerms(discount_value=Decimal("5"), vat_rate_percent=Decimal("19")),
    )
    values.update(overrides)
    return SubmissionRequest(**values)


def test_load_returns_positions_and_live_totals(context, form_id):
    view = LoadQuoteFormUseCase(context).execute(form_id)

    assert view.meta.id == form_id
    assert [p.id for p in view.positions] == ["pos-1", "pos-2"]
    assert view.pricing.net_total == Decimal("450.5")
    assert view.pricing.gross_total == Decimal("450.5") * Decimal("1.19")
    assert not view.is_submitted


def test_load_without_id_or_unknown_id(context):
    with pytest.raises(MissingFormIdError):
        LoadQuoteFormUseCase(context).execute(None)
    with pytest.raises(FormNotFoundError):
        LoadQuoteFormUseCase(context).execute("unknown")


def test_submit_persists_everything_and_locks_form(context, notifier, form_id):
    response = SubmitQuoteUseCase(context).execute(priced_request(context, form_id))

    meta = context.repository.get_meta(form_id)
    assert meta.is_submitted
    assert meta.general_comment == "Angebot freibleibend"
    assert meta.pricing_terms.discount_value == Decimal("5")
    assert context.repository.list_positions(form_id)[1].unit_price_net == Decimal("38.9")
    assert notifier.calls == [form_id]

    expected_net = Decimal("450.5") + Decimal("120") * Decimal("38.90")
    assert response.meta.is_submitted
    assert response.pricing.net_total == expected_net
    assert response.pricing.discount_amount == expected_net * Decimal("0.05")


def test_submitted_form_cannot_be_submitted_again(context, notifier, form_id):
    use_case = SubmitQuoteUseCase(context)
    use_case.execute(priced_request(context, form_id))

    with pytest.raises(FormAlreadySubmittedError):
        use_case.execute(priced_request(context, form_id))
    assert notifier.calls == [form_id]


def test_submit_requires_a_price(context, notifier, form_id):
    positions = [replace(p, unit_price_net=None) for p in context.repository.list_positions(form_id)]

    with pytest.raises(NoPricesError):
        SubmitQuoteUseCase(context).execute(priced_request(context, form_id, positions=positions))
    assert notifier.calls == []


def test_empty_prices_need_confirmation(context, notifier, form_id):
    request = priced_request(context, form_id, raw_price_inputs={"pos-1": "450,50"})

    with pytest.raises(ConfirmationRequiredError) as excinfo:
        SubmitQuoteUseCase(context).execute(request)
    assert [p.id for p in excinfo.value.positions] == ["pos-2"]
    assert not context.repository.get_meta(form_id).is_submitted

    SubmitQuoteUseCase(context).execute(replace(request, confirm_incomplete=True))
    assert context.repository.get_meta(form_id).is_submitted


def test_invalid_terms_are_rejected_before_writing(context, notifier, form_id):
    request = priced_request(context, form_id, pricing_terms=PricingTerms(vat_rate_percent=Decimal("119")))

    with pytest.raises(InvalidPricingTermsError):
        SubmitQuoteUseCase(context).execute(request)
    assert context.repository.list_positions(form_id)[1].unit_price_net is None
    assert notifier.calls == []


def test_fixed_over_discount_is_submitted_with_warning(context, form_id):
    terms = PricingTerms(discount_value=Decimal("100000"), discount_kind=DiscountKind.FIXED)

    response = SubmitQuoteUseCase(context).execute(priced_request(context, form_id, pricing_terms=terms))

    assert response.pricing.net_after_discount < 0
    assert response.warnings


def test_positions_of_another_form_are_rejected(context, notifier, form_id):
    foreign = replace(context.repository.list_positions("another-form")[0], unit_price_net=Decimal("0.01"))
    request = priced_request(context, form_id)
    request = replace(request, positions=[*request.positions, foreign])

    with pytest.raises(ForeignPositionError) as excinfo:
        SubmitQuoteUseCase(context).execute(request)

    assert excinfo.value.position_ids == ("pos-other",)
    assert context.repository.list_positions("another-form")[0].unit_price_net == Decimal("10")
    assert context.repository.list_positions(form_id)[1].unit_price_net is None
    assert not context.repository.get_meta(form_id).is_submitted
    assert notifier.calls == []


class FailingSaveRepository:
    def __init__(self, inner) -> None:
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def save_submission(self, *args, **kwargs):
        raise StorageError("Formulardaten konnten nicht gespeichert werden")


def test_failed_save_does_not_notify(repository, notifier, form_id):
    context = QuoteFormContext(repository=FailingSaveRepository(repository), notifier=notifier)

    with pytest.raises(StorageError):
        SubmitQuoteUseCase(context).execute(priced_request(context, form_id))
    assert not repository.get_meta(form_id).is_submitted
    assert notifier.calls == []


def test_apply_price_input_cleans_and_parses(context, form_id):
    position = context.repository.list_positions(form_id)[1]

    updated, cleaned = apply_price_input(position, "1.234,5 €")
    assert cleaned == "1.234,5"
    assert updated.unit_price_net == Decimal("1234.5")

    cleared, cleaned = apply_price_input(position, "")
    assert cleaned == ""
    assert cleared.unit_price_net == 0


def test_apply_comment(context, form_id):
    position = context.repository.list_positions(form_id)[0]

    assert apply_comment(position, False, "ignored").comment is None
    assert apply_comment(position, True, "").comment is None
    assert apply_comment(position, True, "Neu").comment == "Neu"
