import json
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

import pytest

from quote_form.domain.errors import StorageError
from quote_form.domain.models import DiscountKind, PricingTerms
from quote_form.infrastructure.storage.json_store import JsonQuoteFormRepository


def test_get_meta_maps_columns(repository: JsonQuoteFormRepository, form_id: str):
    meta = repository.get_meta(form_id)

    assert meta is not None
    assert meta.supplier_name == "Trockenbau Schmitz GmbH"
    assert meta.calculation_id == "K-2024-117"
    assert meta.pricing_terms.vat_rate_percent == Decimal("19")
    assert meta.pricing_terms.discount_kind is DiscountKind.PERCENTAGE
    assert not meta.is_submitted
    assert meta.created_at is not None


def test_unknown_form_returns_none(repository: JsonQuoteFormRepository):
    assert repository.get_meta("does-not-exist") is None


def test_positions_are_filtered_and_ordered_by_oz(repository: JsonQuoteFormRepository, form_id: str):
    positions = repository.list_positions(form_id)

    assert [position.id for position in positions] == ["pos-1", "pos-2"]
    assert positions[0].unit_price_net == Decimal("450.5")
    assert positions[0].external_ref == "N-87"
    assert positions[1].unit_price_net is None
    assert positions[1].quantity == Decimal("120")


def test_update_positions_writes_price_and_comment_only(repository: JsonQuoteFormRepository, store_path: Path, form_id: str):
    position = repository.list_positions(form_id)[1]
    changed = replace(position, unit_price_net=Decimal("38.9"), comment="Lieferzeit 3 Wochen", description="x")

    repository.update_positions(form_id, [changed])

    reloaded = repository.list_positions(form_id)[1]
    assert reloaded.unit_price_net == Decimal("38.9")
    assert reloaded.comment == "Lieferzeit 3 Wochen"
    assert reloaded.description == "Abhangdecke Mineralfaser"
    raw = json.loads(store_path.read_text(encoding="utf-8"))
    row = next(item for item in raw["form_positionen"] if item["id"] == "pos-2")
    assert row["einzelpreis_netto"] == 38.9
    assert row["updated_at"]


def test_update_unknown_position_fails(repository: JsonQuoteFormRepository, form_id: str):
    position = replace(repository.list_positions(form_id)[0], id="missing")

    with pytest.raises(StorageError):
        repository.update_positions(form_id, [position])


def test_meta_updates(repository: JsonQuoteFormRepository, form_id: str):
    terms = PricingTerms(
        discount_value=Decimal("250"),
        discount_kind=DiscountKind.FIXED,
        vat_rate_percent=Decimal("0"),
        cash_discount_rate_percent=Decimal("2.5"),
        cash_discount_days=10,
    )

    repository.update_general_comment(form_id, "Preise gültig bis Jahresende")
    repository.update_pricing_terms(form_id, terms)
    repository.update_status(form_id, "abgegeben")

    meta = repository.get_meta(form_id)
    assert meta.general_comment == "Preise gültig bis Jahresende"
    assert meta.pricing_terms == terms
    assert meta.is_submitted


def test_default_terms_apply_when_columns_missing(tmp_path: Path):
    path = tmp_path / "forms.json"
    path.write_text(json.dumps({"form_meta": [{"id": "f", "lieferantenname": "A"}]}), encoding="utf-8")

    meta = JsonQuoteFormRepository(path, default_terms=PricingTerms(vat_rate_percent=Decimal("7"))).get_meta("f")

    assert meta.pricing_terms.vat_rate_percent == Decimal("7")
    assert JsonQuoteFormRepository(path).list_positions("f") == []


def test_corrupt_file_raises_storage_error(tmp_path: Path):
    path = tmp_path / "forms.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        JsonQuoteFormRepository(path).get_meta("f")


def test_missing_file_behaves_like_empty_store(tmp_path: Path):
    assert JsonQuoteFormRepository(tmp_path / "absent.json").get_meta("f") is None


def _other_form_price(store_path: Path):
    raw = json.loads(store_path.read_text(encoding="utf-8"))
    return next(item for item in raw["form_positionen"] if item["id"] == "pos-other")["einzelpreis_netto"]


def test_update_positions_only_touches_rows_of_the_form(repository: JsonQuoteFormRepository, store_path: Path, form_id: str):
    position = repository.list_positions("another-form")[0]

    with pytest.raises(StorageError):
        repository.update_positions(form_id, [replace(position, unit_price_net=Decimal("0.01"))])
    assert _other_form_price(store_path) == 10


def test_save_submission_writes_everything_at_once(repository: JsonQuoteFormRepository, store_path: Path, form_id: str):
    position = replace(repository.list_positions(form_id)[1], unit_price_net=Decimal("38.9"))
    terms = PricingTerms(discount_value=Decimal("3"), vat_rate_percent=Decimal("7"))

    repository.save_submission(form_id, [position], "Angebot freibleibend", terms, "abgegeben")

    meta = repository.get_meta(form_id)
    assert meta.is_submitted
    assert meta.general_comment == "Angebot freibleibend"
    assert meta.pricing_terms == terms
    assert repository.list_positions(form_id)[1].unit_price_net == Decimal("38.9")
    assert not store_path.with_name(store_path.name + ".tmp").exists()


def test_save_submission_with_foreign_position_changes_nothing(
    repository: JsonQuoteFormRepository, store_path: Path, form_id: str
):
    before = store_path.read_text(encoding="utf-8")
    own = replace(repository.list_positions(form_id)[1], unit_price_net=Decimal("38.9"))
    foreign = replace(repository.list_positions("another-form")[0], unit_price_net=Decimal("0.01"))

    with pytest.raises(StorageError):
        repository.save_submission(form_id, [own, foreign], "", PricingTerms(), "abgegeben")

    assert store_path.read_text(encoding="utf-8") == before
    assert not repository.get_meta(form_id).is_submitted


def test_save_submission_for_unknown_form_fails(repository: JsonQuoteFormRepository, store_path: Path):
    before = store_path.read_text(encoding="utf-8")

    with pytest.raises(StorageError):
        repository.save_submission("unknown", [], "", PricingTerms(), "abgegeben")
    assert store_path.read_text(encoding="utf-8") == before
