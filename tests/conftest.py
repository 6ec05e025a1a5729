import json
from pathlib import Path

import pytest

from quote_form.infrastructure.storage.json_store import JsonQuoteFormRepository

FORM_ID = "7f1c9a2e-3b4d-4c5e-8f60-112233445566"


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    path = tmp_path / "forms.json"
    data = {
        "form_meta": [
            {
                "id": FORM_ID,
                "lieferantenname": "Trockenbau Schmitz GmbH",
                "status": "entwurf",
                "kalkulation_id": "K-2024-117",
                "allgemeiner_kommentar": None,
                "nachlass": 0,
                "nachlass_typ": "percentage",
                "mwst_satz": 19,
                "skonto_satz": 0,
                "skonto_tage": 0,
                "created_at": "2024-06-03T08:15:00+00:00",
                "updated_at": None,
            }
        ],
        "form_positionen": [
            {
                "id": "pos-2",
                "meta_id": FORM_ID,
                "oz": "01.02",
                "bezeichnung": "Abhangdecke Mineralfaser",
                "menge": 120,
                "einheit": "m2",
                "einzelpreis_netto": None,
                "ninox_nr": "N-88",
                "langtext": "Lieferung und Montage inkl. Unterkonstruktion",
                "kommentar": None,
            },
            {
                "id": "pos-1",
                "meta_id": FORM_ID,
                "oz": "01.01",
                "bezeichnung": "Baustelleneinrichtung",
                "menge": 1,
                "einheit": "psch",
                "einzelpreis_netto": 450.5,
                "ninox_nr": "N-87",
                "langtext": None,
                "kommentar": "inkl. Container",
            },
            {
                "id": "pos-other",
                "meta_id": "another-form",
                "oz": "01.01",
                "bezeichnung": "Fremde Position",
                "menge": 3,
                "einheit": "St",
                "einzelpreis_netto": 10,
            },
        ],
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def repository(store_path: Path) -> JsonQuoteFormRepository:
    return JsonQuoteFormRepository(store_path)


class RecordingNotifier:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def notify_submitted(self, form_id: str) -> None:
        self.calls.append(form_id)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def form_id() -> str:
    return FORM_ID
