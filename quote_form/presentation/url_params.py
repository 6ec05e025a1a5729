"""Reading the form identifier from the link a supplier opened."""
from __future__ import annotations

from typing import Any, Mapping

FORM_ID_PARAM = "id"


def get_form_id(query_params: Mapping[str, Any]) -> str | None:
    value = query_params.get(FORM_ID_PARAM)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    value = str(value).strip()
    return value or None
