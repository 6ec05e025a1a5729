"""Webhook that starts document generation once an offer is submitted."""
from __future__ import annotations

import logging

import requests

from quote_form.domain.repositories import SubmissionNotifier

logger = logging.getLogger(__name__)


class DocumentWebhookNotifier(SubmissionNotifier):
    def __init__(self, url: str | None, timeout: float = 10.0) -> None:
        self._url = url
        self._timeout = timeout

    def notify_submitted(self, form_id: str) -> None:
        if not self._url:
            logger.warning("Webhook URL not set; skipping document generation for %s", form_id)
            return

        try:
            response = requests.post(self._url, json={"uuid": form_id}, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException:
            logger.exception("Failed to trigger document webhook for %s", form_id)
            return
        logger.info("Document webhook triggered for %s", form_id)
