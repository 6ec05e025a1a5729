"""Archive application use cases."""
from __future__ import annotations

from dataclasses import dataclass

from quote_form.domain.archive.entities import ArchiveFile, ArchiveReceipt, SubmissionSnapshot
from quote_form.domain.models import FormMeta, FormPosition, PricingResult
from quote_form.infrastructure.archive.file_repository import FileSystemSubmissionArchive
from quote_form.presentation.offer_report import render_csv, render_html, render_xlsx


@dataclass(slots=True)
class ArchiveSubmissionUseCase:
    repository: FileSystemSubmissionArchive

    def execute(self, meta: FormMeta, positions: list[FormPosition], pricing: PricingResult) -> ArchiveReceipt:
        snapshot = SubmissionSnapshot(
            form_id=meta.id,
            files=[
                ArchiveFile(name="angebot.csv", content=render_csv(positions)),
                ArchiveFile(name="angebot.html", content=render_html(meta, positions, pricing).encode("utf-8")),
                ArchiveFile(name="angebot.xlsx", content=render_xlsx(positions, pricing)),
            ],
        )
        return self.repository.save(snapshot)
