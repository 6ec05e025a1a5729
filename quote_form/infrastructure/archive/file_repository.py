"""Filesystem archive keeping a copy of every submitted offer."""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from quote_form.domain.archive.entities import (
    ArchiveFile,
    ArchiveReceipt,
    SubmissionSnapshot,
    iter_all_files,
)
from quote_form.domain.errors import StorageError

logger = logging.getLogger(__name__)


def _normalize_form_id(form_id: str) -> str:
    sanitized = re.sub(r"[^0-9A-Za-z_-]+", "", (form_id or "").strip())
    return sanitized or "form"


class FileSystemSubmissionArchive:
    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def save(self, snapshot: SubmissionSnapshot) -> ArchiveReceipt:
        normalized_id = _normalize_form_id(snapshot.form_id)
        target_dir = self._root / normalized_id
        manifest = {
            "form_id": snapshot.form_id,
            "files": [self._manifest_entry(file) for file in snapshot.files],
        }
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            for file in iter_all_files(snapshot):
                self._write_file(target_dir, file)
            (target_dir / "manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Angebot konnte nicht archiviert werden: {exc}") from exc
        logger.info("Archived offer %s to %s", snapshot.form_id, target_dir)

        return ArchiveReceipt(form_id=normalized_id, location=target_dir)

    @staticmethod
    def _write_file(target_dir: Path, archive_file: ArchiveFile) -> None:
        (target_dir / Path(archive_file.name).name).write_bytes(archive_file.content)

    @staticmethod
    def _manifest_entry(archive_file: ArchiveFile) -> dict[str, object]:
        return {"name": archive_file.name, "bytes": len(archive_file.content)}
