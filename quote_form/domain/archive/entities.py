"""Archive domain entities for storing submitted offers."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence


@dataclass(frozen=True)
class ArchiveFile:
    name: str
    content: bytes


@dataclass(frozen=True)
class SubmissionSnapshot:
    form_id: str
    files: Sequence[ArchiveFile]


@dataclass(frozen=True)
class ArchiveReceipt:
    form_id: str
    location: Path


def iter_all_files(snapshot: SubmissionSnapshot) -> Iterable[ArchiveFile]:
    yield from snapshot.files
