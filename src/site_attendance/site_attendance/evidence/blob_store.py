from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Protocol

from werkzeug.utils import secure_filename

from ..core.exceptions import StorageError


def evidence_key(*, site_id: str, person_id: str, taken_at: datetime) -> str:
    """Write-once key: <site>/<person>/<epoch ms>.jpg."""
    millis = int(taken_at.timestamp() * 1000)
    return f"{secure_filename(site_id) or '_'}/{secure_filename(person_id) or '_'}/{millis}.jpg"


class BlobStore(Protocol):
    """Opaque evidence storage. Keys are never overwritten."""

    def put(self, key: str, data: bytes, *, content_type: str = "image/jpeg") -> str:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Filesystem-backed store rooted at one directory."""

    def __init__(self, root: str | Path):
        self._root = Path(root)

    def put(self, key: str, data: bytes, *, content_type: str = "image/jpeg") -> str:
        target = (self._root / key).resolve()
        if self._root.resolve() not in target.parents:
            raise StorageError(f"evidence key escapes store root: {key!r}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "xb") as fh:
                fh.write(data)
        except OSError as exc:
            raise StorageError(f"evidence upload failed for {key!r}: {exc}") from exc
        return key
