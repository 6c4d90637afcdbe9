from __future__ import annotations

import os
import re
import tempfile
import typing as t
from pathlib import Path

from cache_db.exceptions import PersistenceError

from .base import BlobStore

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


class FileBlobStore(BlobStore):
    """Stores each blob as `<directory>/<key>.json`.

    Writes go to a temp file in the same directory and are moved into place
    with os.replace, so readers never see a half-written snapshot.
    """

    def __init__(self, directory: t.Union[str, Path]) -> None:
        self._dir = Path(directory)

    def _path(self, key: str) -> Path:
        return self._dir / f"{_UNSAFE.sub('_', key)}.json"

    def get(self, key: str) -> t.Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"cannot read {path}: {exc}") from exc

    def set(self, key: str, blob: str) -> None:
        path = self._path(key)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(self._dir), prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(blob)
                os.replace(tmp, path)
            except BaseException:
                _unlink_quietly(tmp)
                raise
        except OSError as exc:
            raise PersistenceError(f"cannot write {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise PersistenceError(f"cannot delete {self._path(key)}: {exc}") from exc


def _unlink_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except OSError:
        pass
