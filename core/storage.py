import logging
import os
import random
import shutil
import time
from typing import Protocol

from fastapi import Request

logger = logging.getLogger(__name__)


class FileStore(Protocol):
    """Where uploaded spreadsheets live. Keys are opaque names handed out by ``save``."""

    def save(self, content: bytes, original_name: str) -> str: ...

    def exists(self, key: str) -> bool: ...

    def read(self, key: str) -> bytes: ...

    def copy(self, key: str) -> str: ...

    def delete(self, key: str) -> bool: ...


def _millis() -> int:
    return int(time.time() * 1000)


class LocalFileStore:
    """Stores files flat inside ``root``; keys are bare file names."""

    def __init__(self, root: str):
        self.root = os.path.abspath(root)
        os.makedirs(self.root, exist_ok=True)

    def _path(self, key: str) -> str:
        if not key or key != os.path.basename(key) or key in (".", ".."):
            raise ValueError(f"Invalid file key: {key!r}")
        return os.path.join(self.root, key)

    def save(self, content: bytes, original_name: str) -> str:
        ext = os.path.splitext(original_name or "")[1].lower()
        key = f"excelFile-{_millis()}-{random.randint(0, 10**9)}{ext}"
        with open(self._path(key), "wb") as out:
            out.write(content)
        return key

    def exists(self, key: str) -> bool:
        try:
            return os.path.isfile(self._path(key))
        except ValueError:
            return False

    def read(self, key: str) -> bytes:
        with open(self._path(key), "rb") as f:
            return f.read()

    def copy(self, key: str) -> str:
        base, ext = os.path.splitext(key)
        new_key = f"{base}-copy-{_millis()}-{random.randint(0, 10**9)}{ext}"
        shutil.copyfile(self._path(key), self._path(new_key))
        return new_key

    def delete(self, key: str) -> bool:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            logger.warning("File %s already gone, nothing to delete", key)
            return False
        except ValueError:
            logger.warning("Refusing to delete invalid file key %r", key)
            return False
        return True


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store
