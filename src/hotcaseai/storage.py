# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

from pathlib import Path
from typing import Protocol, Union
from urllib.parse import quote

from .env import get_env
from .errors import StorageError

StoredValue = Union[str, bytes]

DEFAULT_STORE_DIR = "~/.hotcase/models"


class KeyValueStore(Protocol):
    def get(self, key: str) -> StoredValue | None: ...

    def set(self, key: str, value: StoredValue) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self) -> None:
        self._items: dict[str, StoredValue] = {}

    def get(self, key: str) -> StoredValue | None:
        return self._items.get(key)

    def set(self, key: str, value: StoredValue) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


class DirectoryStore:
    """One file per key: text values as ``<key>.json``, binary values as ``<key>.bin``.

    Keys are percent-encoded into file names, so distinct keys never share a file.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def _path(self, key: str, suffix: str) -> Path:
        return self.root / f"{quote(key, safe='')}{suffix}"

    def get(self, key: str) -> StoredValue | None:
        binary_path = self._path(key, ".bin")
        text_path = self._path(key, ".json")
        try:
            if binary_path.exists():
                return binary_path.read_bytes()
            if text_path.exists():
                return text_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot read {key!r} from {self.root}: {exc}") from exc
        return None

    def set(self, key: str, value: StoredValue) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self.remove(key)
            if isinstance(value, bytes):
                self._path(key, ".bin").write_bytes(value)
            else:
                self._path(key, ".json").write_text(value, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot write {key!r} to {self.root}: {exc}") from exc

    def remove(self, key: str) -> None:
        for suffix in (".bin", ".json"):
            try:
                self._path(key, suffix).unlink(missing_ok=True)
            except OSError as exc:
                raise StorageError(f"Cannot remove {key!r} from {self.root}: {exc}") from exc


def default_store() -> DirectoryStore:
    root = get_env("HOTCASE_STORE_DIR", DEFAULT_STORE_DIR) or DEFAULT_STORE_DIR
    return DirectoryStore(Path(root).expanduser())
