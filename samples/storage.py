"""Key-value storage backends for the sample log and saved credentials."""

import asyncio
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import yaml

KEY_USERNAME = "s360_username"
KEY_PASSWORD = "s360_password"

# Owner read/write only; the store holds the saved password
FILE_MODE = 0o600


class KeyValueStore:
    """String-keyed, string-valued async storage."""

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Store kept in process memory; lost when the session ends."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class YamlFileStore(KeyValueStore):
    """
    Store backed by a single YAML mapping on disk.

    Every set/delete reloads the file, applies the change and writes it
    back. File access runs in a worker thread so callers can await it.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader)
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        os.chmod(self.path, FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as fp:
            yaml.dump(
                data,
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )

    def _set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def _delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def _get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._delete, key)


async def save_credentials(store: KeyValueStore, username: str, password: str) -> None:
    await asyncio.gather(
        store.set(KEY_USERNAME, username),
        store.set(KEY_PASSWORD, password),
    )


async def load_credentials(store: KeyValueStore) -> Tuple[Optional[str], Optional[str]]:
    """Return (username, password); either may be None."""
    username, password = await asyncio.gather(
        store.get(KEY_USERNAME),
        store.get(KEY_PASSWORD),
    )
    return username, password


async def clear_credentials(store: KeyValueStore) -> None:
    await asyncio.gather(
        store.delete(KEY_USERNAME),
        store.delete(KEY_PASSWORD),
    )
