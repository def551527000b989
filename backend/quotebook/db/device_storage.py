from __future__ import annotations

import json
import re
from pathlib import Path

from quotebook.utils.logging import get_logger

logger = get_logger(__name__)

_DEVICE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def is_valid_device_id(device_id: str | None) -> bool:
    return bool(device_id and _DEVICE_ID_RE.match(device_id))


class FileDeviceStorage:
    """Key-value storage for one device, backed by a single JSON file.

    Values are strings. Every write rewrites the whole file, so two writers on
    the same device race and the last one wins.
    """

    def __init__(self, root_dir: str | Path, device_id: str) -> None:
        if not is_valid_device_id(device_id):
            raise ValueError(f"Invalid device id: {device_id!r}")
        self.device_id = device_id
        self._path = Path(root_dir) / f"{device_id}.json"

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Device storage file {self._path} does not hold an object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self._path)

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            logger.warning("Discarding unreadable device storage", extra={"device_id": self.device_id})
            data = {}
        data[key] = value
        self._write_all(data)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


def open_device_storage(root_dir: str | Path, device_id: str | None) -> FileDeviceStorage | None:
    """Return storage for ``device_id``, or None when no usable device is identified."""
    if not is_valid_device_id(device_id):
        if device_id:
            logger.warning("Ignoring malformed device id", extra={"device_id": device_id[:64]})
        return None
    return FileDeviceStorage(root_dir, device_id)
