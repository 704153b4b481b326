"""
Local draft cache.

Answers in progress are persisted per form under a key derived from the form's
first field id. Storage failures never reach the caller: reads degrade to "no
data" and writes are logged and dropped.
"""
import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

from dynaform.client.defaults import resolve_default_value
from dynaform.client.errors import StorageAccessError
from dynaform.client.schemas import Answer, AnswerSet, FieldDefinition, is_blank
from dynaform.client.settings import client_settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "dynamic_form_"


def storage_key(fields: Sequence[FieldDefinition]) -> str:
    if fields and fields[0].id is not None:
        return f"{KEY_PREFIX}{fields[0].id}"
    return f"{KEY_PREFIX}default"


class DraftStorage(ABC):
    """Key/value store of raw JSON strings."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class MemoryDraftStorage(DraftStorage):
    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileDraftStorage(DraftStorage):
    """
    All drafts in a single JSON document on disk.

    Writes go to a temporary file in the same directory which then replaces
    the document, so a crash mid-write leaves the previous version intact.
    A document that cannot be parsed fails reads, and is replaced by the
    next write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageAccessError(f"Cannot read drafts from {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageAccessError(f"Draft file {self.path} does not hold a JSON object")
        return data

    def _read_for_write(self) -> Dict[str, str]:
        try:
            return self._read_all()
        except StorageAccessError as exc:
            logger.warning("Discarding unreadable draft file: %s", exc)
            return {}

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".drafts-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    json.dump(data, tmp)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            raise StorageAccessError(f"Cannot write drafts to {self.path}: {exc}") from exc

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_for_write()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        try:
            data = self._read_all()
        except StorageAccessError as exc:
            # Unreadable document: reset it
            logger.warning("Resetting unreadable draft file: %s", exc)
            self._write_all({})
            return
        if key in data:
            del data[key]
            self._write_all(data)


def filter_answers(answers: Mapping[str, Optional[Answer]]) -> AnswerSet:
    return {name: value for name, value in answers.items() if not is_blank(value)}


class DraftCache:
    """
    Persist and restore answers for one or more forms.

    `schedule_save` debounces writes: every call cancels the pending write and
    starts a new timer, so only the last answers within the window are saved.
    Scheduling is only active between `start()` and `aclose()`.
    """

    def __init__(self, storage: DraftStorage, debounce_seconds: Optional[float] = None):
        self.storage = storage
        self.debounce_seconds = (
            client_settings.DRAFT_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self._pending: Optional[asyncio.Task] = None
        self._started = False

    # -- immediate operations -------------------------------------------------

    def save(self, key: str, answers: Mapping[str, Optional[Answer]]) -> bool:
        """Write answers now. Returns False when the storage rejected the write."""
        filtered = filter_answers(answers)
        try:
            if filtered:
                self.storage.set_item(key, json.dumps(filtered))
            else:
                self.storage.remove_item(key)
        except StorageAccessError as exc:
            logger.warning("Failed to save draft %s: %s", key, exc)
            return False
        logger.debug("Draft %s saved (%d answers)", key, len(filtered))
        return True

    def read(self, key: str) -> AnswerSet:
        """Stored answers as written, or an empty dict when nothing usable is stored."""
        try:
            raw = self.storage.get_item(key)
        except StorageAccessError as exc:
            logger.warning("Failed to read draft %s: %s", key, exc)
            return {}
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Discarding malformed draft %s", key)
            return {}
        if not isinstance(data, dict):
            return {}
        return {
            name: value
            for name, value in data.items()
            if isinstance(value, (str, bool)) and not is_blank(value)
        }

    def load(self, key: str, fields: Sequence[FieldDefinition]) -> AnswerSet:
        """
        Stored answers reconciled against the current fields.

        Names no longer defined are dropped; fields without a stored answer
        get their default. Returns an empty dict when nothing is stored.
        """
        stored = self.read(key)
        if not stored:
            return {}
        return {field.name: stored.get(field.name, resolve_default_value(field)) for field in fields}

    def clear(self, key: str) -> bool:
        try:
            self.storage.remove_item(key)
        except StorageAccessError as exc:
            logger.warning("Failed to clear draft %s: %s", key, exc)
            return False
        return True

    # -- debounced saving -----------------------------------------------------

    def start(self) -> None:
        self._started = True

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def schedule_save(self, key: str, answers: Mapping[str, Optional[Answer]]) -> None:
        if not self._started:
            return
        self.cancel_pending()
        snapshot = dict(answers)
        self._pending = asyncio.get_running_loop().create_task(self._save_later(key, snapshot))

    async def _save_later(self, key: str, answers: AnswerSet) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self.save(key, answers)

    def cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def flush(self) -> None:
        """Wait for the pending write, if any, to finish."""
        if self._pending is not None:
            try:
                await self._pending
            except asyncio.CancelledError:
                pass

    async def aclose(self) -> None:
        self._started = False
        task, self._pending = self._pending, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self) -> "DraftCache":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def file_draft_cache(path: Optional[str] = None, debounce_seconds: Optional[float] = None) -> DraftCache:
    return DraftCache(JsonFileDraftStorage(path or client_settings.DRAFT_PATH), debounce_seconds)


