"""
Transient user-facing messages.

Only one message is visible at a time; showing a new one replaces the old.
Messages expire lazily: `message` returns None once the timeout has passed.
"""
import enum
import time
from dataclasses import dataclass
from typing import Callable, Optional

from dynaform.client.settings import client_settings


class MessageType(str, enum.Enum):
    success = "success"
    error = "error"
    info = "info"


@dataclass(frozen=True)
class Message:
    text: str
    type: MessageType
    shown_at: float
    timeout: float

    def is_expired(self, now: float) -> bool:
        return now - self.shown_at >= self.timeout


class MessageService:
    def __init__(
        self,
        default_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if default_timeout is None:
            default_timeout = client_settings.MESSAGE_TIMEOUT_SECONDS
        self.default_timeout = default_timeout
        self._clock = clock
        self._current: Optional[Message] = None

    @property
    def message(self) -> Optional[Message]:
        if self._current is not None and self._current.is_expired(self._clock()):
            self._current = None
        return self._current

    def show(self, text: str, type: MessageType = MessageType.info, timeout: Optional[float] = None) -> Message:
        self._current = Message(
            text=text,
            type=type,
            shown_at=self._clock(),
            timeout=self.default_timeout if timeout is None else timeout,
        )
        return self._current

    def show_success(self, text: str) -> Message:
        return self.show(text, MessageType.success)

    def show_error(self, text: str) -> Message:
        return self.show(text, MessageType.error)

    def show_info(self, text: str) -> Message:
        return self.show(text, MessageType.info)

    def clear(self) -> None:
        self._current = None
