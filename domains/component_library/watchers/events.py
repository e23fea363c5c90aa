"""Messages passed from the watchdog callback to the watcher's worker thread."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from watchdog.events import FileSystemEvent


class WatcherEventKind(Enum):
    NOTIFICATION = auto()
    ERROR = auto()
    STOP = auto()


@dataclass(slots=True, frozen=True)
class WatcherEvent:
    """One message on the watcher's event channel."""

    kind: WatcherEventKind
    notification: Optional[FileSystemEvent] = None
    error: Optional[Exception] = None

    @classmethod
    def notify(cls, event: FileSystemEvent) -> WatcherEvent:
        return cls(WatcherEventKind.NOTIFICATION, notification=event)

    @classmethod
    def failed(cls, error: Exception) -> WatcherEvent:
        return cls(WatcherEventKind.ERROR, error=error)

    @classmethod
    def stop(cls) -> WatcherEvent:
        return cls(WatcherEventKind.STOP)


__all__ = ["WatcherEvent", "WatcherEventKind"]
