#!/usr/bin/env python3
"""
File system watcher for the component library domain.

Monitors the configured download directory for new descriptor archives and
turns each one into saved CAD libraries.
Uses watchdog library for cross-platform file system event monitoring; the
watchdog callback only queues events, all downloading and saving happens on
a single worker thread, one archive at a time.
"""

import os
import queue
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger
from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from app.models.schemas import Format
from app.utils.config import Settings
from app.utils.helpers import has_extension, normalise_path, wait_for_stable_file
from domains.component_library import descriptor as descriptor_parser
from domains.component_library.exceptions import (
    HookError,
    LibraryLoaderError,
    SubscriptionError,
)
from domains.component_library.refresh import run_refresh_script
from domains.component_library.search_engine import ComponentSearchEngine
from domains.component_library.watchers.events import WatcherEvent, WatcherEventKind

ARCHIVE_EXTENSION = "zip"


def relevant_archive(event: FileSystemEvent) -> Optional[Path]:
    """
    Return the archive path a notification is about, if any.

    Only new files count: created files, and files renamed into place from
    a non-archive name (browsers download under a temporary name first).
    Renaming one archive to another is not a new file.
    """
    if event.is_directory:
        return None

    if event.event_type == EVENT_TYPE_CREATED:
        raw_path = event.src_path
    elif event.event_type == EVENT_TYPE_MOVED:
        if has_extension(Path(os.fsdecode(event.src_path)), ARCHIVE_EXTENSION):
            return None
        raw_path = event.dest_path
    else:
        return None

    path = Path(os.fsdecode(raw_path))
    if not has_extension(path, ARCHIVE_EXTENSION):
        return None

    return path


class ArchiveEventHandler(FileSystemEventHandler):
    """Forwards every notification to the watcher's event channel."""

    def __init__(self, events: queue.Queue, watch_path: Path):
        """
        Initialize event handler.

        Args:
            events: Channel read by the worker thread
            watch_path: Watched root, its removal is reported as an error
        """
        super().__init__()
        self.events = events
        self.watch_path = str(watch_path)

    def dispatch(self, event: FileSystemEvent):
        """Queue the event; never blocks on processing."""
        if (
            event.event_type in (EVENT_TYPE_DELETED, EVENT_TYPE_MOVED)
            and os.fsdecode(event.src_path) == self.watch_path
        ):
            self.events.put(WatcherEvent.failed(
                SubscriptionError(f"Watched path {self.watch_path} was removed")
            ))
            return

        self.events.put(WatcherEvent.notify(event))


class WatcherState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class LibraryWatcher:
    """Download directory monitoring orchestrator."""

    def __init__(
        self,
        settings: Settings,
        search_engine: Optional[ComponentSearchEngine] = None,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        """
        Initialize library watcher.

        Args:
            settings: Validated settings
            search_engine: Fetch pipeline, built from settings when omitted
            observer_factory: Creates the watchdog observer
        """
        self.settings = settings
        self.watch_path = normalise_path(settings.get_watch_path())
        self.recursive = settings.recursive
        self.formats: List[Format] = settings.get_formats()
        self.search_engine = search_engine or ComponentSearchEngine(
            token=settings.get_token(),
            formats=self.formats,
            base_url=settings.cse_base_url,
            timeout=settings.request_timeout,
        )
        self.observer_factory = observer_factory

        self._lock = threading.Lock()
        self._state = WatcherState.IDLE
        self._observer: Optional[Observer] = None
        self._events: Optional[queue.Queue] = None
        self._worker: Optional[threading.Thread] = None

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def is_running(self) -> bool:
        """True while the worker thread is alive."""
        return self._worker is not None and self._worker.is_alive()

    @property
    def pending_events(self) -> int:
        return self._events.qsize() if self._events is not None else 0

    def start(self):
        """
        Subscribe to the watch path and start the worker thread.

        Raises:
            SubscriptionError: If already running or the path cannot be watched
        """
        with self._lock:
            if self._state is WatcherState.RUNNING:
                raise SubscriptionError("Watcher is already running")

            if not self.watch_path.exists():
                raise SubscriptionError(f"Watch path {self.watch_path} does not exist")

            events: queue.Queue = queue.Queue()
            observer = self.observer_factory()
            handler = ArchiveEventHandler(events, self.watch_path)

            try:
                observer.schedule(handler, str(self.watch_path), recursive=self.recursive)
                observer.start()
            except OSError as e:
                raise SubscriptionError(f"Failed to watch {self.watch_path}: {e}") from e

            worker = threading.Thread(
                target=self._run,
                args=(events,),
                name="library-loader-worker",
                daemon=True,
            )
            try:
                worker.start()
            except RuntimeError as e:
                self._stop_observer(observer)
                raise SubscriptionError(f"Failed to start worker thread: {e}") from e

            self._observer = observer
            self._events = events
            self._worker = worker
            self._state = WatcherState.RUNNING

        logger.success(f"Started watching {self.watch_path}")
        logger.info("Active formats:")
        for fmt in self.formats:
            logger.info(f"\t{fmt.ecad.value} => {fmt.output_path}")

    def stop(self):
        """Unsubscribe, stop the worker and wait for it. Safe to call when idle."""
        with self._lock:
            if self._state is WatcherState.IDLE:
                return

            observer, events, worker = self._observer, self._events, self._worker
            self._observer = self._events = self._worker = None
            self._state = WatcherState.IDLE

        try:
            observer.unschedule_all()
        except (OSError, RuntimeError, KeyError) as e:
            logger.error(f"Failed to unwatch {self.watch_path}: {e}")

        self._stop_observer(observer)

        events.put(WatcherEvent.stop())

        try:
            worker.join()
        except RuntimeError as e:
            logger.error(f"Failed to join worker thread: {e}")

        logger.info(f"Stopped watching {self.watch_path}")

    def _stop_observer(self, observer: Observer):
        try:
            observer.stop()
        except (OSError, RuntimeError) as e:
            logger.error(f"Failed to stop observer: {e}")

        try:
            observer.join()
        except RuntimeError as e:
            logger.error(f"Failed to join observer thread: {e}")

    def _run(self, events: queue.Queue):
        """Worker loop: handle queued events in arrival order until stopped."""
        while True:
            message: WatcherEvent = events.get()

            if message.kind is WatcherEventKind.STOP:
                break

            if message.kind is WatcherEventKind.ERROR:
                logger.error(f"Watch error: {message.error}")
                continue

            path = relevant_archive(message.notification)
            if path is not None:
                self._handle_archive(path)

        logger.debug("Worker thread exiting")

    def _handle_archive(self, path: Path):
        """Process one archive, logging instead of raising."""
        try:
            self.process_archive(path)
            logger.info("Done")

        except LibraryLoaderError as e:
            logger.error(f"{type(e).__name__}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error while processing {path}: {e}")

    def process_archive(self, path: Path) -> List[Path]:
        """
        Fetch, convert and save the package a descriptor archive refers to.

        Each format is handled independently; a failing format is logged and
        the next one is tried.

        Args:
            path: Dropped descriptor archive

        Returns:
            Directories libraries were saved to

        Raises:
            DescriptorParseError: If the archive holds no usable descriptor
        """
        logger.info(f"Detected {path}")

        if not wait_for_stable_file(path, self.settings.grace_period, self.settings.settle_timeout):
            logger.warning(f"{path} did not settle within {self.settings.settle_timeout}s, reading anyway")

        descriptor = descriptor_parser.from_file(path)
        logger.info(f"Fetching component {descriptor.id} ({descriptor.mpn or 'unknown part'})")

        saved: List[Path] = []

        for fmt in self.formats:
            try:
                result = self.search_engine.get_for_format(descriptor, fmt)
                save_path = result.save()

            except LibraryLoaderError as e:
                logger.error(f"{type(e).__name__} [{fmt.ecad.value}] {descriptor.id}: {e}")
                continue

            logger.info(f"Saved to {save_path}")
            saved.append(save_path)

            if self.settings.refresh_enabled:
                self._refresh(save_path)

        return saved

    def _refresh(self, save_path: Path):
        try:
            run_refresh_script(
                save_path,
                script_name=self.settings.refresh_script_name,
                timeout=self.settings.refresh_timeout,
            )
        except HookError as e:
            logger.error(str(e))
