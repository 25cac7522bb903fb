"""
Watchdog monitor for AI-ignore configuration files

Watches the workspace settings file and the agent configuration files
(.claude/settings.json, .aiexclude) so cached AI-ignore results are
invalidated as soon as any of them changes.
"""

import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .constants import DEFAULT_DEBOUNCE_SECONDS, WATCHED_CONFIG_PATHS
from .ignore.cache import WORKSPACE_LEVEL, AiIgnoreCache, workspace_cache_key
from .paths import WorkspaceFolder
from .utils import get_logger

logger = get_logger(__name__)

ChangeListener = Callable[[str], None]


class ConfigFileHandler(FileSystemEventHandler):
    """
    Filters file system events down to the watched config files

    ``on_event`` runs for every event on a watched file; ``on_change`` runs at
    most once per debounce window for the same file.
    """

    def __init__(self, root: Path,
                 on_change: ChangeListener,
                 debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
                 on_event: Optional[ChangeListener] = None):
        super().__init__()
        self.root = root
        self.on_change = on_change
        self.on_event = on_event
        self.debounce_seconds = debounce_seconds
        self._watched = {(root / rel).resolve() for rel in WATCHED_CONFIG_PATHS}
        self._last_change_times: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _is_watched(self, path: str) -> bool:
        try:
            return Path(path).resolve() in self._watched
        except OSError:
            return False

    def _should_notify(self, path: str) -> bool:
        # Debounce rapid changes
        current_time = time.monotonic()
        with self._lock:
            last_change = self._last_change_times.get(path)
            if last_change is not None and current_time - last_change < self.debounce_seconds:
                logger.debug(f"Debouncing change to {path}")
                return False
            self._last_change_times[path] = current_time
        return True

    def _dispatch(self, path: str, action: str):
        if not self._is_watched(path):
            return
        if self.on_event is not None:
            self.on_event(path)
        if self._should_notify(path):
            logger.info(f"Detected {action} of {path}")
            self.on_change(path)

    def on_created(self, event: FileSystemEvent):
        if not event.is_directory:
            self._dispatch(event.src_path, 'creation')

    def on_modified(self, event: FileSystemEvent):
        if not event.is_directory:
            self._dispatch(event.src_path, 'change')

    def on_deleted(self, event: FileSystemEvent):
        if not event.is_directory:
            self._dispatch(event.src_path, 'deletion')

    def on_moved(self, event: FileSystemEvent):
        if event.is_directory:
            return
        # Editors often save via rename, so either side may be a watched file
        self._dispatch(event.src_path, 'move')
        dest_path = getattr(event, 'dest_path', None)
        if dest_path and dest_path != event.src_path:
            self._dispatch(dest_path, 'move')


class ConfigWatcher:
    """
    Invalidates the AI-ignore cache when configuration files change
    """

    def __init__(self, workspace: Union[WorkspaceFolder, str, Path],
                 cache: Optional[AiIgnoreCache] = None,
                 on_config_changed: Optional[ChangeListener] = None,
                 debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS):
        """
        Args:
            workspace: Workspace folder whose config files are watched
            cache: Cache to invalidate on change
            on_config_changed: Called with the changed file path after invalidation
            debounce_seconds: Minimum time between notifications for the same file
        """
        if not isinstance(workspace, WorkspaceFolder):
            workspace = WorkspaceFolder.from_path(workspace)
        self.workspace = workspace
        self.cache = cache
        self.on_config_changed = on_config_changed
        self.debounce_seconds = debounce_seconds

        self._listeners: List[ChangeListener] = []
        self._listeners_lock = threading.Lock()
        self._observer: Optional[Observer] = None
        self._handler: Optional[ConfigFileHandler] = None

    def on_did_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it"""
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def invalidate(self, path: Union[str, Path, None] = None):
        """Drop cached AI-ignore results for this workspace"""
        if self.cache is None:
            return
        self.cache.invalidate(WORKSPACE_LEVEL, workspace_cache_key(self.workspace.uri))
        logger.debug(f"Invalidated AI-ignore cache for {self.workspace.uri} ({path})")

    def notify(self, path: Union[str, Path]):
        """Call on_config_changed and every registered listener with path"""
        path = str(path)
        with self._listeners_lock:
            listeners = list(self._listeners)
        if self.on_config_changed is not None:
            listeners.insert(0, self.on_config_changed)

        for listener in listeners:
            try:
                listener(path)
            except Exception as e:
                logger.error(f"Config change listener failed for {path}: {e}", exc_info=True)

    def handle_change(self, path: Union[str, Path]):
        """Invalidate cached results for this workspace and notify listeners"""
        self.invalidate(path)
        self.notify(path)

    def create_handler(self) -> ConfigFileHandler:
        """Event handler that invalidates on every event and notifies debounced"""
        return ConfigFileHandler(
            self.workspace.root,
            on_change=self.notify,
            debounce_seconds=self.debounce_seconds,
            on_event=self.invalidate,
        )

    def start(self):
        """Start watching the workspace root"""
        if self._observer is not None:
            logger.warning("Config watcher already running")
            return

        root = self.workspace.root
        if not root.is_dir():
            raise FileNotFoundError(f"Workspace root is not a directory: {root}")

        self._handler = self.create_handler()
        self._observer = Observer()
        self._observer.schedule(self._handler, str(root), recursive=True)
        self._observer.start()
        logger.info(f"Watching config files in {root}")

    def stop(self):
        """Stop watching"""
        if self._observer is None:
            logger.debug("Config watcher not running")
            return

        self._observer.stop()
        self._observer.join()
        self._observer = None
        self._handler = None
        logger.info("Config watcher stopped")

    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
