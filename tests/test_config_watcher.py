#!/usr/bin/env python3
"""
Test suite for the AI ignore config watcher
"""

import asyncio
import unittest
import tempfile
import threading
import time
from pathlib import Path
from unittest.mock import Mock
import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from confignore.config_watcher import ConfigFileHandler, ConfigWatcher
from confignore.ai import AiIgnoreResolver
from confignore.ignore import AiIgnoreCache, file_cache_key, workspace_cache_key
from confignore.paths import WorkspaceFolder, Workspaces


class TestConfigFileHandler(unittest.TestCase):
    """Test event filtering and debouncing"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()
        self.callback = Mock()
        self.handler = ConfigFileHandler(self.root, on_change=self.callback, debounce_seconds=0.5)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_watched_paths(self):
        for rel in (".vscode/settings.json", ".claude/settings.json", ".aiexclude"):
            self.handler.on_modified(FileModifiedEvent(str(self.root / rel)))
        self.assertEqual(self.callback.call_count, 3)

    def test_unrelated_paths_ignored(self):
        self.handler.on_modified(FileModifiedEvent(str(self.root / "src" / "main.py")))
        self.handler.on_modified(FileModifiedEvent(str(self.root / "sub" / ".aiexclude")))
        self.handler.on_modified(FileModifiedEvent(str(self.root / "settings.json")))
        self.callback.assert_not_called()

    def test_directory_events_ignored(self):
        self.handler.on_modified(DirModifiedEvent(str(self.root / ".vscode")))
        self.callback.assert_not_called()

    def test_debounce(self):
        events = Mock()
        handler = ConfigFileHandler(
            self.root, on_change=self.callback, debounce_seconds=0.5, on_event=events,
        )
        path = str(self.root / ".aiexclude")
        handler.on_modified(FileModifiedEvent(path))
        handler.on_modified(FileModifiedEvent(path))
        handler.on_created(FileCreatedEvent(path))

        self.callback.assert_called_once_with(path)
        self.assertEqual(events.call_count, 3)

    def test_debounce_is_per_path(self):
        self.handler.on_modified(FileModifiedEvent(str(self.root / ".aiexclude")))
        self.handler.on_modified(FileModifiedEvent(str(self.root / ".claude" / "settings.json")))
        self.assertEqual(self.callback.call_count, 2)

    def test_no_debounce(self):
        handler = ConfigFileHandler(self.root, on_change=self.callback, debounce_seconds=0)
        path = str(self.root / ".aiexclude")
        handler.on_modified(FileModifiedEvent(path))
        handler.on_deleted(FileDeletedEvent(path))
        self.assertEqual(self.callback.call_count, 2)

    def test_atomic_save_via_move(self):
        tmp = str(self.root / ".vscode" / "settings.json.tmp")
        dest = str(self.root / ".vscode" / "settings.json")
        self.handler.on_moved(FileMovedEvent(tmp, dest))
        self.callback.assert_called_once_with(dest)


class TestConfigWatcher(unittest.TestCase):
    """Test cache invalidation and listener dispatch"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()
        self.workspace = WorkspaceFolder.from_path(self.root)
        self.cache = AiIgnoreCache()

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_accepts_plain_path(self):
        watcher = ConfigWatcher(self.root)
        self.assertEqual(watcher.workspace, self.workspace)

    def test_handle_change_invalidates_workspace(self):
        key = workspace_cache_key(self.workspace.uri)
        sibling = workspace_cache_key(self.workspace.uri + "-sibling")
        self.cache.set_workspace(key, "config")
        self.cache.set_file(file_cache_key(self.workspace.uri, "a.txt"), "status")
        self.cache.set_workspace(sibling, "sibling config")

        watcher = ConfigWatcher(self.workspace, cache=self.cache)
        watcher.handle_change(self.root / ".aiexclude")

        self.assertIsNone(self.cache.get_workspace(key))
        self.assertIsNone(self.cache.get_file(file_cache_key(self.workspace.uri, "a.txt")))
        self.assertEqual(self.cache.get_workspace(sibling), "sibling config")

    def test_every_event_invalidates_within_debounce(self):
        """A second save inside the debounce window still drops cached results"""
        resolver = AiIgnoreResolver(Workspaces([self.root]), cache=self.cache)
        listener = Mock()
        watcher = ConfigWatcher(self.workspace, cache=self.cache, debounce_seconds=60)
        watcher.on_did_change(listener)
        handler = watcher.create_handler()
        aiexclude = self.root / ".aiexclude"
        secret = self.root / "secret.txt"

        aiexclude.write_text("other.txt\n")
        handler.on_modified(FileModifiedEvent(str(aiexclude)))
        self.assertFalse(asyncio.run(resolver.get_status(secret)).is_ignored)

        aiexclude.write_text("secret.txt\n")
        handler.on_modified(FileModifiedEvent(str(aiexclude)))
        self.assertTrue(asyncio.run(resolver.get_status(secret)).is_ignored)

        listener.assert_called_once_with(str(aiexclude))

    def test_callbacks(self):
        on_config_changed = Mock()
        listener = Mock()
        watcher = ConfigWatcher(self.workspace, cache=self.cache, on_config_changed=on_config_changed)
        watcher.on_did_change(listener)

        path = str(self.root / ".aiexclude")
        watcher.handle_change(path)

        on_config_changed.assert_called_once_with(path)
        listener.assert_called_once_with(path)

    def test_unsubscribe(self):
        listener = Mock()
        watcher = ConfigWatcher(self.workspace)
        unsubscribe = watcher.on_did_change(listener)
        unsubscribe()
        unsubscribe()

        watcher.handle_change(self.root / ".aiexclude")
        listener.assert_not_called()

    def test_listener_failure_isolated(self):
        broken = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        watcher = ConfigWatcher(self.workspace)
        watcher.on_did_change(broken)
        watcher.on_did_change(healthy)

        watcher.handle_change(self.root / ".aiexclude")
        healthy.assert_called_once()

    def test_start_stop(self):
        watcher = ConfigWatcher(self.workspace, cache=self.cache)
        self.assertFalse(watcher.is_running())

        watcher.start()
        try:
            self.assertTrue(watcher.is_running())
        finally:
            watcher.stop()
        self.assertFalse(watcher.is_running())

    def test_start_missing_root(self):
        watcher = ConfigWatcher(self.root / "missing")
        with self.assertRaises(FileNotFoundError):
            watcher.start()

    def test_file_change_detected(self):
        """Writing a watched file on disk reaches listeners"""
        changed = threading.Event()
        seen = []

        def listener(path):
            seen.append(path)
            changed.set()

        self.cache.set_workspace(workspace_cache_key(self.workspace.uri), "config")

        with ConfigWatcher(self.workspace, cache=self.cache, debounce_seconds=0) as watcher:
            watcher.on_did_change(listener)
            time.sleep(0.2)
            (self.root / ".aiexclude").write_text("*.env\n")
            self.assertTrue(changed.wait(5), "no change event received")

        self.assertEqual(Path(seen[0]).resolve(), self.root / ".aiexclude")
        self.assertIsNone(self.cache.get_workspace(workspace_cache_key(self.workspace.uri)))


if __name__ == '__main__':
    unittest.main()
