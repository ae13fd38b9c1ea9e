"""Watch mode for mdshield - reformat markdown files when they are saved."""

import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .format.formatter import FormatOptions, FormatResult, format_file

logger = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(
        self,
        root: Path,
        on_batch: Callable[[set[Path]], Any],
        debounce_ms: int = 150,
    ):
        super().__init__()
        self.root = root
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        self.pending: set[Path] = set()
        # Files we wrote ourselves; their next modification event is ignored
        self.written: set[Path] = set()
        self.last_event_time = 0.0

    def _should_skip(self, path: Path) -> bool:
        """Check if file should be skipped."""
        name = path.name

        # Skip hidden files
        if name.startswith("."):
            return True

        # Skip temp/swap files
        if name.endswith("~") or name.endswith(".swp") or name.endswith(".tmp"):
            return True

        # Only process .md files
        if not name.endswith(".md"):
            return True

        return False

    def _track(self, event: FileSystemEvent, attr: str = "src_path") -> None:
        if event.is_directory:
            return

        path = Path(str(getattr(event, attr)))
        if self._should_skip(path):
            return
        if path in self.written:
            self.written.discard(path)
            return
        self.pending.add(path)
        self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        self._track(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        self._track(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle editors that save by renaming a temp file over the original."""
        self._track(event, "dest_path")

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not self.pending:
            return

        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        """Process accumulated events."""
        if not self.pending:
            return

        changed = set(self.pending)
        self.pending.clear()

        if self.on_batch:
            self.on_batch(changed)


def format_batch(
    paths: set[Path],
    options: FormatOptions,
    handler: DebounceHandler | None = None,
) -> list[FormatResult]:
    """Format every existing file in ``paths``; failures are logged and skipped."""
    results = []
    for path in sorted(paths):
        if not path.exists():
            continue
        try:
            result = format_file(path, options, dry_run=False)
        except Exception as e:
            logger.error("Failed to format %s: %s", path, e)
            continue
        if result.changed and handler is not None:
            handler.written.add(path)
        results.append(result)
    return results


def watch_directory(
    root: Path,
    options: FormatOptions,
    debounce_ms: int = 150,
    quiet: bool = False,
) -> int:
    """
    Watch a directory tree and reformat markdown files as they change.

    Args:
        root: Directory to watch
        options: Formatting options applied to each saved file
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output

    Returns:
        Exit code
    """
    if not root.exists():
        print(f"Error: Directory not found: {root}", file=sys.stderr)
        return 1

    running = True
    handler: DebounceHandler

    def handle_batch(changed: set[Path]) -> None:
        """Handle a batch of changes."""
        start_time = time.time()
        results = format_batch(changed, options, handler)
        duration_ms = int((time.time() - start_time) * 1000)

        formatted = [r for r in results if r.changed]
        logger.debug("Batch of %d file(s) handled in %dms", len(changed), duration_ms)
        if not quiet:
            for result in formatted:
                print(f"Formatted {result.path} ({', '.join(result.changes)})", flush=True)

    # Set up signal handlers for graceful shutdown
    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(root, handle_batch, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(root), recursive=True)

    if not quiet:
        print(f"Watching {root} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()

    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        # Flush any pending events before shutdown
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet:
        print("Watch stopped", flush=True)

    return 0
