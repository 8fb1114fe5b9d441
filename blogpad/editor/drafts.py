"""
Local draft persistence for the block editor.

One draft at a time, stored as JSON in a single fixed slot on disk.
Writes are debounced: each scheduled flush cancels the one still
pending, so only the last block sequence in a burst reaches the disk.
Authenticated users do not keep local drafts.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Optional, Union
from pydantic import ValidationError as PydanticValidationError
from blogpad.config import Settings
from blogpad.editor.blocks import Block, BlockList, default_blocks

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Single-slot delayed call.

    At most one call is pending; schedule() cancels it and starts a new
    timer with the latest arguments.
    """

    def __init__(
        self,
        delay: float,
        action: Callable[..., Any],
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.delay = delay
        self._action = action
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._token: Optional[object] = None
        self._args: tuple = ()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule(self, *args: Any) -> None:
        token = object()
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._args = args
            self._token = token
            self._timer = self._timer_factory(self.delay, self._fire, args=(token,))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._token = None
            self._args = ()

    def flush(self) -> bool:
        """Run the pending call now. Returns False if nothing was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            self._token = None
            args = self._args
        self._action(*args)
        return True

    def _fire(self, token: object) -> None:
        with self._lock:
            # Superseded or cancelled after the timer thread already woke up
            if token is not self._token:
                return
            self._timer = None
            self._token = None
            args = self._args
        self._action(*args)


class DraftStore:
    """
    The fixed draft slot plus its debounced writer.

    Usage:
        drafts = DraftStore(".blogpad/blockEditorDraft.json")
        blocks = drafts.load()
        drafts.schedule_flush(blocks, authenticated=False)
    """

    def __init__(
        self,
        path: Union[str, Path],
        debounce_seconds: float = 1.0,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.path = Path(path).expanduser()
        # Guards the slot file; re-entrant since _write_scheduled calls write()
        self._io_lock = threading.RLock()
        # Bumped whenever pending writes are dropped
        self._generation = 0
        self._debouncer = Debouncer(debounce_seconds, self._write_scheduled, timer_factory)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DraftStore":
        return cls(settings.draft_path, settings.draft_debounce_seconds)

    @property
    def exists(self) -> bool:
        return self.path.exists()

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def schedule_flush(self, blocks: list[Block], authenticated: bool) -> None:
        """
        Queue a write of blocks after the quiescence window.

        Replaces any write still pending. Does nothing (and drops the
        pending write) while the user is authenticated.
        """
        if authenticated:
            self._drop_pending()
            return
        snapshot = [block.model_copy() for block in blocks]
        with self._io_lock:
            generation = self._generation
        self._debouncer.schedule(snapshot, generation)

    def flush(self) -> bool:
        return self._debouncer.flush()

    def write(self, blocks: list[Block]) -> None:
        """Write blocks to the slot immediately, replacing the previous draft."""
        with self._io_lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            tmp_path.write_bytes(BlockList.dump_json(blocks))
            os.replace(tmp_path, self.path)
        logger.debug("Draft saved: %d blocks to %s", len(blocks), self.path)

    def load(self) -> list[Block]:
        """
        Stored draft, or the default heading + paragraph.

        An unreadable or corrupt draft is treated as absent.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return default_blocks()
        except OSError as e:
            logger.warning("Could not read draft %s: %s", self.path, e)
            return default_blocks()

        try:
            return BlockList.validate_json(raw)
        except PydanticValidationError:
            logger.warning("Discarding unparseable draft %s", self.path)
            return default_blocks()

    def clear(self) -> None:
        """Remove the draft and any pending write. Safe to call repeatedly."""
        with self._io_lock:
            self._drop_pending()
            try:
                self.path.unlink()
            except FileNotFoundError:
                return
        logger.debug("Draft cleared: %s", self.path)

    def _drop_pending(self) -> None:
        with self._io_lock:
            self._generation += 1
            self._debouncer.cancel()

    def _write_scheduled(self, blocks: list[Block], generation: int) -> None:
        # A timer thread can get past the debouncer just before clear();
        # the generation check keeps it from bringing the draft back.
        with self._io_lock:
            if generation != self._generation:
                logger.debug("Dropping stale draft write for %s", self.path)
                return
            self.write(blocks)
