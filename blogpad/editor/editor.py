"""
In-memory block editor.

Holds the ordered block list for one editing session. Mutations are
synchronous and mirror the whole list into the local draft slot while
nobody is logged in. save() publishes the markdown export through the
API client and reports the outcome as a status message.
"""

import logging
from typing import Optional
import httpx
from blogpad.errors import BlogError
from blogpad.editor.blocks import (
    BLOCK_TYPES,
    Block,
    BlockType,
    derive_title,
    export_markdown,
    make_id,
)
from blogpad.editor.client import BlogClient, ClientSession
from blogpad.editor.drafts import DraftStore

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_MESSAGE = "Please login to save posts to the server. Your draft is saved locally."
SAVED_MESSAGE = "Saved successfully to server"
DRAFT_CLEARED_MESSAGE = "Draft cleared"


class BlockEditor:
    """
    Block list plus draft mirroring and publishing.

    The session is explicit state: pass it in, or set it after login
    with set_session(). None means anonymous.
    """

    def __init__(
        self,
        drafts: DraftStore,
        client: Optional[BlogClient] = None,
        session: Optional[ClientSession] = None,
        blocks: Optional[list[Block]] = None,
    ):
        self.drafts = drafts
        self.client = client
        self.session = session
        self.blocks: list[Block] = list(blocks) if blocks is not None else drafts.load()
        self.message: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    @property
    def title(self) -> str:
        return derive_title(self.blocks)

    def set_session(self, session: Optional[ClientSession]) -> None:
        self.session = session
        self._changed()

    def get_block(self, block_id: str) -> Optional[Block]:
        return next((b for b in self.blocks if b.id == block_id), None)

    # -- mutations ---------------------------------------------------------

    def add_block(self, block_type: BlockType) -> Block:
        if block_type not in BLOCK_TYPES:
            raise ValueError(f"Unknown block type: {block_type!r}")
        block = Block(id=make_id(), type=block_type, content="")
        self.blocks = [*self.blocks, block]
        self._changed()
        return block

    def update_block(self, block_id: str, content: str) -> None:
        self._replace(block_id, content=content)

    def set_language(self, block_id: str, language: str) -> None:
        self._replace(block_id, language=language)

    def delete_block(self, block_id: str) -> None:
        remaining = [b for b in self.blocks if b.id != block_id]
        if len(remaining) == len(self.blocks):
            return
        self.blocks = remaining
        self._changed()

    def move_block(self, block_id: str, direction: int) -> None:
        """Swap with the neighbour above (-1) or below (+1)."""
        if direction not in (-1, 1):
            raise ValueError("direction must be -1 or 1")

        index = next((i for i, b in enumerate(self.blocks) if b.id == block_id), None)
        if index is None:
            return
        target = index + direction
        if target < 0 or target >= len(self.blocks):
            return

        reordered = list(self.blocks)
        reordered[index], reordered[target] = reordered[target], reordered[index]
        self.blocks = reordered
        self._changed()

    # -- output ------------------------------------------------------------

    def export(self) -> str:
        return export_markdown(self.blocks)

    def save(self) -> str:
        """
        Publish the current post.

        Anonymous users get a prompt and no request is made. Failures
        end up in the returned status message rather than raising.
        """
        if self.session is None or self.client is None:
            return self._report(LOGIN_REQUIRED_MESSAGE)

        self.message = None
        try:
            post = self.client.create_post(self.session, self.title, self.export())
        except BlogError as e:
            return self._report(f"Save failed: {e.status_code} {e.message}")
        except httpx.HTTPError as e:
            logger.warning("Save request failed: %s", e)
            return self._report(f"Save error: {e}")

        self.drafts.clear()
        logger.info("Saved post %s", post.get("id"))
        return self._report(SAVED_MESSAGE)

    def clear_draft(self) -> str:
        self.drafts.clear()
        return self._report(DRAFT_CLEARED_MESSAGE)

    def close(self) -> None:
        """Write out a draft still waiting on the debounce timer."""
        if self.drafts.flush():
            logger.debug("Flushed pending draft on close")

    def __enter__(self) -> "BlockEditor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- internals ---------------------------------------------------------

    def _replace(self, block_id: str, **changes) -> None:
        if self.get_block(block_id) is None:
            return
        self.blocks = [
            b.model_copy(update=changes) if b.id == block_id else b
            for b in self.blocks
        ]
        self._changed()

    def _changed(self) -> None:
        self.drafts.schedule_flush(self.blocks, authenticated=self.is_authenticated)

    def _report(self, message: str) -> str:
        self.message = message
        return message
