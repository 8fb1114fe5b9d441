"""
Block model and markdown export.

A post is composed as an ordered list of typed blocks. Export flattens
them into markdown; the transform is one-way, block types cannot be
recovered from the text.
"""

import random
import time
from typing import Literal, Optional
from pydantic import BaseModel, TypeAdapter

BlockType = Literal["paragraph", "heading", "code", "image", "list"]

BLOCK_TYPES: tuple[str, ...] = ("paragraph", "heading", "code", "image", "list")


class Block(BaseModel):
    id: str
    type: BlockType
    content: str = ""
    language: Optional[str] = None  # code blocks only


BlockList = TypeAdapter(list[Block])


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def make_id() -> str:
    """
    Millisecond timestamp in base 36 plus a random suffix.

    Not guaranteed unique, only unlikely to collide within one session.
    """
    return f"{_base36(int(time.time() * 1000))}-{random.randrange(10000)}"


def default_blocks() -> list[Block]:
    """Starting content for a fresh editor."""
    return [
        Block(id=make_id(), type="heading", content="Untitled"),
        Block(id=make_id(), type="paragraph", content="Start writing your post..."),
    ]


def render_block(block: Block) -> str:
    if block.type == "heading":
        return f"# {block.content}"
    if block.type == "code":
        return f"```{block.language or ''}\n{block.content}\n```"
    if block.type == "image":
        return f"![Image]({block.content})"
    if block.type == "list":
        return "\n".join(f"- {line}" for line in block.content.split("\n"))
    return block.content


def export_markdown(blocks: list[Block]) -> str:
    """Join rendered blocks with blank lines."""
    return "\n\n".join(render_block(block) for block in blocks)


def derive_title(blocks: list[Block]) -> str:
    """First heading's content, or "Untitled" when there is none or it is empty."""
    for block in blocks:
        if block.type == "heading":
            return block.content or "Untitled"
    return "Untitled"
