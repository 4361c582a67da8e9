# sitecms/blocks/ordering.py
"""
Pure list operations over a page's blocks.

Every function returns a NEW list in which each block's ``order`` equals its
index (0-based, no gaps). Inputs are never mutated; persistence is a separate
full-array write-back done by the site service.
"""
from __future__ import annotations

from typing import Any, Literal, Optional, Sequence, TypeVar

from pydantic import BaseModel

from sitecms.errors import BlockIndexError

B = TypeVar("B")

Direction = Literal["up", "down"]


def _with_order(block: Any, order: int) -> Any:
    if isinstance(block, BaseModel):
        return block.model_copy(update={"order": order})
    out = dict(block)
    out["order"] = order
    return out


def compact_order(blocks: Sequence[B]) -> list[B]:
    """Re-assigns order = index for every block."""
    return [_with_order(b, i) for i, b in enumerate(blocks)]


def _check_index(index: int, length: int) -> None:
    if not isinstance(index, int) or isinstance(index, bool) or index < 0 or index >= length:
        raise BlockIndexError(index, length)


def insert_block(blocks: Sequence[B], new_block: B, position: Optional[int] = None) -> list[B]:
    """
    Splices `new_block` at `position`, or appends when position is None.
    A position past the end appends, like list.insert; negative positions
    are rejected.
    """
    out = list(blocks)
    if position is None:
        out.append(new_block)
    else:
        if position < 0:
            raise BlockIndexError(position, len(out))
        out.insert(position, new_block)
    return compact_order(out)


def remove_block(blocks: Sequence[B], index: int) -> list[B]:
    _check_index(index, len(blocks))
    out = [b for i, b in enumerate(blocks) if i != index]
    return compact_order(out)


def reorder_blocks(blocks: Sequence[B], from_index: int, to_index: int) -> list[B]:
    """Moves the block at `from_index` so it ends up at `to_index`."""
    _check_index(from_index, len(blocks))
    _check_index(to_index, len(blocks))
    out = list(blocks)
    moved = out.pop(from_index)
    out.insert(to_index, moved)
    return compact_order(out)


def replace_block(blocks: Sequence[B], index: int, block: B) -> list[B]:
    _check_index(index, len(blocks))
    out = list(blocks)
    out[index] = block
    return compact_order(out)


def move_block(blocks: Sequence[B], index: int, direction: Direction) -> list[B]:
    """Editor up/down arrows: a no-op when the block is already at that edge."""
    _check_index(index, len(blocks))
    target = index - 1 if direction == "up" else index + 1
    if target < 0 or target >= len(blocks):
        return compact_order(blocks)
    return reorder_blocks(blocks, index, target)


def is_dense(blocks: Sequence[Any]) -> bool:
    """True when every block's order equals its index."""
    for i, b in enumerate(blocks):
        order = getattr(b, "order", None) if isinstance(b, BaseModel) else b.get("order")
        if order != i:
            return False
    return True
