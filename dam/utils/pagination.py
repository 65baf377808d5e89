"""Offset-window pagination over fully materialised lists."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def parse_offset(raw: str | int | None) -> int:
    """Turn the opaque offset token into a start index.

    Anything that is not a non-negative integer starts from the beginning.
    """

    if raw is None or raw == "":
        return 0
    try:
        value = int(str(raw).strip())
    except ValueError:
        return 0
    return max(value, 0)


def window(items: Sequence[T], page_size: int, offset: str | int | None) -> tuple[list[T], str | None]:
    """Return the items of one page and the token for the next page, if any."""

    page_size = max(int(page_size or 1), 1)
    start = parse_offset(offset)
    end = start + page_size
    next_offset = str(end) if end < len(items) else None
    return list(items[start:end]), next_offset
