from datetime import datetime, timezone
from typing import Any, Sequence, TypeVar

T = TypeVar("T")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SectionIndexError(ValueError):
    """Raised when a reorder index is outside the section list."""


def _field(item: Any, name: str, default=None):
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _created_key(item: Any) -> datetime:
    created = _field(item, "created_at")
    if isinstance(created, datetime):
        return created if created.tzinfo else created.replace(tzinfo=timezone.utc)
    return _EPOCH


def sort_sections(sections: Sequence[T]) -> list[T]:
    """Order by position; equal positions keep creation order."""
    return sorted(sections, key=lambda s: (_field(s, "position") or 0, _created_key(s)))


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Remove the item at from_index and insert it at to_index. Returns a new list."""
    size = len(items)
    if not 0 <= from_index < size:
        raise SectionIndexError(f"from_index {from_index} out of range for {size} sections")
    if not 0 <= to_index < size:
        raise SectionIndexError(f"to_index {to_index} out of range for {size} sections")
    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


def renumber(items: Sequence[T]) -> list[tuple[T, int]]:
    """Pair each item with its list index, the new contiguous position."""
    return [(item, index) for index, item in enumerate(items)]
