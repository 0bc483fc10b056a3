"""Track additions and removals on the editable listing collections."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Generic, Iterable, Iterator, List, TypeVar

from .models import CollectionDiff

logger = logging.getLogger(__name__)

T = TypeVar("T")
KeyFunc = Callable[[T], str]


def _identity(item) -> str:
    return str(item)


class CollectionTracker(Generic[T]):
    """Live list of items plus what changed since the baseline was loaded.

    ``unique`` collections (features) ignore an item whose key is already
    live; non-unique ones (images) append every item they are given.
    """

    def __init__(self, key: KeyFunc = _identity, unique: bool = True):
        self.key = key
        self.unique = unique
        self.reset()

    def reset(self) -> None:
        """Return to an empty create-mode collection."""
        self.items: List[T] = []
        self.added: List[T] = []
        self.removed: Dict[str, None] = {}
        self.baseline_count = 0
        self.edit_mode = False
        self._baseline: List[T] = []

    def seed(self, baseline_items: Iterable[T]) -> None:
        """Start an edit session from the items the entity already has."""
        self.reset()
        self._baseline = list(baseline_items)
        self.items = list(self._baseline)
        self.baseline_count = len(self._baseline)
        self.edit_mode = True

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def add(self, item: T) -> bool:
        item_key = self.key(item)
        if self.unique and any(self.key(live) == item_key for live in self.items):
            return False

        self.items.append(item)
        if item_key in self.removed and item in self._baseline:
            # Restoring a baseline item undoes its removal.
            del self.removed[item_key]
        elif self.edit_mode:
            self.added.append(item)
        return True

    def remove(self, item: T, index: int) -> bool:
        """Remove the live entry at ``index`` if it is ``item``.

        A mismatch between value and position is ignored.
        """
        if not 0 <= index < len(self.items) or self.items[index] != item:
            logger.debug("Ignoring removal of %r at %d", item, index)
            return False

        del self.items[index]
        if item in self._baseline:
            self.removed[self.key(item)] = None
        return True

    def is_invalidly_empty(self) -> bool:
        """True once every original item is gone and nothing replaced them."""
        return not self.items and len(self.removed) == self.baseline_count

    def diff(self) -> CollectionDiff[T]:
        # Items added and then removed again within the session are not sent.
        live = list(self.items)
        added = []
        for item in self.added:
            if item in live:
                live.remove(item)
                added.append(item)
        return CollectionDiff(
            added=tuple(added),
            removed=tuple(self.removed),
            baseline_count=self.baseline_count,
        )
