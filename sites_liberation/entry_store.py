"""In-memory graph of site entries keyed by id."""

import logging
import threading
from typing import Dict, Iterator, List, Optional, Set

from .models import Entry

logger = logging.getLogger('sites_liberation.entry_store')


class EntryStore:
    """
    Owns every entry of one export run and the parent -> children index.

    Entries reference their parent by id only. A parent id is not required
    to resolve: feeds may be filtered or incomplete, so lookups return None
    instead of raising. The store is filled from a single thread and only
    read afterwards.
    """

    def __init__(self):
        self._entries: Dict[str, Entry] = {}
        self._children: Optional[Dict[Optional[str], Set[str]]] = None
        self._index_lock = threading.Lock()

    def add_entry(self, entry: Entry) -> None:
        """
        Insert an entry, replacing any previous entry with the same id.

        Args:
            entry: Entry to store
        """
        if entry is None or not entry.id:
            raise ValueError("Cannot store an entry without an id")
        if entry.id in self._entries:
            logger.debug(f"Replacing entry {entry.id}")
        self._entries[entry.id] = entry
        self._children = None

    def get_entry(self, entry_id: Optional[str]) -> Optional[Entry]:
        """Return the entry with the given id, or None."""
        if entry_id is None:
            return None
        return self._entries.get(entry_id)

    def get_parent(self, entry_id: Optional[str]) -> Optional[Entry]:
        """
        Resolve an entry's declared parent through the store.

        Returns:
            The parent entry, or None if the id is unknown, the entry has no
            parent id, or the parent id does not resolve
        """
        entry = self.get_entry(entry_id)
        if entry is None or entry.parent_id is None:
            return None
        return self._entries.get(entry.parent_id)

    def get_children(self, entry_id: Optional[str]) -> List[Entry]:
        """
        Return the direct children of an entry, sorted by title then id.

        Passing None returns the root entries (those without a parent id).
        """
        index = self._children_index()
        children = [self._entries[child_id] for child_id in index.get(entry_id, ())]
        children.sort(key=lambda child: (child.title or '', child.id))
        return children

    def get_ancestors(self, entry: Entry) -> List[Entry]:
        """
        Walk parent references up to the root.

        The walk stops at a missing parent and on the first revisit, so a
        cyclic chain yields the ancestors seen before the cycle closed.

        Returns:
            Ancestors ordered root first, not including the entry itself
        """
        ancestors = []
        seen = {entry.id}
        current = entry
        while current.parent_id is not None:
            if current.parent_id in seen:
                logger.warning(f"Parent cycle detected at entry {current.parent_id}")
                break
            parent = self._entries.get(current.parent_id)
            if parent is None:
                break
            seen.add(parent.id)
            ancestors.append(parent)
            current = parent
        ancestors.reverse()
        return ancestors

    def entries(self) -> List[Entry]:
        """Snapshot of all stored entries."""
        return list(self._entries.values())

    def _children_index(self) -> Dict[Optional[str], Set[str]]:
        index = self._children
        if index is not None:
            return index
        with self._index_lock:
            if self._children is None:
                rebuilt: Dict[Optional[str], Set[str]] = {}
                for entry in self._entries.values():
                    rebuilt.setdefault(entry.parent_id, set()).add(entry.id)
                self._children = rebuilt
            return self._children

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries.values()))
