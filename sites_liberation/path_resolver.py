"""Resolution of export directories from the entry graph."""

import logging
from typing import Dict, List, Optional, Sequence, Set
from urllib.parse import quote

from .entry_store import EntryStore
from .models import Entry

logger = logging.getLogger('sites_liberation.path_resolver')

INDEX_FILE = 'index.html'
# Revision snapshots are written one directory below their page
REVISIONS_DIRECTORY = '_revisions'


class PathResolver:
    """
    Computes the site-relative output directory of a page.

    A page's directory is the chain of page names from the site root down
    to the page itself. Resolution fails (returns None) when any ancestor
    is missing from the store or the parent chain loops back on itself.
    """

    def __init__(self, entry_store: EntryStore):
        self.entry_store = entry_store

    def resolve_path(self, entry: Entry) -> Optional[List[str]]:
        """
        Resolve the directory segments for an entry.

        Args:
            entry: Page entry to resolve

        Returns:
            Segments from the site root to the entry, or None if the parent
            chain is broken or cyclic
        """
        segments = [self._segment(entry)]
        seen = {entry.id}
        current = entry

        while current.parent_id is not None:
            parent_id = current.parent_id
            if parent_id in seen:
                logger.warning(
                    f"Cannot resolve path for '{entry.title}' (ID: {entry.id}): "
                    f"parent chain loops at {parent_id}"
                )
                return None

            parent = self.entry_store.get_entry(parent_id)
            if parent is None:
                logger.debug(
                    f"Cannot resolve path for '{entry.title}' (ID: {entry.id}): "
                    f"missing ancestor {parent_id}"
                )
                return None

            seen.add(parent_id)
            segments.append(self._segment(parent))
            current = parent

        segments.reverse()
        return segments

    def resolve_attachment_directory(self, attachment: Entry) -> Optional[List[str]]:
        """
        Resolve the directory an attachment is stored in (its parent page's).

        Returns:
            Segments of the parent page's directory, or None if the parent
            is missing, is not a page, or cannot itself be resolved
        """
        parent = self.entry_store.get_parent(attachment.id)
        if parent is None or not parent.is_page:
            return None
        return self.resolve_path(parent)

    @staticmethod
    def _segment(entry: Entry) -> str:
        # Entries without a page name fall back to their id so paths stay unique
        return entry.page_name or entry.id.rsplit('/', 1)[-1]


def _base_filename(attachment: Entry) -> str:
    name = (attachment.title or '').replace('/', '_').replace('\\', '_').strip()
    if name in ('', '.', '..'):
        name = _id_tail(attachment)
    return name


def _id_tail(entry: Entry) -> str:
    return entry.id.rsplit('/', 1)[-1]


def _with_suffix(name: str, suffix: str) -> str:
    stem, dot, extension = name.rpartition('.')
    if not stem:
        return f"{name}-{suffix}"
    return f"{stem}-{suffix}{dot}{extension}"


def attachment_filenames(page_id: str, entry_store: EntryStore) -> Dict[str, str]:
    """
    File names of every attachment stored in one page's directory.

    Names are the sanitized titles. A name that clashes with index.html,
    the revisions directory, a subpage directory, or an attachment with a
    smaller id gets the attachment's id tail appended. The result depends
    only on the store contents, never on the order jobs complete in.

    Args:
        page_id: Id of the page holding the attachments
        entry_store: Store holding the site graph

    Returns:
        Mapping of attachment id to file name
    """
    children = entry_store.get_children(page_id)
    taken: Set[str] = {INDEX_FILE, REVISIONS_DIRECTORY}
    taken.update(PathResolver._segment(child) for child in children if child.is_page)

    names: Dict[str, str] = {}
    attachments = sorted((child for child in children if child.is_attachment), key=lambda child: child.id)
    for attachment in attachments:
        name = _base_filename(attachment)
        if name in taken:
            name = _with_suffix(name, _id_tail(attachment))
        counter = 1
        candidate = name
        while candidate in taken:
            counter += 1
            candidate = _with_suffix(name, str(counter))
        taken.add(candidate)
        names[attachment.id] = candidate
    return names


def attachment_filename(attachment: Entry, entry_store: Optional[EntryStore] = None) -> str:
    """
    File name an attachment is stored under inside its page's directory.

    This is the attachment's title with path separators replaced, so a
    title can never escape the page directory. With a store, clashes with
    sibling pages and attachments are renamed as in attachment_filenames().
    """
    if entry_store is not None and attachment.parent_id is not None:
        name = attachment_filenames(attachment.parent_id, entry_store).get(attachment.id)
        if name is not None:
            return name

    name = _base_filename(attachment)
    if name == INDEX_FILE:
        name = f"_{name}"
    return name


def relative_prefix(from_segments: Sequence[str]) -> str:
    """Return the '../' climb from a page directory back to the export root."""
    return '../' * len(from_segments)


def relative_link(from_segments: Sequence[str], to_segments: Sequence[str],
                  filename: str = INDEX_FILE) -> str:
    """
    Build a link from one page directory to a file in another.

    The link climbs to the export root and descends again, matching how
    ancestor links are rendered.

    Args:
        from_segments: Directory of the page holding the link
        to_segments: Directory of the target
        filename: File inside the target directory

    Returns:
        URL-quoted relative link
    """
    parts = [quote(segment) for segment in to_segments]
    parts.append(quote(filename))
    return relative_prefix(from_segments) + '/'.join(parts)
