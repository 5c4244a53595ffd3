"""Renders a complete page document from the entry graph."""

from typing import Callable, Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from ..entry_store import EntryStore
from ..models import Entry, EntryType
from ..path_resolver import INDEX_FILE, REVISIONS_DIRECTORY, attachment_filenames
from . import renderer_utils as utils
from . import section_renderers as sections

REVISIONS_LINK = f"{REVISIONS_DIRECTORY}/{INDEX_FILE}"


def _no_section(soup: BeautifulSoup, page: Entry, children: List[Entry],
                filenames: Dict[str, str]) -> Optional[Tag]:
    return None


def _file_cabinet_section(soup: BeautifulSoup, page: Entry, children: List[Entry],
                          filenames: Dict[str, str]) -> Optional[Tag]:
    files = [child for child in children
             if child.entry_type in (EntryType.ATTACHMENT, EntryType.WEB_ATTACHMENT)]
    return sections.render_file_cabinet(soup, files, filenames)


def _announcements_section(soup: BeautifulSoup, page: Entry, children: List[Entry],
                           filenames: Dict[str, str]) -> Optional[Tag]:
    posts = [child for child in children if child.entry_type is EntryType.ANNOUNCEMENT]
    return sections.render_announcements(soup, posts)


def _list_section(soup: BeautifulSoup, page: Entry, children: List[Entry],
                  filenames: Dict[str, str]) -> Optional[Tag]:
    items = [child for child in children if child.entry_type is EntryType.LIST_ITEM]
    return sections.render_list(soup, page, items)


# One renderer per page kind; KeyError here means a new kind was added without a template.
KIND_SECTIONS: Dict[EntryType, Callable[[BeautifulSoup, Entry, List[Entry], Dict[str, str]], Optional[Tag]]] = {
    EntryType.WEB_PAGE: _no_section,
    EntryType.ANNOUNCEMENT: _no_section,
    EntryType.FILE_CABINET_PAGE: _file_cabinet_section,
    EntryType.ANNOUNCEMENTS_PAGE: _announcements_section,
    EntryType.LIST_PAGE: _list_section,
}


class PageRenderer:
    """
    Builds the index.html document of one page.

    Layout: ancestor links, title, content, kind-specific section
    (file cabinet, announcements, list), subpage links, attachments,
    comments, and an updated/author/version footer.
    """

    def render(self, page: Entry, entry_store: EntryStore, revisions_exported: bool = False) -> str:
        """
        Render a page.

        Args:
            page: Page entry (content already cleaned and link-converted)
            entry_store: Store holding the site graph
            revisions_exported: Whether to link the page's revision history

        Returns:
            Serialized HTML document
        """
        if not page.is_page:
            raise ValueError(f"Entry {page.id} is not a page")

        soup = utils.new_document(page.title)
        children = entry_store.get_children(page.id)
        filenames = attachment_filenames(page.id, entry_store)

        root = utils.entry_element(soup, page)
        root.append(sections.render_ancestor_links(soup, entry_store.get_ancestors(page)))
        root.append(utils.title_element(soup, page))
        root.append(utils.content_element(soup, page))

        section = KIND_SECTIONS[page.entry_type](soup, page, children, filenames)
        if section is not None:
            root.append(section)

        # Announcements are listed by their page, not as subpages
        subpages = [child for child in children if child.is_page
                    and not (page.entry_type is EntryType.ANNOUNCEMENTS_PAGE
                             and child.entry_type is EntryType.ANNOUNCEMENT)]
        if subpages:
            root.append(sections.render_subpage_links(soup, subpages))

        if page.entry_type is not EntryType.FILE_CABINET_PAGE:
            attachments = [child for child in children
                           if child.entry_type in (EntryType.ATTACHMENT, EntryType.WEB_ATTACHMENT)]
            if attachments:
                root.append(sections.render_file_cabinet(soup, attachments, filenames))

        comments = [child for child in children if child.entry_type is EntryType.COMMENT]
        if comments:
            root.append(sections.render_comments(soup, comments))

        root.append(self._footer(soup, page, revisions_exported))
        soup.body.append(root)
        return str(soup)

    def _footer(self, soup: BeautifulSoup, page: Entry, revisions_exported: bool) -> Tag:
        footer = soup.new_tag('div')
        footer['class'] = 'footer'
        footer.append('Updated on ')
        footer.append(utils.updated_element(soup, page))
        footer.append(' by ')
        footer.append(utils.author_element(soup, page))
        footer.append(' (Version ')
        footer.append(utils.revision_element(soup, page))
        footer.append(')')
        if revisions_exported:
            footer.append(' ')
            footer.append(utils.hyperlink(soup, REVISIONS_LINK, 'Revision history'))
        return footer
