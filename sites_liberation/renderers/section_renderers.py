"""Renderers for the navigation and kind-specific sections of a page."""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag

from ..models import Entry
from ..path_resolver import INDEX_FILE
from . import renderer_utils as utils

ANCESTOR_SEPARATOR = ' > '
EXCERPT_LENGTH = 300

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _sort_time(entry: Entry) -> datetime:
    if entry.updated is None:
        return _OLDEST
    if entry.updated.tzinfo is None:
        return entry.updated.replace(tzinfo=timezone.utc)
    return entry.updated


def render_ancestor_links(soup: BeautifulSoup, ancestors: Sequence[Entry]) -> Tag:
    """
    Render breadcrumb links to every ancestor, root first.

    For N ancestors the i-th link climbs N - i directories to reach that
    ancestor's index.html.
    """
    div = soup.new_tag('div')
    div['class'] = 'ancestors'
    count = len(ancestors)
    for i, ancestor in enumerate(ancestors):
        path = '../' * (count - i)
        div.append(utils.hyperlink(soup, path + INDEX_FILE, ancestor.title))
        div.append(ANCESTOR_SEPARATOR)
    return div


def render_subpage_links(soup: BeautifulSoup, subpages: Sequence[Entry]) -> Tag:
    div = soup.new_tag('div')
    div['class'] = 'subpages'
    div.append(f"Subpages ({len(subpages)}):")
    for subpage in subpages:
        href = f"{quote(subpage.page_name or '')}/{INDEX_FILE}"
        div.append(' ')
        div.append(utils.hyperlink(soup, href, subpage.title))
    return div


def render_file_cabinet(soup: BeautifulSoup, attachments: Sequence[Entry],
                        filenames: Optional[Dict[str, str]] = None) -> Tag:
    """Table of attachments: link, summary, updated, author, version.

    filenames maps attachment ids to the names they are stored under.
    """
    filenames = filenames or {}
    table = soup.new_tag('table')
    table['class'] = 'file-cabinet'
    for attachment in attachments:
        row = utils.entry_element(soup, attachment, 'tr')
        for element in (
            utils.out_of_line_content_element(soup, attachment, filenames.get(attachment.id)),
            utils.summary_element(soup, attachment),
            utils.updated_element(soup, attachment),
            utils.author_element(soup, attachment),
        ):
            cell = soup.new_tag('td')
            cell.append(element)
            row.append(cell)

        version = soup.new_tag('td')
        version.append('(Version ')
        version.append(utils.revision_element(soup, attachment))
        version.append(')')
        row.append(version)
        table.append(row)
    return table


def render_announcements(soup: BeautifulSoup, announcements: Sequence[Entry]) -> Tag:
    """Announcements newest first, each linking to its own directory."""
    div = soup.new_tag('div')
    div['class'] = 'announcements'
    for announcement in sorted(announcements, key=_sort_time, reverse=True):
        item = utils.entry_element(soup, announcement)
        heading = soup.new_tag('h4')
        heading['class'] = 'entry-title'
        href = f"{quote(announcement.page_name or '')}/{INDEX_FILE}"
        heading.append(utils.hyperlink(soup, href, announcement.title))
        item.append(heading)
        item.append(utils.updated_element(soup, announcement))
        item.append(_excerpt_element(soup, announcement))
        div.append(item)
    return div


def _excerpt_element(soup: BeautifulSoup, entry: Entry) -> Tag:
    # Plain text only: links in announcement content are relative to its own directory
    element = soup.new_tag('p')
    element['class'] = 'summary'
    text = entry.summary
    if not text and entry.content:
        text = BeautifulSoup(entry.content, 'html.parser').get_text(' ', strip=True)
    text = text or ''
    if len(text) > EXCERPT_LENGTH:
        text = text[:EXCERPT_LENGTH].rstrip() + '...'
    element.string = text
    return element


def render_list(soup: BeautifulSoup, page: Entry, items: Sequence[Entry]) -> Tag:
    """List page items as a table, one column per declared list column."""
    columns: List[str] = list(page.columns)
    if not columns:
        for item in items:
            for name in item.fields:
                if name not in columns:
                    columns.append(name)

    table = soup.new_tag('table')
    table['class'] = 'list'
    header = soup.new_tag('tr')
    for name in columns:
        cell = soup.new_tag('th')
        cell.string = name
        header.append(cell)
    table.append(header)

    for item in items:
        row = utils.entry_element(soup, item, 'tr')
        for name in columns:
            cell = soup.new_tag('td')
            cell.string = item.fields.get(name, '')
            row.append(cell)
        table.append(row)
    return table


def render_comments(soup: BeautifulSoup, comments: Sequence[Entry]) -> Tag:
    """Comments oldest first."""
    div = soup.new_tag('div')
    div['class'] = 'comments'
    heading = soup.new_tag('h4')
    heading.string = f"Comments ({len(comments)})"
    div.append(heading)
    for comment in sorted(comments, key=_sort_time):
        item = utils.entry_element(soup, comment)
        item.append(utils.author_element(soup, comment))
        item.append(' - ')
        item.append(utils.updated_element(soup, comment))
        item.append(utils.content_element(soup, comment))
        div.append(item)
    return div
