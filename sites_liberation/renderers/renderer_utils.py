"""Small element builders shared by the page renderers."""

from typing import Optional
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag

from ..models import Entry
from ..path_resolver import attachment_filename

DATE_FORMAT = '%b %d, %Y, %I:%M %p'


def new_document(title: str) -> BeautifulSoup:
    """Create an empty HTML document with the given title."""
    soup = BeautifulSoup(
        '<!DOCTYPE html><html><head><meta charset="utf-8"/><title></title></head><body></body></html>',
        'html.parser'
    )
    soup.title.string = title
    return soup


def hyperlink(soup: BeautifulSoup, href: str, text: str) -> Tag:
    link = soup.new_tag('a', href=href)
    link.string = text
    return link


def entry_element(soup: BeautifulSoup, entry: Entry, name: str = 'div') -> Tag:
    """Element carrying the hentry microformat classes of an entry."""
    element = soup.new_tag(name, id=entry.id)
    element['class'] = ['hentry', entry.entry_type.value]
    return element


def title_element(soup: BeautifulSoup, entry: Entry, name: str = 'h3') -> Tag:
    element = soup.new_tag(name)
    element['class'] = 'entry-title'
    element.string = entry.title or ''
    return element


def content_element(soup: BeautifulSoup, entry: Entry) -> Tag:
    """Wrap an entry's markup in div.entry-content."""
    element = soup.new_tag('div')
    element['class'] = 'entry-content'
    if entry.content:
        fragment = BeautifulSoup(entry.content, 'html.parser')
        for child in list(fragment.contents):
            element.append(child.extract())
    return element


def summary_element(soup: BeautifulSoup, entry: Entry) -> Tag:
    element = soup.new_tag('span')
    element['class'] = 'summary'
    element.string = entry.summary or ''
    return element


def updated_element(soup: BeautifulSoup, entry: Entry) -> Tag:
    element = soup.new_tag('abbr')
    element['class'] = 'updated'
    if entry.updated is not None:
        element['title'] = entry.updated.isoformat()
        element.string = entry.updated.strftime(DATE_FORMAT)
    return element


def author_element(soup: BeautifulSoup, entry: Entry) -> Tag:
    element = soup.new_tag('span')
    element['class'] = ['author', 'vcard']
    name = soup.new_tag('span')
    name['class'] = 'fn'
    name.string = entry.author or ''
    element.append(name)
    return element


def revision_element(soup: BeautifulSoup, entry: Entry) -> Tag:
    element = soup.new_tag('span')
    element['class'] = 'sites:revision'
    element.string = str(entry.revision)
    return element


def attachment_href(attachment: Entry, filename: Optional[str] = None) -> Optional[str]:
    """Link target of an attachment relative to its page's directory."""
    if attachment.is_attachment:
        return quote(filename or attachment_filename(attachment))
    # Web attachments point at external resources
    return attachment.src


def out_of_line_content_element(soup: BeautifulSoup, attachment: Entry, filename: Optional[str] = None) -> Tag:
    link = hyperlink(soup, attachment_href(attachment, filename) or '#', attachment.title)
    link['class'] = 'entry-title'
    return link
