"""Renderers producing the static HTML of exported pages."""

from .page_renderer import KIND_SECTIONS, PageRenderer
from .section_renderers import (
    ANCESTOR_SEPARATOR,
    render_ancestor_links,
    render_announcements,
    render_comments,
    render_file_cabinet,
    render_list,
    render_subpage_links,
)

__all__ = [
    'ANCESTOR_SEPARATOR',
    'KIND_SECTIONS',
    'PageRenderer',
    'render_ancestor_links',
    'render_announcements',
    'render_comments',
    'render_file_cabinet',
    'render_list',
    'render_subpage_links',
]
