"""Converters cleaning entry markup and rewriting in-site links."""

from .html_cleaner import HtmlCleaner
from .link_converter import LinkConverter

__all__ = [
    'HtmlCleaner',
    'LinkConverter',
]
