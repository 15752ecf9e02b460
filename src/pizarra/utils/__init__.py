"""Utility modules for Pizarra.

Provides:
- text: slugify, escape_html for text processing
- logger: get_logger for namespaced logging
"""

from pizarra.utils.logger import get_logger
from pizarra.utils.text import escape_html, slugify

__all__ = [
    "escape_html",
    "get_logger",
    "slugify",
]
