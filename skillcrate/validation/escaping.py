"""Escaping helpers for text embedded in patterns and markup."""

import re
from xml.sax.saxutils import escape

_REGEXP_META = re.compile(r"[.*+?^${}()|[\]\\]")

_XML_QUOTES = {'"': "&quot;", "'": "&apos;"}


def escape_regexp(text: str) -> str:
    """Escape regex metacharacters so ``text`` only matches literally.

    Unlike :func:`re.escape`, only the metacharacters are touched, so the
    result stays readable (``-`` and whitespace are left alone).
    """
    return _REGEXP_META.sub(r"\\\g<0>", text)


def escape_xml(text: str) -> str:
    """Escape ``& < > " '`` for embedding ``text`` in generated markup."""
    # saxutils replaces "&" before anything else, so entities are never doubled
    return escape(text, _XML_QUOTES)
