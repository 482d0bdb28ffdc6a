"""Neutralize markup in user supplied text before it is stored."""

from __future__ import annotations


def strip_markup(value: str) -> str:
    """Escape ``<`` so stored text cannot open an HTML tag.

    Quotes, ampersands and ``>`` are left alone; they are harmless in text
    content and legitimate in names such as "O'Brien" or "R&D".
    """

    return value.replace("<", "&lt;")
