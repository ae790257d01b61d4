from __future__ import annotations

import html


def sanitize_html_text(value: str) -> str:
    return html.escape(value, quote=True)


def clean_text(value: str | None, max_length: int | None = None) -> str | None:
    """Collapse whitespace and escape markup in user-entered text.

    Returns ``None`` for missing or blank input.
    """
    if value is None:
        return None
    collapsed = " ".join(value.split())
    if not collapsed:
        return None
    if max_length is not None:
        collapsed = collapsed[:max_length]
    return sanitize_html_text(collapsed)
