"""Text helpers shared by the report renderers."""

import textwrap

INDENT = "    "
BULLET = "•"


def indent(text: str, level: int = 1) -> str:
    """Indent every non-blank line of ``text`` by ``level`` indentation units."""
    return textwrap.indent(text, INDENT * level)


def bullet(text: str) -> str:
    """Prefix ``text`` with a bullet."""
    return f"{BULLET} {text}"
