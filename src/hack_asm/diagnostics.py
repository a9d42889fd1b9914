"""
Source Excerpt Formatting
=========================

Renders the two-line, caret-annotated excerpt that accompanies every
located diagnostic:

    12 | D=D*A
           ^^^--here

The first line is the 1-based line number, a `` | `` separator and the
untouched source line. The second line pads past the gutter and the
offset, then underlines ``length`` characters.
"""

CARET = "^"
MARKER = "--here"


def gutter(line_number: int) -> str:
    """Return the line-number prefix printed before the source text."""
    return f"{line_number} | "


def format_excerpt(line_text: str, offset: int, length: int, line_number: int) -> str:
    """
    Format a source line with a caret run under the offending span.

    Args:
        line_text: Full text of the source line (without its line ending)
        offset: Zero-based offset of the span within the line
        length: Number of characters to underline (at least one caret)
        line_number: 1-based line number shown in the gutter

    Returns:
        Two lines joined by a newline, no trailing newline
    """
    prefix = gutter(line_number)
    padding = " " * (len(prefix) + max(offset, 0))
    carets = CARET * max(length, 1)
    return f"{prefix}{line_text}\n{padding}{carets}{MARKER}"
