"""Offset to line/column mapping for presenting diagnostics."""

from __future__ import annotations

from bisect import bisect_right

from gatekeeper_authoring.models.errors import SourceSpan, TextRange


class SourceText:
    """A policy document's text plus a line index over it.

    Lines and columns are 1-based and counted in codepoints. Only ``\\n``
    starts a new line, so a ``\\r`` before it belongs to the previous line.
    """

    def __init__(self, text: str, file: str | None = None) -> None:
        self.text = text
        self.file = file
        self._line_starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

    def position_at(self, offset: int) -> tuple[int, int]:
        """Return ``(line, column)`` for *offset*, clamped to the text bounds."""
        offset = max(0, min(offset, len(self.text)))
        line_index = bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def span(self, text_range: TextRange) -> SourceSpan:
        line, column = self.position_at(text_range.start)
        end_line, end_column = self.position_at(text_range.end)
        return SourceSpan(
            file=self.file,
            line=line,
            column=column,
            end_line=end_line,
            end_column=end_column,
        )
