"""Width-aware printer producing ``mix format`` style Elixir."""

from __future__ import annotations

from typing import Sequence

from .terms import Container, Match, Pair, Pipe, Raw, Term

DEFAULT_LINE_LENGTH = 98


class Formatter:
    """Prints term trees, breaking containers and pipelines that overflow.

    A term is printed flat when it fits in the space left on the current
    line. Otherwise containers put one item per line, indented two columns
    past the enclosing line, and pipelines put each stage on its own line.
    """

    def __init__(self, line_length: int = DEFAULT_LINE_LENGTH) -> None:
        self._line_length = line_length

    @property
    def line_length(self) -> int:
        return self._line_length

    def format_block(self, statements: Sequence[Term]) -> str:
        """Print statements, separating multi-line ones with a blank line."""

        rendered = [self.render(statement) for statement in statements]
        if not rendered:
            return ""
        chunks = [rendered[0]]
        for previous, current in zip(rendered, rendered[1:]):
            separator = "\n\n" if "\n" in previous or "\n" in current else "\n"
            chunks.append(separator)
            chunks.append(current)
        return "".join(chunks)

    def flat(self, term: Term) -> str:
        """Single-line rendition of the term."""

        if isinstance(term, Raw):
            return term.text
        if isinstance(term, Pair):
            return term.prefix + self.flat(term.value)
        if isinstance(term, Container):
            return term.open + ", ".join(self.flat(item) for item in term.items) + term.close
        if isinstance(term, Match):
            return f"{self.flat(term.left)} = {self.flat(term.right)}"
        if isinstance(term, Pipe):
            return " |> ".join(self.flat(stage) for stage in term.stages)
        raise TypeError(f"Cannot format {type(term).__name__}")

    def render(self, term: Term, column: int = 0, indent: int = 0, trailing: int = 0) -> str:
        """Render ``term`` starting at ``column`` on a line indented by ``indent``.

        ``trailing`` counts characters that will follow the term on its last
        line (a separating comma, for instance).
        """

        flat = self.flat(term)
        if "\n" not in flat and column + len(flat) + trailing <= self._line_length:
            return flat
        if isinstance(term, Raw):
            return flat
        if isinstance(term, Pair):
            value = self.render(term.value, column + len(term.prefix), indent, trailing)
            return term.prefix + value
        if isinstance(term, Container):
            return self._render_container(term, indent)
        if isinstance(term, Match):
            return self._render_match(term, column, indent, trailing)
        return self._render_pipe(term, column, indent, trailing)

    def _render_container(self, term: Container, indent: int) -> str:
        if not term.items:
            return term.open + term.close
        inner = indent + 2
        lines = [term.open]
        last = len(term.items) - 1
        for position, item in enumerate(term.items):
            separator = "," if position < last else ""
            body = self.render(item, inner, inner, len(separator))
            lines.append(" " * inner + body + separator)
        lines.append(" " * indent + term.close)
        return "\n".join(lines)

    def _render_match(self, term: Match, column: int, indent: int, trailing: int) -> str:
        left = self.render(term.left, column, indent)
        if isinstance(term.right, Pipe):
            inner = indent + 2
            right = self.render(term.right, inner, inner, trailing)
            return f"{left} =\n{' ' * inner}{right}"
        right = self.render(term.right, column + len(left) + 3, indent, trailing)
        return f"{left} = {right}"

    def _render_pipe(self, term: Pipe, column: int, indent: int, trailing: int) -> str:
        head, *rest = term.stages
        lines = [self.render(head, column, indent)]
        for position, stage in enumerate(rest, start=1):
            tail = trailing if position == len(rest) else 0
            lines.append(" " * indent + "|> " + self.render(stage, indent + 3, indent, tail))
        return "\n".join(lines)


__all__ = ["DEFAULT_LINE_LENGTH", "Formatter"]
