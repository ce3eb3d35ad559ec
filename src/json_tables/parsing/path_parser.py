"""Parser for data paths into the backing document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import ply.yacc as yacc

from json_tables.parsing.path_lexer import PathLexer


@dataclass(frozen=True)
class KeySegment:
    """Member of a mapping: ``/name``."""

    name: str


@dataclass(frozen=True)
class IndexSegment:
    """Element of an array: ``[3]``. Negative indexes count from the end."""

    index: int


@dataclass(frozen=True)
class AppendSegment:
    """Slot past the end of an array: ``[]``."""


Segment = Union[KeySegment, IndexSegment, AppendSegment]
DataPath = tuple[Segment, ...]


def format_path(segments: DataPath) -> str:
    """Render segments back to their string form."""
    parts = []
    for segment in segments:
        if isinstance(segment, KeySegment):
            parts.append(f"/{segment.name}")
        elif isinstance(segment, IndexSegment):
            parts.append(f"[{segment.index}]")
        else:
            parts.append("[]")
    return "".join(parts) or "/"


class PathParser:
    """Parser for data paths.

    ``""`` and ``"/"`` address the document root. Paths without an array
    index are cached; the storage layer addresses the same handful of tables
    over and over, while indexed paths are as many as there are records.
    """

    tokens = PathLexer.tokens

    def __init__(self) -> None:
        self.lexer = PathLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self._cache: dict[str, DataPath] = {}

    def p_path_root(self, p: yacc.YaccProduction) -> None:
        """path : SLASH"""
        p[0] = ()

    def p_path_segments(self, p: yacc.YaccProduction) -> None:
        """path : segment_list
                | segment_list SLASH"""
        p[0] = tuple(p[1])

    def p_segment_list_single(self, p: yacc.YaccProduction) -> None:
        """segment_list : segment"""
        p[0] = list(p[1])

    def p_segment_list_multiple(self, p: yacc.YaccProduction) -> None:
        """segment_list : segment_list segment"""
        p[0] = p[1]
        p[0].extend(p[2])

    def p_segment_key(self, p: yacc.YaccProduction) -> None:
        """segment : SLASH KEY"""
        p[0] = [KeySegment(name=p[2])]

    def p_segment_key_accessors(self, p: yacc.YaccProduction) -> None:
        """segment : SLASH KEY accessor_list"""
        p[0] = [KeySegment(name=p[2])] + p[3]

    def p_accessor_list_single(self, p: yacc.YaccProduction) -> None:
        """accessor_list : accessor"""
        p[0] = [p[1]]

    def p_accessor_list_multiple(self, p: yacc.YaccProduction) -> None:
        """accessor_list : accessor_list accessor"""
        p[0] = p[1]
        p[0].append(p[2])

    def p_accessor_index(self, p: yacc.YaccProduction) -> None:
        """accessor : LBRACKET INTEGER RBRACKET"""
        p[0] = IndexSegment(index=p[2])

    def p_accessor_append(self, p: yacc.YaccProduction) -> None:
        """accessor : LBRACKET RBRACKET"""
        p[0] = AppendSegment()

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of path")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="path", **kwargs)

    def parse(self, data: str) -> DataPath:
        """Parse a data path into its segments."""
        if data in self._cache:
            return self._cache[data]

        if data.strip() == "":
            return ()

        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.lexer.lexer.begin("INITIAL")
        segments = self.parser.parse(data, lexer=self.lexer.lexer)
        if not any(isinstance(segment, IndexSegment) for segment in segments):
            self._cache[data] = segments
        return segments
