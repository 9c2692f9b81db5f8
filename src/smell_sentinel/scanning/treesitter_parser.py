"""Tree-sitter parser wrapper.

Grammars are compiled once per process. ``tree_sitter.Parser`` objects
are not safe to share between threads, so each thread lazily gets its own
parser per language.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "java")
"""

from __future__ import annotations

import threading
from typing import Any

import tree_sitter
import tree_sitter_java

from ..exceptions import UnsupportedLanguageError

_GRAMMARS: dict[str, Any] = {
    "java": tree_sitter_java,
}


class TreeSitterParser:
    """Wrapper around tree-sitter for per-language parsing."""

    def __init__(self) -> None:
        self._languages: dict[str, tree_sitter.Language] = {}
        for lang_name, lang_module in _GRAMMARS.items():
            # tree-sitter >= 0.23 grammars return a PyCapsule; wrap in Language()
            self._languages[lang_name] = tree_sitter.Language(lang_module.language())
        self._local = threading.local()

    @property
    def languages(self) -> list[str]:
        return sorted(self._languages)

    def is_language_supported(self, language: str) -> bool:
        """Check if a language is supported."""
        return language in self._languages

    def _parser_for(self, language: str) -> tree_sitter.Parser:
        parsers = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = self._local.parsers = {}
        parser = parsers.get(language)
        if parser is None:
            parser = parsers[language] = tree_sitter.Parser(self._languages[language])
        return parser

    def parse(self, code: bytes, language: str) -> tree_sitter.Tree:
        """Parse code and return its syntax tree.

        Tree-sitter always produces a tree; syntax errors show up as
        ``ERROR``/missing nodes (check ``tree.root_node.has_error``).

        Raises:
            UnsupportedLanguageError: If no grammar is registered for language
        """
        if not self.is_language_supported(language):
            raise UnsupportedLanguageError(language, self.languages)
        return self._parser_for(language).parse(code)
