"""Tests for the tree-sitter parser wrapper."""

import threading

import pytest

from smell_sentinel.exceptions import UnsupportedLanguageError
from smell_sentinel.scanning import TreeSitterParser, detect_language, get_supported_languages


class TestLanguageDetection:
    """Test extension-based language detection."""

    def test_java_extension(self):
        assert detect_language("src/main/java/Foo.java") == "java"

    def test_extension_is_case_insensitive(self):
        assert detect_language("Foo.JAVA") == "java"

    def test_unknown_extension(self):
        assert detect_language("script.py") == "unknown"

    def test_supported_languages(self):
        assert get_supported_languages() == ["java"]


class TestTreeSitterParser:
    """Tests for parsing through tree-sitter-java."""

    def test_languages(self):
        parser = TreeSitterParser()
        assert parser.languages == ["java"]
        assert parser.is_language_supported("java")
        assert not parser.is_language_supported("cobol")

    def test_parse_returns_program(self):
        """parse() returns a tree rooted at a program node."""
        parser = TreeSitterParser()
        tree = parser.parse(b"class A { void f() {} }", "java")
        assert tree.root_node.type == "program"
        assert not tree.root_node.has_error

    def test_malformed_source_still_produces_tree(self):
        """Syntax errors are reported through has_error, not exceptions."""
        parser = TreeSitterParser()
        tree = parser.parse(b"class A { void f( { }", "java")
        assert tree.root_node.has_error

    def test_unsupported_language_raises(self):
        parser = TreeSitterParser()
        with pytest.raises(UnsupportedLanguageError) as excinfo:
            parser.parse(b"x = 1", "python")
        assert excinfo.value.language == "python"
        assert excinfo.value.supported_languages == ["java"]

    def test_parsing_from_several_threads(self):
        """One parser instance can be shared by worker threads."""
        parser = TreeSitterParser()
        results = []
        lock = threading.Lock()

        def work(index):
            code = f"class C{index} {{ int f() {{ return {index}; }} }}"
            tree = parser.parse(code.encode(), "java")
            with lock:
                results.append(tree.root_node.has_error)

        threads = [threading.Thread(target=work, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [False] * 8
