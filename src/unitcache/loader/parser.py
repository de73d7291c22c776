"""Tree-sitter parsing of Go sources.

Produces :class:`SyntaxTree` objects carrying the tree-sitter tree, the
position index, the declared package name and the import path literals.
No semantic analysis happens here.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_go

from unitcache.core.errors import LoadError
from unitcache.loader.models import SyntaxTree, TokenFile

_GO_LANGUAGE = tree_sitter.Language(tree_sitter_go.language())

_STRING_LITERALS = frozenset({"interpreted_string_literal", "raw_string_literal"})


class GoParser:
    """Parses Go source files with tree-sitter.

    tree-sitter parsers are not safe to share between threads, so each
    thread gets its own.

    Usage::

        parser = GoParser()
        syntax = parser.parse("/repo/a/a.go", b"package a\\n")
        syntax.package_name  # "a"
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _parser(self) -> tree_sitter.Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = tree_sitter.Parser()
            parser.language = _GO_LANGUAGE
            self._local.parser = parser
        return parser

    def parse(self, filename: str, src: bytes | None = None) -> SyntaxTree:
        """
        Parse one file.

        Args:
            filename: Path of the file, recorded in the position index.
            src: File content. If None, reads from ``filename``.

        Returns:
            SyntaxTree with package name, imports and error count.

        Raises:
            LoadError: If ``src`` is None and the file cannot be read.
        """
        if src is None:
            src = read_source(filename)

        tree = self._parser().parse(src)
        root = tree.root_node

        return SyntaxTree(
            filename=filename,
            tree=tree,
            token=TokenFile.from_source(filename, src),
            package_name=_package_name(root),
            imports=_import_paths(root),
            error_count=_count_errors(root),
        )


def read_source(filename: str) -> bytes:
    try:
        return Path(filename).read_bytes()
    except FileNotFoundError as e:
        raise LoadError.not_found(filename) from e
    except OSError as e:
        raise LoadError.failed(filename, e.strerror or str(e)) from e


def _text(node: Any) -> str:
    return node.text.decode("utf-8") if node is not None and node.text else ""


def _package_name(root: Any) -> str:
    for child in root.children:
        if child.type == "package_clause":
            for sub in child.children:
                if sub.type == "package_identifier":
                    return _text(sub)
    return ""


def _import_paths(root: Any) -> list[str]:
    """Import path literals in declaration order."""
    paths: list[str] = []
    for child in root.children:
        if child.type != "import_declaration":
            continue
        specs: list[Any] = []
        for sub in child.children:
            if sub.type == "import_spec":
                specs.append(sub)
            elif sub.type == "import_spec_list":
                specs.extend(s for s in sub.children if s.type == "import_spec")
        for spec in specs:
            path_node = spec.child_by_field_name("path")
            if path_node is None:
                path_node = next((c for c in spec.children if c.type in _STRING_LITERALS), None)
            path = _text(path_node).strip('"`')
            if path:
                paths.append(path)
    return paths


def _count_errors(root: Any) -> int:
    errors = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            errors += 1
        stack.extend(node.children)
    return errors
