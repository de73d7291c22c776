"""Data model shared by loaders and the caches built on them.

A loader plays the part of the compiler: given a :class:`LoadConfig` it
returns :class:`CompiledUnit` objects, each carrying the :class:`SyntaxTree`
of every source file it compiled and its direct dependency units. The
caches only store and hand out these objects; they never mutate them.
"""

from __future__ import annotations

import bisect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class TokenFile:
    """Position index for one parsed source file.

    Lines are 1-based, columns are 0-based byte offsets within the line.
    """

    name: str
    size: int
    line_starts: tuple[int, ...] = (0,)

    @classmethod
    def from_source(cls, name: str, src: bytes) -> TokenFile:
        starts = [0]
        starts.extend(i + 1 for i, b in enumerate(src) if b == 0x0A)
        return cls(name=name, size=len(src), line_starts=tuple(starts))

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def line_start(self, line: int) -> int:
        """Byte offset of the first character of ``line``."""
        if not 1 <= line <= self.line_count:
            raise ValueError(f"line {line} out of range [1:{self.line_count}] in {self.name}")
        return self.line_starts[line - 1]

    def offset(self, line: int, column: int) -> int:
        """Byte offset for a (line, column) position."""
        start = self.line_start(line)
        offset = start + column
        if column < 0 or offset > self.size:
            raise ValueError(f"column {column} out of range on line {line} in {self.name}")
        return offset

    def position(self, offset: int) -> tuple[int, int]:
        """(line, column) for a byte offset."""
        if not 0 <= offset <= self.size:
            raise ValueError(f"offset {offset} out of range [0:{self.size}] in {self.name}")
        index = bisect.bisect_right(self.line_starts, offset) - 1
        return index + 1, offset - self.line_starts[index]


@dataclass
class SyntaxTree:
    """Parsed form of one source file."""

    filename: str
    tree: Any  # tree-sitter Tree (not serializable)
    token: TokenFile
    package_name: str = ""
    imports: list[str] = field(default_factory=list)
    error_count: int = 0

    @property
    def root_node(self) -> Any:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


@dataclass(eq=False)
class CompiledUnit:
    """One compiled package: a set of sources sharing an import path.

    ``imports`` maps each import path literal to the unit it resolved to.
    Units compare by identity.
    """

    id: str
    name: str
    pkg_path: str
    go_files: list[str] = field(default_factory=list)
    compiled_go_files: list[str] = field(default_factory=list)
    syntax: list[SyntaxTree] = field(default_factory=list)
    imports: dict[str, CompiledUnit] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    for_test: str = ""

    def __repr__(self) -> str:
        return f"CompiledUnit(id={self.id!r}, files={len(self.compiled_go_files)})"


# Content-override hook: (filename, src) -> SyntaxTree. ``src`` is the
# content the loader resolved for the file, or None to read from disk.
ParseFileFunc = Callable[[str, bytes | None], SyntaxTree]


@dataclass
class LoadConfig:
    """Configuration of a single load.

    ``overlay`` holds unsaved editor content keyed by filename; loaders
    consult it before the disk. ``parse_file`` replaces the loader's own
    parser when set.
    """

    dir: str = ""
    tests: bool = True
    overlay: dict[str, bytes] = field(default_factory=dict)
    parse_file: ParseFileFunc | None = None
    excluded_dirs: frozenset[str] = frozenset({"vendor", "testdata"})
    max_file_size: int = 10 * 1024 * 1024


@runtime_checkable
class Loader(Protocol):
    """The compiler the caches delegate to.

    Implementations raise :class:`~unitcache.core.errors.LoadError` on
    failure and otherwise return every unit produced, possibly none.
    """

    def load_file(self, config: LoadConfig, filename: str) -> list[CompiledUnit]:
        """Load every unit that compiles ``filename``."""
        ...

    def load_tree(self, config: LoadConfig, directory: str) -> list[CompiledUnit]:
        """Load every unit found under ``directory``, recursively."""
        ...
