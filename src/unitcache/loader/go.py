"""Syntactic Go package loader.

Turns directories of ``.go`` files into :class:`CompiledUnit` objects:

- A directory is one package; its import path is the module path from the
  nearest ``go.mod`` joined with the directory's path inside the module.
  Without a ``go.mod`` the module root is the load directory and the module
  path is its base name.
- With ``config.tests`` set, a package with ``_test.go`` files also yields a
  test variant ``"p [p.test]"`` compiling the package and its in-package
  tests, and, for ``package p_test`` files, an external test unit
  ``"p_test [p.test]"``. The plain package always comes first.
- Imports inside the module are loaded recursively, with syntax. Imports
  outside the module become units without files.
- Sources come from ``config.overlay`` before the disk and are handed to
  ``config.parse_file`` when set.

Syntax errors never fail a load; they are recorded in ``unit.errors``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import structlog

from unitcache.core.errors import LoadError
from unitcache.loader.models import CompiledUnit, LoadConfig, ParseFileFunc, SyntaxTree
from unitcache.loader.parser import GoParser, read_source

logger = structlog.get_logger()

_MODULE_RE = re.compile(rb"^\s*module\s+\"?([^\s\"]+)\"?", re.MULTILINE)


class GoLoader:
    """Loader for Go packages, parsed with tree-sitter."""

    def __init__(self, parser: GoParser | None = None) -> None:
        self._parser = parser or GoParser()

    def load_file(self, config: LoadConfig, filename: str) -> list[CompiledUnit]:
        path = _abspath(config, filename)
        if path.suffix != ".go":
            raise LoadError.failed(filename, "not a Go source file")
        if not path.is_file() and str(path) not in config.overlay:
            raise LoadError.not_found(str(path))

        session = _LoadSession(config, self._parser.parse, path.parent)
        units = session.load_dir(path.parent)
        return [u for u in units if str(path) in u.compiled_go_files]

    def load_tree(self, config: LoadConfig, directory: str) -> list[CompiledUnit]:
        root = _abspath(config, directory)
        if not root.is_dir():
            raise LoadError.not_found(str(root))

        session = _LoadSession(config, self._parser.parse, root)
        units: list[CompiledUnit] = []
        for package_dir in session.walk(root):
            units.extend(session.load_dir(package_dir))
        logger.debug("loader_tree_loaded", root=str(root), units=len(units))
        return units


def _abspath(config: LoadConfig, name: str) -> Path:
    path = Path(name)
    if not path.is_absolute():
        path = Path(config.dir or os.getcwd()) / path
    return Path(os.path.normpath(path))


def find_module(start: Path) -> tuple[Path, str]:
    """Locate the enclosing module: (module root, module path)."""
    for candidate in (start, *start.parents):
        go_mod = candidate / "go.mod"
        if go_mod.is_file():
            match = _MODULE_RE.search(go_mod.read_bytes())
            if match:
                return candidate, match.group(1).decode("utf-8")
            return candidate, candidate.name
    return start, start.name


class _LoadSession:
    """State of one load: module layout plus per-directory memoization."""

    def __init__(self, config: LoadConfig, default_parse: ParseFileFunc, start: Path) -> None:
        self._config = config
        self._parse = config.parse_file or default_parse
        self._module_root, self._module_path = find_module(
            Path(config.dir) if config.dir else start
        )
        self._packages: dict[Path, list[CompiledUnit]] = {}
        self._external: dict[str, CompiledUnit] = {}
        self._syntax: dict[str, SyntaxTree | None] = {}

    def walk(self, root: Path) -> list[Path]:
        """Directories under ``root`` holding Go sources, in sorted order."""
        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(
                d
                for d in dirnames
                if not d.startswith((".", "_")) and d not in self._config.excluded_dirs
            )
            if any(name.endswith(".go") for name in filenames):
                found.append(Path(dirpath))
        return found

    def pkg_path(self, directory: Path) -> str:
        try:
            rel = directory.relative_to(self._module_root)
        except ValueError:
            return directory.as_posix().lstrip("/")
        if rel == Path("."):
            return self._module_path
        return f"{self._module_path}/{rel.as_posix()}"

    def _dir_for_import(self, import_path: str) -> Path | None:
        if import_path == self._module_path:
            return self._module_root
        prefix = self._module_path + "/"
        if import_path.startswith(prefix):
            return self._module_root / import_path[len(prefix) :]
        return None

    def _sources(self, directory: Path) -> list[str]:
        names: set[str] = set()
        if directory.is_dir():
            names.update(
                str(directory / entry.name)
                for entry in os.scandir(directory)
                if entry.name.endswith(".go") and entry.is_file()
            )
        names.update(
            name
            for name in self._config.overlay
            if name.endswith(".go") and Path(name).parent == directory
        )
        return sorted(names)

    def _read(self, filename: str) -> bytes | None:
        if filename in self._config.overlay:
            return self._config.overlay[filename]
        src = read_source(filename)
        if len(src) > self._config.max_file_size:
            logger.warning("loader_skip_large_file", filename=filename, size=len(src))
            return None
        return src

    def _parse_file(self, filename: str) -> SyntaxTree | None:
        if filename not in self._syntax:
            src = self._read(filename)
            self._syntax[filename] = None if src is None else self._parse(filename, src)
        return self._syntax[filename]

    def load_dir(self, directory: Path) -> list[CompiledUnit]:
        """Units compiled from ``directory``: plain package first."""
        if directory in self._packages:
            return self._packages[directory]

        sources = self._sources(directory)
        lib_files = [f for f in sources if not f.endswith("_test.go")]
        test_files = [f for f in sources if f.endswith("_test.go")] if self._config.tests else []

        lib_syntax = [s for s in map(self._parse_file, lib_files) if s is not None]
        test_syntax = [s for s in map(self._parse_file, test_files) if s is not None]

        path = self.pkg_path(directory)
        name = next((s.package_name for s in lib_syntax if s.package_name), "")
        if not name:
            name = next((s.package_name for s in test_syntax if s.package_name), "")
            name = name.removesuffix("_test")

        in_pkg_tests = [s for s in test_syntax if s.package_name == name]
        ext_tests = [s for s in test_syntax if s.package_name != name]

        units: list[CompiledUnit] = []
        if lib_syntax:
            units.append(_new_unit(path, name, path, lib_syntax))
        if in_pkg_tests:
            unit = _new_unit(f"{path} [{path}.test]", name, path, lib_syntax + in_pkg_tests)
            unit.for_test = path
            units.append(unit)
        if ext_tests:
            unit = _new_unit(f"{path}_test [{path}.test]", f"{name}_test", f"{path}_test", ext_tests)
            unit.for_test = path
            units.append(unit)

        # Register before resolving imports so import cycles terminate.
        self._packages[directory] = units
        for unit in units:
            self._resolve_imports(unit)
        return units

    def _resolve_imports(self, unit: CompiledUnit) -> None:
        for syntax in unit.syntax:
            for import_path in syntax.imports:
                if import_path in unit.imports:
                    continue
                dep = self._load_import(import_path)
                if dep is not None and dep is not unit:
                    unit.imports[import_path] = dep

    def _load_import(self, import_path: str) -> CompiledUnit | None:
        directory = self._dir_for_import(import_path)
        if directory is not None:
            deps = self.load_dir(directory)
            if deps and not deps[0].for_test:
                return deps[0]
            logger.debug("loader_import_unresolved", import_path=import_path)
            return None
        if import_path not in self._external:
            self._external[import_path] = CompiledUnit(
                id=import_path,
                name=import_path.rsplit("/", 1)[-1],
                pkg_path=import_path,
            )
        return self._external[import_path]


def _new_unit(unit_id: str, name: str, pkg_path: str, syntax: list[SyntaxTree]) -> CompiledUnit:
    files = [s.filename for s in syntax]
    errors = [f"{s.filename}: {s.error_count} syntax error(s)" for s in syntax if s.has_errors]
    return CompiledUnit(
        id=unit_id,
        name=name,
        pkg_path=pkg_path,
        go_files=list(files),
        compiled_go_files=list(files),
        syntax=list(syntax),
        errors=errors,
    )
