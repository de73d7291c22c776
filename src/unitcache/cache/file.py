"""Per-file state tracked by a view."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from unitcache.loader.parser import read_source

if TYPE_CHECKING:
    from unitcache.cache.uri import URI
    from unitcache.cache.view import View
    from unitcache.loader.models import CompiledUnit, SyntaxTree, TokenFile


@dataclass(eq=False)
class File:
    """One source file known to a view.

    Created empty on first lookup and filled in place as parse results
    arrive. ``content`` is the exact source the current ``ast`` was parsed
    from.
    """

    uri: URI
    view: View = field(repr=False)
    content: bytes | None = field(default=None, repr=False)
    ast: SyntaxTree | None = field(default=None, repr=False)
    token: TokenFile | None = field(default=None, repr=False)
    unit: CompiledUnit | None = None

    @property
    def filename(self) -> str:
        return self.uri.filename()

    @property
    def is_parsed(self) -> bool:
        return self.unit is not None

    def set_content(self, content: bytes | None) -> None:
        self.content = content

    def read(self) -> bytes:
        """Current content: parsed content, else unsaved edits, else disk.

        A disk read is not stored; ``content`` only ever holds parsed source.
        """
        if self.content is not None:
            return self.content
        filename = self.filename
        overlay = self.view.config.overlay
        if filename in overlay:
            return overlay[filename]
        return read_source(filename)

    def reset(self) -> None:
        """Forget parse results so the next lookup reparses."""
        self.content = None
        self.ast = None
        self.token = None
        self.unit = None
