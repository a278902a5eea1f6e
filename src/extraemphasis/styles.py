"""Style registry: the canonical marker -> style table.

Markers are short delimiter tokens (``!!``, ``!@``, ...).  Each active
marker maps to an abstract ``StyleDescriptor``.  Sixteen descriptor slots
are pre-declared; only the first two carry attribute values, the rest
inherit the base descriptor and are meant to be configured by the user
when more than two markers are in use.

Configuration is not validated.  Duplicate markers resolve last-write-wins
and collisions with the host language's own markers are only logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import product
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

__all__ = [
    "BASE_FACE",
    "DEFAULT_ALPHABET",
    "DEFAULT_FACES",
    "FACE_SLOTS",
    "StyleDescriptor",
    "StyleRegistry",
    "StyleTable",
    "alphabet_configuration",
    "alphabet_markers",
]

DEFAULT_ALPHABET = "!@%&"

_ATTRIBUTES = (
    "foreground",
    "background",
    "weight",
    "slant",
    "size",
    "underline",
    "strike_through",
)


@dataclass(frozen=True, slots=True)
class StyleDescriptor:
    """Abstract bag of presentation attributes.

    Unset attributes are ``None``.  ``inherit`` names another descriptor
    whose attributes fill in the unset ones (see ``StyleRegistry.resolve``).

    Attributes:
        name: Descriptor name, also used to derive backend style ids.
        foreground: CSS colour (``#RRGGBB`` or a colour name).
        background: CSS colour (``#RRGGBB`` or a colour name).
        weight: ``"bold"`` or ``"normal"``.
        slant: ``"italic"`` or ``"normal"``.
        size: Height relative to the surrounding text (``1.2`` = 120%).
        underline: Underline the text.
        strike_through: Strike the text through.
        inherit: Name of the parent descriptor.
    """

    name: str
    foreground: str | None = None
    background: str | None = None
    weight: str | None = None
    slant: str | None = None
    size: float | None = None
    underline: bool | None = None
    strike_through: bool | None = None
    inherit: str | None = None

    @property
    def is_plain(self) -> bool:
        """True when no presentation attribute is set."""
        return all(getattr(self, attr) is None for attr in _ATTRIBUTES)

    def attributes(self) -> dict[str, object]:
        """Return the set presentation attributes as a dict."""
        return {
            attr: getattr(self, attr)
            for attr in _ATTRIBUTES
            if getattr(self, attr) is not None
        }


BASE_FACE = StyleDescriptor(name="extra-emphasis")

FACE_SLOTS = tuple(f"extra-emphasis-{n:02d}" for n in range(1, 17))

DEFAULT_FACES: tuple[StyleDescriptor, ...] = (
    BASE_FACE,
    StyleDescriptor(name=FACE_SLOTS[0], foreground="#FF0000", inherit=BASE_FACE.name),
    StyleDescriptor(name=FACE_SLOTS[1], foreground="#0000FF", inherit=BASE_FACE.name),
    *(StyleDescriptor(name=slot, inherit=BASE_FACE.name) for slot in FACE_SLOTS[2:]),
)


def alphabet_markers(alphabet: str = DEFAULT_ALPHABET) -> list[str]:
    """All ordered two-symbol markers over *alphabet*.

    Duplicate symbols are dropped first, so ``"!@%&"`` yields 16 markers
    (``!!``, ``!@``, ``!%``, ``!&``, ``@!``, ...).
    """
    symbols = list(dict.fromkeys(alphabet))
    return [a + b for a, b in product(symbols, repeat=2)]


def alphabet_configuration(
    alphabet: str = DEFAULT_ALPHABET,
) -> list[tuple[str, str]]:
    """Pair the alphabet markers with the pre-declared face slots in order.

    Markers beyond the sixteenth slot are not paired.
    """
    return list(zip(alphabet_markers(alphabet), FACE_SLOTS, strict=False))


@dataclass(frozen=True, slots=True)
class StyleTable:
    """Immutable view of the registry used by the matcher and transcoder.

    ``markers`` is empty when the feature is disabled, even though
    ``entries`` still holds the configured pairs.
    """

    entries: tuple[tuple[str, StyleDescriptor], ...] = ()
    verbatim: frozenset[str] = frozenset()
    enabled: bool = True
    faces: Mapping[str, StyleDescriptor] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def markers(self) -> tuple[str, ...]:
        if not self.enabled:
            return ()
        return tuple(marker for marker, _ in self.entries)

    def style_for(self, marker: str) -> StyleDescriptor | None:
        for candidate, style in self.entries:
            if candidate == marker:
                return style
        return None

    def is_verbatim(self, marker: str) -> bool:
        return marker in self.verbatim

    def resolve(self, descriptor: StyleDescriptor) -> StyleDescriptor:
        """Flatten the ``inherit`` chain of *descriptor*.

        Attributes set lower in the chain win.  Unknown parents end the
        chain; a cycle ends it at the first repeated name.
        """
        merged = descriptor.attributes()
        seen = {descriptor.name}
        parent_name = descriptor.inherit
        while parent_name is not None and parent_name not in seen:
            seen.add(parent_name)
            parent = self.faces.get(parent_name)
            if parent is None:
                logger.debug(
                    "Unknown parent style %r of %r", parent_name, descriptor.name
                )
                break
            for attr, value in parent.attributes().items():
                merged.setdefault(attr, value)
            parent_name = parent.inherit
        return StyleDescriptor(name=descriptor.name, **merged)


class StyleRegistry:
    """Owner of the active marker -> style configuration."""

    def __init__(self, faces: Iterable[StyleDescriptor] = DEFAULT_FACES) -> None:
        self._faces: dict[str, StyleDescriptor] = {face.name: face for face in faces}
        self._pairs: dict[str, StyleDescriptor] = {}
        self._verbatim: frozenset[str] = frozenset()
        self._enabled = True
        self._snapshot: StyleTable | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def markers(self) -> tuple[str, ...]:
        return self.snapshot().markers

    def define(self, descriptor: StyleDescriptor) -> None:
        """Add or replace a named descriptor."""
        self._faces[descriptor.name] = descriptor
        self._snapshot = None

    def face(self, name: str) -> StyleDescriptor:
        """Look up a named descriptor.

        Unknown names yield a descriptor that only inherits the base, the
        same as an unconfigured slot.
        """
        found = self._faces.get(name)
        if found is None:
            logger.debug("Style %r is not defined, using base style", name)
            return StyleDescriptor(name=name, inherit=BASE_FACE.name)
        return found

    def set_configuration(
        self,
        pairs: Iterable[tuple[str, StyleDescriptor | str]],
        enabled: bool = True,
        verbatim: Iterable[str] = (),
    ) -> None:
        """Replace the active configuration.

        Args:
            pairs: ``(marker, style)`` pairs; *style* is a descriptor or the
                name of a defined one.  A repeated marker keeps its first
                position and its last style.
            enabled: When false the effective marker set is empty.
            verbatim: Markers whose content is taken literally.
        """
        from extraemphasis.syntax import NATIVE_MARKERS

        table: dict[str, StyleDescriptor] = {}
        for marker, style in pairs:
            if not marker:
                logger.warning("Ignoring empty emphasis marker")
                continue
            descriptor = self.face(style) if isinstance(style, str) else style
            if isinstance(style, StyleDescriptor) and style.name not in self._faces:
                self._faces[style.name] = style
            if marker in table:
                logger.debug(
                    "Marker %r configured more than once, last style wins", marker
                )
            table[marker] = descriptor

        for marker in table:
            clashes = [native for native in NATIVE_MARKERS if native in marker]
            if clashes:
                logger.warning(
                    "Marker %r contains native emphasis marker(s) %s",
                    marker,
                    "".join(clashes),
                )

        self._pairs = table
        self._verbatim = frozenset(m for m in verbatim if m in table)
        self._enabled = enabled
        self._snapshot = None
        logger.debug(
            "Emphasis configuration set: %d marker(s), enabled=%s",
            len(table),
            enabled,
        )

    def style_for(self, marker: str) -> StyleDescriptor | None:
        return self._pairs.get(marker)

    def is_verbatim(self, marker: str) -> bool:
        return marker in self._verbatim

    def resolve(self, descriptor: StyleDescriptor) -> StyleDescriptor:
        return self.snapshot().resolve(descriptor)

    def snapshot(self) -> StyleTable:
        """Return the immutable view of the current configuration."""
        if self._snapshot is None:
            self._snapshot = StyleTable(
                entries=tuple(self._pairs.items()),
                verbatim=self._verbatim,
                enabled=self._enabled,
                faces=MappingProxyType(dict(self._faces)),
            )
        return self._snapshot


