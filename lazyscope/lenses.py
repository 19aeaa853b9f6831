"""Lens registry: named renderers that turn a subject into inspectable text.

A lens that raises never aborts rendering; its traceback becomes the lens
output instead, marked by ``LensResult.ok = False``.
"""

from __future__ import annotations

import inspect
import logging
import pprint
import traceback
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import PythonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
PRETTY_WIDTH = 100


class Lens(Protocol):
    name: str

    def apply(self, subject: Any) -> str: ...


@dataclass(frozen=True)
class LensResult:
    text: str
    ok: bool = True


_FORMATTERS: dict[str, Terminal256Formatter] = {}


def _formatter_for_style(style: str) -> Terminal256Formatter:
    """Return a cached 256-color formatter, falling back to the default style."""
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    try:
        get_style_by_name(style)
        resolved = style
    except ClassNotFound:
        resolved = DEFAULT_STYLE
    formatter = Terminal256Formatter(style=resolved)
    _FORMATTERS[style] = formatter
    return formatter


def highlight_python(source: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    if no_color:
        return source
    return highlight(source, PythonLexer(), _formatter_for_style(style)).rstrip("\n")


class PrettyLens:
    name = "Pretty Print"

    def __init__(self, style: str = DEFAULT_STYLE, no_color: bool = False) -> None:
        self.style = style
        self.no_color = no_color

    def apply(self, subject: Any) -> str:
        return highlight_python(pprint.pformat(subject, width=PRETTY_WIDTH), self.style, self.no_color)


class ReprLens:
    name = "repr"

    def apply(self, subject: Any) -> str:
        return repr(subject)


class StrLens:
    name = "str"

    def apply(self, subject: Any) -> str:
        return str(subject)


class MembersLens:
    """List public data attributes and callables with their types."""

    name = "Members"

    def apply(self, subject: Any) -> str:
        data: list[str] = []
        callables: list[str] = []
        for member in dir(subject):
            if member.startswith("_"):
                continue
            try:
                value = getattr(subject, member)
            except Exception as exc:
                data.append(f"  {member}  <{type(exc).__name__}>")
                continue
            if callable(value):
                try:
                    signature = str(inspect.signature(value))
                except (TypeError, ValueError):
                    signature = "(...)"
                callables.append(f"  {member}{signature}")
            else:
                data.append(f"  {member}: {type(value).__name__}")
        lines = [f"{type(subject).__module__}.{type(subject).__qualname__}", ""]
        lines.append(f"ATTRIBUTES ({len(data)})")
        lines.extend(data)
        lines.append("")
        lines.append(f"METHODS ({len(callables)})")
        lines.extend(callables)
        return "\n".join(lines)


class SourceLens:
    """Show source for functions, classes and modules, else for the subject's class."""

    name = "Source"

    def __init__(self, style: str = DEFAULT_STYLE, no_color: bool = False) -> None:
        self.style = style
        self.no_color = no_color

    def apply(self, subject: Any) -> str:
        target = subject
        if not (inspect.isroutine(subject) or inspect.isclass(subject) or inspect.ismodule(subject)):
            target = type(subject)
        source = inspect.getsource(target)
        location = inspect.getsourcefile(target) or "<unknown>"
        return f"# {location}\n" + highlight_python(source, self.style, self.no_color)


BUILTIN_LENS_NAMES: tuple[str, ...] = ("pretty", "repr", "str", "members", "source")


def builtin_lenses(names: Iterable[str] = BUILTIN_LENS_NAMES, style: str = DEFAULT_STYLE, no_color: bool = False) -> list[Lens]:
    """Instantiate built-in lenses in ``names`` order; unknown names are skipped."""
    factories = {
        "pretty": lambda: PrettyLens(style, no_color),
        "repr": ReprLens,
        "str": StrLens,
        "members": MembersLens,
        "source": lambda: SourceLens(style, no_color),
    }
    return [factories[name]() for name in names if name in factories]


class LensRegistry:
    """Ordered collection of lenses addressed modulo its length."""

    def __init__(self, lenses: Sequence[Lens]) -> None:
        if not lenses:
            raise ValueError("at least one lens is required")
        self._lenses = list(lenses)

    def __len__(self) -> int:
        return len(self._lenses)

    def resolve_index(self, lens_index: int) -> int:
        return lens_index % len(self._lenses)

    def lens_at(self, lens_index: int) -> Lens:
        return self._lenses[self.resolve_index(lens_index)]

    def names(self) -> list[str]:
        return [lens.name for lens in self._lenses]

    def render(self, lens_index: int, subject: Any) -> LensResult:
        lens = self.lens_at(lens_index)
        try:
            return LensResult(lens.apply(subject))
        except Exception as exc:
            logger.debug("lens %s failed: %s", lens.name, exc)
            return LensResult("".join(traceback.format_exception(exc)).rstrip("\n"), ok=False)
