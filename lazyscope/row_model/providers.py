"""Introspection capabilities the row builder delegates to.

Each provider is a small strategy object. Hosts can swap any of them through
``ProviderSet``; the defaults here work on plain Python objects.
"""

from __future__ import annotations

import keyword
from collections.abc import Iterable, Mapping, MutableMapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


class ProviderNotApplicable(TypeError):
    """The subject is outside what a provider handles, as opposed to a provider failure."""


@dataclass(frozen=True)
class RelationshipPolicy:
    """Caller-supplied filters for relationship traversal."""

    include_empty: bool = False
    include_through: bool = False
    include_scoped: bool = False


@dataclass(frozen=True)
class Enumerated:
    """Smart-enumerable output: ``(key, value)`` pairs when ``keyed`` else bare values."""

    keyed: bool
    items: Iterable[Any]


class AttributeProvider(Protocol):
    def expand(self, subject: Any) -> Iterable[tuple[str, Any]]: ...


class RelationshipProvider(Protocol):
    available: bool

    def expand(self, subject: Any, policy: RelationshipPolicy) -> Iterable[tuple[str, Any]]: ...


class SmartEnumerableProvider(Protocol):
    def expand(self, subject: Any) -> Enumerated: ...


class ExpressionProvider(Protocol):
    def evaluate(self, subject: Any, expression: str) -> Any: ...


@dataclass(frozen=True)
class HandleSaveResult:
    ok: bool
    message: str


class HandleSaver(Protocol):
    def save(self, subjects: Sequence[Any], name: str) -> HandleSaveResult: ...


class InstanceAttributeProvider:
    """List instance attributes: ``__dict__`` entries, then populated ``__slots__``."""

    def expand(self, subject: Any) -> Iterable[tuple[str, Any]]:
        seen: set[str] = set()
        instance_dict = getattr(subject, "__dict__", None)
        # Classes and modules expose a mappingproxy/dict here too.
        if isinstance(instance_dict, Mapping):
            for name, value in list(instance_dict.items()):
                seen.add(name)
                yield str(name), value
        for klass in type(subject).__mro__:
            slots = klass.__dict__.get("__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            for name in slots:
                if name in seen or name in {"__dict__", "__weakref__"}:
                    continue
                seen.add(name)
                try:
                    value = getattr(subject, name)
                except AttributeError:
                    continue
                yield name, value


class NullRelationshipProvider:
    """Stand-in used when the host has no relationship system."""

    available = False

    def expand(self, subject: Any, policy: RelationshipPolicy) -> Iterable[tuple[str, Any]]:
        return ()


class DefaultSmartEnumerableProvider:
    """Enumerate mappings as pairs and other non-text iterables as values."""

    def expand(self, subject: Any) -> Enumerated:
        if isinstance(subject, (str, bytes, bytearray)):
            raise ProviderNotApplicable(f"{type(subject).__name__} is not treated as enumerable")
        if isinstance(subject, Mapping):
            return Enumerated(keyed=True, items=list(subject.items()))
        try:
            iterator = iter(subject)
        except TypeError as exc:
            raise ProviderNotApplicable(f"{type(subject).__name__} object is not iterable") from exc
        # One-shot iterators stay untouched.
        if iterator is subject:
            raise ProviderNotApplicable(f"{type(subject).__name__} is a one-shot iterator")
        return Enumerated(keyed=False, items=iterator)


class PythonExpressionProvider:
    """Evaluate Python expressions with the row subject bound to ``_``.

    An expression starting with ``.`` is applied to the subject directly, so
    ``.items()`` means ``_.items()``. Evaluation runs against ``namespace`` as
    globals, so expressions can read and mutate the caller's variables.
    """

    def __init__(self, namespace: MutableMapping[str, Any] | None = None) -> None:
        self.namespace: MutableMapping[str, Any] = namespace if namespace is not None else {}

    def evaluate(self, subject: Any, expression: str) -> Any:
        source = expression.strip()
        if source.startswith("."):
            source = "_" + source
        code = compile(source, "<lazyscope>", "eval")
        # ``_`` is bound as a global so nested scopes (genexps, lambdas) can see it.
        missing = object()
        previous = self.namespace.get("_", missing)
        self.namespace["_"] = subject
        try:
            return eval(code, self.namespace)  # noqa: S307
        finally:
            if previous is missing:
                self.namespace.pop("_", None)
            else:
                self.namespace["_"] = previous


class NamespaceHandleSaver:
    """Bind subjects to a new name in the caller's namespace, never overwriting."""

    def __init__(self, namespace: MutableMapping[str, Any] | None = None) -> None:
        self.namespace: MutableMapping[str, Any] = namespace if namespace is not None else {}

    def save(self, subjects: Sequence[Any], name: str) -> HandleSaveResult:
        name = name.strip()
        if not name.isidentifier() or keyword.iskeyword(name):
            return HandleSaveResult(False, f"{name!r} is not a valid variable name")
        if name in self.namespace:
            return HandleSaveResult(False, f"{name!r} is already defined")
        value = subjects[0] if len(subjects) == 1 else list(subjects)
        self.namespace[name] = value
        return HandleSaveResult(True, f"saved as {name}")


@dataclass
class ProviderSet:
    """Bundle of capabilities the builder and controller call into."""

    attributes: AttributeProvider = field(default_factory=InstanceAttributeProvider)
    relationships: RelationshipProvider = field(default_factory=NullRelationshipProvider)
    enumerable: SmartEnumerableProvider = field(default_factory=DefaultSmartEnumerableProvider)
    expressions: ExpressionProvider = field(default_factory=PythonExpressionProvider)
    handles: HandleSaver = field(default_factory=NamespaceHandleSaver)
    relationship_policy: RelationshipPolicy = field(default_factory=RelationshipPolicy)

    @classmethod
    def for_namespace(
        cls,
        namespace: MutableMapping[str, Any],
        relationship_policy: RelationshipPolicy | None = None,
    ) -> ProviderSet:
        """Defaults wired to one caller namespace for evaluation and handle saving."""
        return cls(
            expressions=PythonExpressionProvider(namespace),
            handles=NamespaceHandleSaver(namespace),
            relationship_policy=relationship_policy or RelationshipPolicy(),
        )
