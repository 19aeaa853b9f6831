"""Child-row construction on demand.

``RowBuilder.expand`` asks one provider (or the quick-open policy) for a
node's children and appends them. Rebuilding never removes or reorders
existing children, and provider failures become diagnostic rows instead of
propagating.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import Any

from ..runtime.progress import ProgressSupervisor, ProgressTask, Supervised
from .providers import ProviderNotApplicable, ProviderSet
from .types import BuildError, BuildErrorKind, BuildMode, ExpansionState, RowArena, RowNode

logger = logging.getLogger(__name__)

QUICK_OPEN_ORDER: tuple[BuildMode, ...] = (
    BuildMode.RELATIONSHIPS,
    BuildMode.ATTRIBUTES,
    BuildMode.SMART_ENUMERABLE,
)
ERROR_DISCRIMINATOR = "<error>"


@dataclass(frozen=True)
class ChildItem:
    """One provider-reported child before it becomes a ``RowNode``."""

    discriminator: Hashable
    value: Any
    key: Any = None
    has_key: bool = False


@dataclass(frozen=True)
class BuildResult:
    node_id: int
    mode: BuildMode
    used_mode: BuildMode | None
    added: tuple[int, ...]
    error: BuildError | None
    alerted: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def _key_discriminator(key: Any, index: int) -> Hashable:
    try:
        hash(key)
    except TypeError:
        return ("#", index)
    return (type(key).__name__, key)


def _failure_kind(exc: BaseException, alerted: bool) -> BuildErrorKind:
    """A failure counts as a timeout if it is one, or if the deadline alert fired first."""
    return BuildErrorKind.TIMEOUT if isinstance(exc, TimeoutError) or alerted else BuildErrorKind.FAILURE


def _sized_total(items: Any) -> int | None:
    try:
        return len(items)
    except TypeError:
        return None


class RowBuilder:
    """Turn node subjects into child rows through the configured providers."""

    def __init__(self, arena: RowArena, providers: ProviderSet, supervisor: ProgressSupervisor) -> None:
        self.arena = arena
        self.providers = providers
        self.supervisor = supervisor

    def _collect(self, mode: BuildMode, subject: Any, progress: ProgressTask) -> list[ChildItem]:
        """Drain one provider into ``ChildItem`` records, ticking per item."""
        items: list[ChildItem] = []
        if mode is BuildMode.ATTRIBUTES:
            pairs: Iterable[tuple[str, Any]] = self.providers.attributes.expand(subject)
            progress.total = _sized_total(pairs)
            for name, value in pairs:
                items.append(ChildItem(discriminator=name, value=value, key=name, has_key=True))
                progress.tick()
        elif mode is BuildMode.RELATIONSHIPS:
            relationships = self.providers.relationships
            if not getattr(relationships, "available", True):
                return items
            pairs = relationships.expand(subject, self.providers.relationship_policy)
            progress.total = _sized_total(pairs)
            for name, related in pairs:
                items.append(ChildItem(discriminator=name, value=related, key=name, has_key=True))
                progress.tick()
        elif mode is BuildMode.SMART_ENUMERABLE:
            enumerated = self.providers.enumerable.expand(subject)
            progress.total = _sized_total(enumerated.items)
            for index, entry in enumerate(enumerated.items):
                if enumerated.keyed:
                    key, value = entry
                    items.append(
                        ChildItem(
                            discriminator=_key_discriminator(key, index),
                            value=value,
                            key=key,
                            has_key=True,
                        )
                    )
                else:
                    items.append(ChildItem(discriminator=index, value=entry))
                progress.tick()
        else:
            raise ValueError(f"{mode.value} is not a provider mode")
        return items

    def _run_provider(self, mode: BuildMode, subject: Any) -> Supervised[list[ChildItem]]:
        def work() -> list[ChildItem]:
            with self.supervisor.task(mode.value) as progress:
                return self._collect(mode, subject, progress)

        return self.supervisor.supervise(f"building {mode.value}", work)

    def _append(self, node: RowNode, mode: BuildMode, items: list[ChildItem]) -> tuple[int, ...]:
        added: list[int] = []
        with node.lock:
            existing = {self.arena[child].origin for child in node.children}
            for item in items:
                origin = (mode, item.discriminator)
                if origin in existing:
                    continue
                child = self.arena.new_node(
                    item.value,
                    key=item.key,
                    has_key=item.has_key,
                    parent=node.id,
                    origin=origin,
                )
                node.children.append(child.id)
                existing.add(origin)
                added.append(child.id)
            node.structure_built = True
            node.expansion_state = ExpansionState.BUILT_OPEN
        return tuple(added)

    def _record_failure(self, node: RowNode, mode: BuildMode, exc: Exception, alerted: bool) -> BuildError:
        kind = _failure_kind(exc, alerted)
        error = BuildError(kind=kind, mode=mode, message=f"{type(exc).__name__}: {exc}")
        logger.info("build %s failed for row %d: %s", mode.value, node.id, error.message)
        origin = (mode, ERROR_DISCRIMINATOR)
        with node.lock:
            node.build_error = error
            if all(self.arena[child].origin != origin for child in node.children):
                row = self.arena.new_node(
                    exc,
                    key=f"<{mode.value} {kind.value}>",
                    has_key=True,
                    parent=node.id,
                    is_error_row=True,
                    origin=origin,
                )
                node.children.append(row.id)
            node.structure_built = True
            node.expansion_state = ExpansionState.BUILT_OPEN
        return error

    def expand(self, node_id: int, mode: BuildMode) -> BuildResult:
        """Build (or extend) the children of ``node_id`` using ``mode``."""
        node = self.arena[node_id]
        if mode is BuildMode.QUICK_OPEN:
            return self._quick_open(node)
        if mode is BuildMode.EVALUATION:
            raise ValueError("use RowBuilder.evaluate for expression rows")

        outcome = self._run_provider(mode, node.value)
        if outcome.error is not None:
            error = self._record_failure(node, mode, outcome.error, outcome.alerted)
            return BuildResult(node_id, mode, None, (), error, outcome.alerted)
        node.build_error = None
        added = self._append(node, mode, outcome.value or [])
        return BuildResult(node_id, mode, mode, added, None, outcome.alerted)

    def _quick_open(self, node: RowNode) -> BuildResult:
        """Try relationships, attributes, then enumerable; keep the first non-empty one."""

        def work() -> tuple[BuildMode | None, list[ChildItem], list[tuple[BuildMode, Supervised]]]:
            failures: list[tuple[BuildMode, Supervised]] = []
            with self.supervisor.task("quick open", total=len(QUICK_OPEN_ORDER)) as progress:
                for mode in QUICK_OPEN_ORDER:
                    outcome = self._run_provider(mode, node.value)
                    progress.tick()
                    if isinstance(outcome.error, ProviderNotApplicable):
                        continue
                    if outcome.error is not None:
                        failures.append((mode, outcome))
                        continue
                    if outcome.value:
                        return mode, outcome.value, failures
            return None, [], failures

        outer = self.supervisor.supervise("quick open", work)
        if outer.error is not None:
            error = self._record_failure(node, BuildMode.QUICK_OPEN, outer.error, outer.alerted)
            return BuildResult(node.id, BuildMode.QUICK_OPEN, None, (), error, outer.alerted)
        used_mode, items, failures = outer.value
        if used_mode is not None:
            node.build_error = None
            added = self._append(node, used_mode, items)
            return BuildResult(node.id, BuildMode.QUICK_OPEN, used_mode, added, None, outer.alerted)
        if failures:
            mode, failed = failures[0]
            error = self._record_failure(node, mode, failed.error, failed.alerted or outer.alerted)
            return BuildResult(node.id, BuildMode.QUICK_OPEN, None, (), error, outer.alerted)
        with node.lock:
            node.structure_built = True
            node.expansion_state = ExpansionState.BUILT_OPEN
        return BuildResult(node.id, BuildMode.QUICK_OPEN, None, (), None, outer.alerted)

    def evaluate(self, node_id: int, expression: str) -> BuildResult:
        """Evaluate ``expression`` against the node's value as a new user-added child."""
        node = self.arena[node_id]
        outcome = self.supervisor.supervise(
            "evaluating",
            lambda: self.providers.expressions.evaluate(node.value, expression),
        )
        failed = outcome.error is not None
        if failed:
            logger.info("expression %r failed on row %d: %s", expression, node_id, outcome.error)
        with node.lock:
            child = self.arena.new_node(
                outcome.error if failed else outcome.value,
                key=expression.strip(),
                has_key=True,
                parent=node.id,
                user_added=True,
                is_error_row=failed,
                origin=(BuildMode.EVALUATION, len(node.children)),
            )
            node.children.append(child.id)
            # structure_built stays untouched: expression rows are not a structural build.
            node.expansion_state = ExpansionState.BUILT_OPEN
        error = None
        if failed:
            error = BuildError(
                kind=_failure_kind(outcome.error, outcome.alerted),
                mode=BuildMode.EVALUATION,
                message=f"{type(outcome.error).__name__}: {outcome.error}",
            )
        return BuildResult(node_id, BuildMode.EVALUATION, BuildMode.EVALUATION, (child.id,), error, outcome.alerted)
