"""Lazy row-tree model: node arena, builder, providers, and row formatting."""

from __future__ import annotations

from .build import QUICK_OPEN_ORDER, BuildResult, RowBuilder
from .navigation import flatten_rows, is_visible, nearest_visible, sibling_rows
from .providers import (
    Enumerated,
    HandleSaveResult,
    NamespaceHandleSaver,
    NullRelationshipProvider,
    ProviderNotApplicable,
    ProviderSet,
    PythonExpressionProvider,
    RelationshipPolicy,
)
from .rendering import format_row, key_text, value_text
from .types import (
    BuildError,
    BuildErrorKind,
    BuildMode,
    ExpansionState,
    RowArena,
    RowNode,
    SubjectType,
)

__all__ = [
    "QUICK_OPEN_ORDER",
    "BuildError",
    "BuildErrorKind",
    "BuildMode",
    "BuildResult",
    "Enumerated",
    "ExpansionState",
    "HandleSaveResult",
    "NamespaceHandleSaver",
    "NullRelationshipProvider",
    "ProviderNotApplicable",
    "ProviderSet",
    "PythonExpressionProvider",
    "RelationshipPolicy",
    "RowArena",
    "RowBuilder",
    "RowNode",
    "SubjectType",
    "flatten_rows",
    "format_row",
    "is_visible",
    "key_text",
    "nearest_visible",
    "sibling_rows",
    "value_text",
]
