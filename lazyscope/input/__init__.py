"""Input layer: raw key decoding, scripted replay, prompts, and key registries."""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key
from .sources import (
    NAMED_KEYS,
    KeySource,
    ScriptedKeySource,
    TerminalKeySource,
    parse_action_script,
    read_line,
)

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "NAMED_KEYS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeySource",
    "ScriptedKeySource",
    "TerminalKeySource",
    "parse_action_script",
    "read_key",
    "read_line",
]
