"""Exception taxonomy for poeditor-sync.

Every error the tool raises on purpose derives from ``PoeditorSyncError``
so the CLI can turn it into a one-line message and a non-zero exit code.

- ``SettingsInvalid``: bad or missing settings (also a ``ValueError``).
- ``SettingsDeclined``: the user rejected the settings confirmation.
- ``DeclarationError`` and subclasses: the declaration source could not
  be turned into localization keys.
- ``WrongResponse``: the POEditor API answered with something unusable.

Transport errors from ``requests`` are not wrapped; they propagate as-is.
"""

from __future__ import annotations

import ast
from typing import Any


class PoeditorSyncError(Exception):
    """Base class for all poeditor-sync errors."""


class SettingsInvalid(PoeditorSyncError, ValueError):
    """Settings are missing or structurally impossible."""


class SettingsDeclined(PoeditorSyncError):
    """The user did not confirm the resolved settings."""

    def __init__(self, message: str = "Entered settings are incorrect. Aborting execution") -> None:
        super().__init__(message)


# ---------------------------------------------------------------------------
# Declaration parsing
# ---------------------------------------------------------------------------


def describe_node(node: Any) -> str:
    """Short human-readable description of a declaration or ``ast`` node."""
    if isinstance(node, ast.AST):
        line = getattr(node, "lineno", None)
        where = f" at line {line}" if line is not None else ""
        return f"{type(node).__name__}{where}: {ast.unparse(node)[:80]!r}"
    name = getattr(node, "name", None)
    if name is not None:
        return f"{type(node).__name__} {name!r}"
    return repr(node)


class DeclarationError(PoeditorSyncError):
    """The declaration tree could not be flattened into keys."""


class DeclarationSyntaxError(DeclarationError):
    """The declaration source is not valid Python."""


class UnsupportedMemberKind(DeclarationError):
    """A container holds something that is neither a leaf nor a container."""

    def __init__(self, node: Any) -> None:
        self.node = node
        super().__init__(f"Unsupported member kind: {describe_node(node)}")


class UnresolvableIdentifier(DeclarationError):
    """A node name cannot be resolved to plain identifier text."""

    def __init__(self, node: Any) -> None:
        self.node = node
        super().__init__(f"Unresolvable identifier: {describe_node(node)}")


class NoKeysFound(DeclarationError):
    """The matched container (or containers) declared no leaves at all."""

    def __init__(self, container_name: str) -> None:
        self.container_name = container_name
        super().__init__(
            f"Localization keys not found under '{container_name}'"
        )


# ---------------------------------------------------------------------------
# Remote API
# ---------------------------------------------------------------------------


class WrongResponse(PoeditorSyncError):
    """The POEditor API returned a failed, malformed or empty envelope.

    Attributes:
        code: API response code (e.g. ``"4011"``) when one was returned.
        message: Message from the API or a description of the problem.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        self.code = code
        self.message = message
        text = f"Wrong response: {message}"
        if code:
            text += f" (code {code})"
        super().__init__(text)
