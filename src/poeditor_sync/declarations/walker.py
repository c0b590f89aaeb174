"""Flatten declaration trees into dot-qualified localization keys.

Keys are emitted depth-first. At every level the leaves come first (in
source order), followed by the keys of each nested container (also in
source order)::

    I18n
      ok               -> "ok"
      Onboarding
        title          -> "Onboarding.title"

The configured root container's own name is not part of the keys.
Duplicates are emitted as they occur; set semantics belong to the
differencer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..errors import NoKeysFound, UnresolvableIdentifier, UnsupportedMemberKind
from .nodes import Container, DeclarationNode, Leaf, plain_name

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NAME = "I18n"


def qualify(root_path: str, name: str) -> str:
    """Join *name* onto *root_path* with a dot (no dot for an empty root)."""
    return name if not root_path else f"{root_path}.{name}"


def resolve_name(node: Container | Leaf) -> str:
    """Return the plain name of *node* or raise ``UnresolvableIdentifier``."""
    name = plain_name(node.name)
    if name is None:
        raise UnresolvableIdentifier(node)
    return name


class KeyWalker:
    """Walk a declaration tree and collect qualified keys.

    Args:
        root_name: Name of the top-level container whose members declare keys.
        lowercased: Lowercase every emitted key.
    """

    def __init__(
        self, root_name: str = DEFAULT_ROOT_NAME, lowercased: bool = True
    ) -> None:
        self.root_name = root_name
        self.lowercased = lowercased

    def flatten(self, tree: Iterable[DeclarationNode]) -> list[str]:
        """Collect the keys declared under every matching top-level container.

        Children of all top-level containers named ``root_name`` are
        walked together; other top-level nodes are skipped.

        Raises:
            UnsupportedMemberKind: A member is neither a leaf nor a container.
            UnresolvableIdentifier: A name cannot be resolved to plain text.
            NoKeysFound: No leaf was found anywhere under the matched roots.
        """
        members: list[DeclarationNode] = []
        for node in tree:
            if isinstance(node, Container) and plain_name(node.name) == self.root_name:
                members.extend(node.children)

        keys = self.walk(members, root_path="")
        if not keys:
            raise NoKeysFound(self.root_name)

        logger.debug(
            "Flattened %d keys under '%s'", len(keys), self.root_name
        )
        return keys

    def walk(
        self, members: Sequence[DeclarationNode], root_path: str
    ) -> list[str]:
        """Emit keys for *members*, leaves first, then nested containers."""
        leaves: list[Leaf] = []
        containers: list[Container] = []
        for member in members:
            match member:
                case Leaf():
                    leaves.append(member)
                case Container():
                    containers.append(member)
                case _:
                    raise UnsupportedMemberKind(member)

        keys: list[str] = []
        for leaf in leaves:
            key = qualify(root_path, resolve_name(leaf))
            keys.append(key.lower() if self.lowercased else key)

        for container in containers:
            nested_path = qualify(root_path, resolve_name(container))
            keys.extend(self.walk(container.children, nested_path))

        return keys


def flatten(
    tree: Iterable[DeclarationNode],
    root_name: str = DEFAULT_ROOT_NAME,
    lowercased: bool = True,
) -> list[str]:
    """Shortcut for ``KeyWalker(root_name, lowercased).flatten(tree)``."""
    return KeyWalker(root_name, lowercased).flatten(tree)
