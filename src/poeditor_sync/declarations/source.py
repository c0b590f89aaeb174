"""Build declaration trees from Python source.

Localization keys are declared as a nested class tree in an ordinary
Python module::

    class I18n:
        ok = auto()
        cancel: str

        class Onboarding:
            title = auto()

Parsing is delegated to the standard library ``ast`` module; this module
only maps the parsed statements onto ``Container`` / ``Leaf`` nodes.
"""

from __future__ import annotations

import ast
import logging
from pathlib import Path

from ..errors import (
    DeclarationSyntaxError,
    UnresolvableIdentifier,
    UnsupportedMemberKind,
)
from ..file_handler import read_file_with_encoding
from .nodes import Container, DeclarationNode, Leaf

logger = logging.getLogger(__name__)


def parse_declarations(
    content: str, filename: str = "<declarations>"
) -> list[DeclarationNode]:
    """Parse module source into top-level declaration containers.

    Top-level statements other than class definitions are skipped.

    Args:
        content: Python source text.
        filename: Name used in syntax error messages.

    Returns:
        One ``Container`` per top-level class, in source order.

    Raises:
        DeclarationSyntaxError: If *content* is not valid Python.
        UnsupportedMemberKind: If a class body holds an unsupported statement.
        UnresolvableIdentifier: If an assignment target is not a plain name.
    """
    try:
        module = ast.parse(content, filename=filename)
    except SyntaxError as e:
        raise DeclarationSyntaxError(
            f"Cannot parse {filename}: {e.msg} (line {e.lineno})"
        ) from e

    tree: list[DeclarationNode] = []
    for statement in module.body:
        if isinstance(statement, ast.ClassDef):
            tree.append(_container_from_class(statement))
    logger.debug(
        "Parsed %d top-level containers from %s", len(tree), filename
    )
    return tree


def load_declarations(path: Path) -> list[DeclarationNode]:
    """Read *path* (with encoding detection) and parse its declarations."""
    content, encoding = read_file_with_encoding(path)
    logger.debug("Read %s as %s", path, encoding)
    return parse_declarations(content, filename=str(path))


# ---------------------------------------------------------------------------
# ast -> node mapping
# ---------------------------------------------------------------------------


def _container_from_class(node: ast.ClassDef) -> Container:
    children: list[DeclarationNode] = []
    for statement in node.body:
        children.extend(_members_from_statement(statement))
    return Container(
        name=node.name, children=tuple(children), lineno=node.lineno
    )


def _members_from_statement(statement: ast.stmt) -> list[DeclarationNode]:
    match statement:
        case ast.ClassDef():
            return [_container_from_class(statement)]
        case ast.Assign(targets=targets):
            leaves: list[DeclarationNode] = []
            for target in targets:
                leaves.extend(_leaves_from_target(target, statement))
            return leaves
        case ast.AnnAssign(target=target):
            return _leaves_from_target(target, statement)
        case ast.Pass() | ast.Expr(value=ast.Constant()):
            # docstrings, bare string comments and `...`
            return []
        case _:
            raise UnsupportedMemberKind(statement)


def _leaves_from_target(
    target: ast.expr, statement: ast.stmt
) -> list[DeclarationNode]:
    match target:
        case ast.Name(id=name):
            return [Leaf(name=name, lineno=statement.lineno)]
        case ast.Tuple(elts=elements) | ast.List(elts=elements):
            leaves: list[DeclarationNode] = []
            for element in elements:
                leaves.extend(_leaves_from_target(element, statement))
            return leaves
        case _:
            raise UnresolvableIdentifier(statement)
