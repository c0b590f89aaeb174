"""Declaration trees: node types, Python-source adapter and key walker."""

from .nodes import Container, DeclarationNode, Leaf, plain_name
from .source import load_declarations, parse_declarations
from .walker import DEFAULT_ROOT_NAME, KeyWalker, flatten

__all__ = [
    "Container",
    "DEFAULT_ROOT_NAME",
    "DeclarationNode",
    "KeyWalker",
    "Leaf",
    "flatten",
    "load_declarations",
    "parse_declarations",
    "plain_name",
]
