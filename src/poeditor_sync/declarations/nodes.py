"""Declaration tree node types.

A declaration tree is made of two node kinds, modelled as a tagged union
on the ``kind`` field:

- ``Container``: a named scope holding further nodes, in source order.
- ``Leaf``: a named localization key component.

Both are frozen pydantic models, so a tree can also be validated from
plain data (``Container.model_validate({...})``).
"""

from __future__ import annotations

import keyword
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

Identifier = Annotated[str, Field(min_length=1)]


class Leaf(BaseModel):
    """A leaf identifier (one localization key component).

    Attributes:
        name: Identifier as written in the source (may be escaped).
        lineno: Source line, when known.
    """

    kind: Literal["leaf"] = "leaf"
    name: Identifier
    lineno: int | None = None

    model_config = {"frozen": True}


class Container(BaseModel):
    """A named scope holding leaves and nested containers.

    Attributes:
        name: Identifier as written in the source (may be escaped).
        children: Child nodes in source order.
        lineno: Source line, when known.
    """

    kind: Literal["container"] = "container"
    name: Identifier
    children: tuple[DeclarationNode, ...] = ()
    lineno: int | None = None

    model_config = {"frozen": True}


DeclarationNode = Annotated[
    Union[Container, Leaf], Field(discriminator="kind")
]

Container.model_rebuild()


def plain_name(name: str) -> str | None:
    """Resolve a possibly escaped identifier to its plain text.

    Handles the two reserved-word escapes that show up in declaration
    sources: a PEP 8 trailing underscore on a keyword (``class_``) and a
    backtick-quoted name (`` `default` ``).

    Returns:
        The plain identifier, or ``None`` when *name* is not a valid
        identifier once unescaped.
    """
    text = name.strip()
    if len(text) > 2 and text.startswith("`") and text.endswith("`"):
        text = text[1:-1]
    elif text.endswith("_") and keyword.iskeyword(text[:-1]):
        text = text[:-1]
    if not text.isidentifier():
        return None
    return text
