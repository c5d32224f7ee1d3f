"""Selector trees and the resolved queries produced from them."""

from dataclasses import dataclass, field
from typing import Literal, Union

SelectorMode = Literal["first", "all"]


@dataclass(frozen=True)
class Leaf:
    """A tag, class or any other CSS selector fragment."""

    value: str


@dataclass(frozen=True)
class Node:
    """Parent selector fragments mapped to the subtrees nested under them.

    Insertion order of ``children`` decides the order of resolved paths.
    """

    children: dict[str, list["SelectorTree"]] = field(default_factory=dict)


SelectorTree = Union[Leaf, Node]


@dataclass(frozen=True)
class ResolvedSelector:
    """A flat, ready-to-query selector string."""

    query: str
    mode: SelectorMode
    name: str | None = None
