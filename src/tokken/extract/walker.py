"""
Depth-first traversal over the design file's node tree.

Nodes are the decoded JSON objects from the API. Any node may carry any
visual attribute, so extractors test for the presence of a key rather than
dispatching on node type. The walk uses an explicit stack, so arbitrarily
deep frame nesting never hits the interpreter's recursion limit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, TypedDict


class DesignNode(TypedDict, total=False):
    """Shape of one node as returned by the files API. Every key is optional."""

    id: str
    name: str
    type: str
    children: list[DesignNode]
    fills: list[dict[str, Any]]
    strokes: list[dict[str, Any]]
    effects: list[dict[str, Any]]
    style: dict[str, Any]
    styles: dict[str, str]
    layoutMode: str
    itemSpacing: float
    paddingTop: float
    paddingRight: float
    paddingBottom: float
    paddingLeft: float
    primaryAxisAlignItems: str
    counterAxisAlignItems: str
    cornerRadius: float
    rectangleCornerRadii: list[float]
    strokeWeight: float
    layoutGrids: list[dict[str, Any]]
    componentPropertyDefinitions: dict[str, dict[str, Any]]


Visitor = Callable[[DesignNode], None]


def children_of(node: DesignNode) -> list[DesignNode]:
    """The node's children, or an empty list when absent or malformed."""
    children = node.get("children")
    return children if isinstance(children, list) else []


def iter_nodes(root: DesignNode) -> Iterator[DesignNode]:
    """Yield ``root`` and every descendant in pre-order (parent before children).

    Siblings are visited in document order.
    """
    stack: list[DesignNode] = [root]
    while stack:
        node = stack.pop()
        yield node
        # Reversed so the first child is popped first.
        stack.extend(reversed(children_of(node)))


def walk(root: DesignNode, visit: Visitor) -> None:
    """Call ``visit`` exactly once per node, parents before children."""
    for node in iter_nodes(root):
        visit(node)


def index_nodes(root: DesignNode) -> dict[str, DesignNode]:
    """Map every node id in the tree to its node."""
    index: dict[str, DesignNode] = {}
    for node in iter_nodes(root):
        node_id = node.get("id")
        if node_id is not None:
            index[node_id] = node
    return index
