"""Tree-visitor abstraction over parsed HTML.

The extraction heuristics only need three capabilities from a document node:
its children, its flattened text and its ancestor chain (plus a tag name).
:class:`DocumentNode` names that surface; :class:`SoupNode` provides it on top
of BeautifulSoup so the heuristics never touch parser internals directly.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Iterator, Protocol

from bs4 import BeautifulSoup, Tag

_WS_RE = re.compile(r"\s+")


class DocumentNode(Protocol):
    """Minimal node capabilities required by the extraction engine."""

    @property
    def name(self) -> str: ...

    def children(self) -> list[DocumentNode]: ...

    def text(self, exclude: frozenset[str] = frozenset()) -> str: ...

    def ancestors(self) -> Iterator[DocumentNode]: ...


class SoupNode:
    """A :class:`DocumentNode` backed by a BeautifulSoup ``Tag``.

    Equality and hashing follow the identity of the wrapped tag.  ``Tag``
    itself compares structurally, so two identical ``<div>`` elements would
    otherwise collapse into one.
    """

    __slots__ = ("tag",)

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupNode) and other.tag is self.tag

    def __hash__(self) -> int:
        return id(self.tag)

    def __repr__(self) -> str:
        return f"SoupNode(<{self.name}>)"

    @property
    def name(self) -> str:
        return self.tag.name or ""

    def children(self) -> list[SoupNode]:
        return [SoupNode(child) for child in self.tag.children if isinstance(child, Tag)]

    def text(self, exclude: frozenset[str] = frozenset()) -> str:
        """Return the text under this node, skipping subtrees named in *exclude*."""
        # A separator keeps adjacent inline elements from fusing into one word.
        if not exclude:
            return self.tag.get_text(" ")
        return " ".join(
            s for s in self.tag.strings if not any(p.name in exclude for p in s.parents)
        )

    def ancestors(self) -> Iterator[SoupNode]:
        for parent in self.tag.parents:
            yield SoupNode(parent)


def parse_document(html: str) -> SoupNode:
    """Parse *html* into a document root.  Never raises on malformed markup."""
    return SoupNode(BeautifulSoup(html or "", "html.parser"))


def normalize_whitespace(text: str) -> str:
    """Collapse every run of whitespace to a single space and trim."""
    return _WS_RE.sub(" ", text).strip()


def flatten_text(node: DocumentNode) -> str:
    return normalize_whitespace(node.text())


def iter_nodes(root: DocumentNode) -> Iterator[DocumentNode]:
    """Yield *root* and all of its descendants in document (pre-)order.

    Iterative, so deeply nested third-party markup cannot exhaust the
    recursion limit.
    """
    stack: list[DocumentNode] = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


def walk(root: DocumentNode, visit: Callable[[DocumentNode], None]) -> None:
    """Depth-first traversal calling *visit* on every node under *root*."""
    for node in iter_nodes(root):
        visit(node)


def find_first(root: DocumentNode, names: Iterable[str]) -> DocumentNode | None:
    """Return the first descendant of *root* whose tag name is in *names*.

    *root* itself is not considered, mirroring a CSS descendant query.
    """
    wanted = set(names)
    nodes = iter_nodes(root)
    next(nodes)
    for node in nodes:
        if node.name in wanted:
            return node
    return None
