"""Selection of the page regions that talk about coupons.

Every element whose text mentions *copy*, *coupon*, *code* or *promo* votes
for its nearest structural container (``section``, ``article`` or ``div``,
the element itself included).  Elements with no such container stand for
themselves, except the document-level ``html``/``head``/``body`` wrappers
(their text is the whole page, which is the fallback scan's job), anything
inside ``<head>``, bare ``script``/``style`` elements and head elements such
as ``title`` that a body-less page leaves at the top level.

No single site's markup is assumed, so the selection tolerates arbitrary and
inconsistent third-party HTML.
"""

from __future__ import annotations

import re

from coupon_catalog.extract.models import TextBlock
from coupon_catalog.extract.tree import DocumentNode, flatten_text, walk

CONTAINER_TAGS = frozenset({"section", "article", "div"})
DOCUMENT_TAGS = frozenset({"[document]", "html", "head", "body"})
NON_CONTENT_TAGS = frozenset(
    {"script", "style", "noscript", "template", "title", "meta", "link", "base"}
)

_KEYWORD_RE = re.compile(r"copy|coupon|code|promo", re.IGNORECASE)


def _candidate_root(node: DocumentNode) -> DocumentNode | None:
    if node.name in CONTAINER_TAGS:
        return node
    for ancestor in node.ancestors():
        if ancestor.name in CONTAINER_TAGS:
            return ancestor
        if ancestor.name == "head":
            return None
    if node.name in DOCUMENT_TAGS or node.name in NON_CONTENT_TAGS:
        return None
    return node


def select_candidate_blocks(doc: DocumentNode) -> list[TextBlock]:
    """Return candidate regions of *doc*, deduplicated, in first-seen order."""
    roots: dict[DocumentNode, None] = {}

    def visit(node: DocumentNode) -> None:
        text = node.text()
        if not text.strip() or not _KEYWORD_RE.search(text):
            return
        root = _candidate_root(node)
        if root is not None:
            roots.setdefault(root, None)

    walk(doc, visit)
    return [TextBlock(node=root, text=flatten_text(root)) for root in roots]
