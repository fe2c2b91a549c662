"""Tree navigation: pre-order walks, siblings, ancestors."""

from collections.abc import Callable, Iterator

from epresent.models.node import Document, DocumentNode


def iter_preorder(nodes: tuple[DocumentNode, ...]) -> Iterator[DocumentNode]:
    """Yield every node of the forest in outline (pre-order) order."""
    for node in nodes:
        yield node
        yield from iter_preorder(node.children)


class OutlineIndex:
    """Parent and position lookups over an immutable document tree."""

    def __init__(self, doc: Document) -> None:
        self.doc = doc
        self.preorder: list[DocumentNode] = list(iter_preorder(doc.nodes))
        self._position = {n.id: i for i, n in enumerate(self.preorder)}
        self._parent: dict[str, DocumentNode | None] = {n.id: None for n in doc.nodes}
        for node in self.preorder:
            for child in node.children:
                self._parent[child.id] = node

    def parent(self, node: DocumentNode) -> DocumentNode | None:
        return self._parent[node.id]

    def siblings(self, node: DocumentNode) -> tuple[DocumentNode, ...]:
        parent = self.parent(node)
        return parent.children if parent is not None else self.doc.nodes

    def next_sibling(self, node: DocumentNode) -> DocumentNode | None:
        siblings = self.siblings(node)
        i = next(i for i, s in enumerate(siblings) if s.id == node.id)
        return siblings[i + 1] if i + 1 < len(siblings) else None

    def previous_sibling(self, node: DocumentNode) -> DocumentNode | None:
        siblings = self.siblings(node)
        i = next(i for i, s in enumerate(siblings) if s.id == node.id)
        return siblings[i - 1] if i > 0 else None

    def next_in_outline(
        self, node: DocumentNode, match: Callable[[DocumentNode], bool]
    ) -> DocumentNode | None:
        """First node after ``node`` in pre-order satisfying ``match``."""
        for candidate in self.preorder[self._position[node.id] + 1 :]:
            if match(candidate):
                return candidate
        return None

    def previous_in_outline(
        self, node: DocumentNode, match: Callable[[DocumentNode], bool]
    ) -> DocumentNode | None:
        """Last node before ``node`` in pre-order satisfying ``match``."""
        for candidate in reversed(self.preorder[: self._position[node.id]]):
            if match(candidate):
                return candidate
        return None

    def ancestors(self, node: DocumentNode) -> tuple[DocumentNode, ...]:
        """Ancestors from the top-level heading down to the immediate parent."""
        chain: list[DocumentNode] = []
        parent = self.parent(node)
        while parent is not None:
            chain.append(parent)
            parent = self.parent(parent)
        return tuple(reversed(chain))

    def top_level(self, node: DocumentNode) -> DocumentNode:
        """The top-level heading containing ``node`` (possibly itself)."""
        chain = self.ancestors(node)
        return chain[0] if chain else node
