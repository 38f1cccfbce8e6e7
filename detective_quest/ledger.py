"""Ordered multiset of collected clues.

The ledger is a plain (unbalanced) binary search tree keyed by the clue text.
Ordering is ordinary case-sensitive string comparison, so "Glove" and "glove"
are two different clues. All functions take the root node and never do I/O.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

Resolver = Callable[[str], Optional[str]]


@dataclass
class ClueNode:
    clue: str
    count: int = 1
    left: Optional["ClueNode"] = None
    right: Optional["ClueNode"] = None


def insert(root: Optional[ClueNode], clue: str) -> ClueNode:
    """Record one collection of ``clue`` and return the root.

    An empty ledger yields a brand new root, so callers must always reassign:
    ``ledger = insert(ledger, clue)``.
    """
    if root is None:
        return ClueNode(clue)
    node = root
    while True:
        if clue == node.clue:
            node.count += 1
            return root
        if clue < node.clue:
            if node.left is None:
                node.left = ClueNode(clue)
                return root
            node = node.left
        else:
            if node.right is None:
                node.right = ClueNode(clue)
                return root
            node = node.right


def _walk_inorder(root: Optional[ClueNode]) -> Iterator[ClueNode]:
    stack: List[ClueNode] = []
    node = root
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node
        node = node.right


def inorder(root: Optional[ClueNode]) -> Iterator[Tuple[str, int]]:
    """Yield ``(clue, count)`` pairs in ascending clue order."""
    for node in _walk_inorder(root):
        yield node.clue, node.count


def find(root: Optional[ClueNode], clue: str) -> Optional[ClueNode]:
    node = root
    while node is not None:
        if clue == node.clue:
            return node
        node = node.left if clue < node.clue else node.right
    return None


def count_matching(root: Optional[ClueNode], suspect: str, resolver: Resolver) -> int:
    """Sum the counts of every clue whose resolved suspect equals ``suspect``.

    Every node is checked; clues the resolver does not know add nothing.
    """
    total = 0
    for node in _walk_inorder(root):
        resolved = resolver(node.clue)
        if resolved is not None and resolved == suspect:
            total += node.count
    return total


def size(root: Optional[ClueNode]) -> int:
    return sum(1 for _ in _walk_inorder(root))


def total(root: Optional[ClueNode]) -> int:
    return sum(node.count for node in _walk_inorder(root))


def teardown(root: Optional[ClueNode]) -> int:
    """Detach every node, children before parents. Returns nodes released."""
    if root is None:
        return 0
    released = 0
    stack: List[Tuple[ClueNode, bool]] = [(root, False)]
    while stack:
        node, children_done = stack.pop()
        if children_done:
            node.left = None
            node.right = None
            released += 1
            continue
        stack.append((node, True))
        if node.right is not None:
            stack.append((node.right, False))
        if node.left is not None:
            stack.append((node.left, False))
    return released
