from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(eq=False)
class Room:
    name: str
    clue: Optional[str] = None
    collected: bool = False
    left: Optional["Room"] = None
    right: Optional["Room"] = None
    linked: bool = field(default=False, repr=False)

    def child(self, side: Side) -> Optional["Room"]:
        return self.left if side is Side.LEFT else self.right

    def mark_collected(self) -> None:
        if self.clue is None:
            raise ValueError(f"Room '{self.name}' has no clue to collect")
        if self.collected:
            raise ValueError(f"Clue in room '{self.name}' was already collected")
        self.collected = True


def create_room(name: str, clue: Optional[str] = None) -> Room:
    return Room(name=name, clue=clue)


def link(parent: Room, side: Side, child: Room) -> None:
    """Hang ``child`` under ``parent``. Each slot and each child is wired once."""
    side = Side(side)
    if child is parent:
        raise ValueError(f"Room '{parent.name}' cannot be its own child")
    if parent.child(side) is not None:
        raise ValueError(f"Room '{parent.name}' already has a {side.value} path")
    if child.linked:
        raise ValueError(f"Room '{child.name}' is already linked under another room")
    if side is Side.LEFT:
        parent.left = child
    else:
        parent.right = child
    child.linked = True


def iter_rooms(root: Optional[Room]) -> Iterator[Room]:
    """Pre-order walk of the tree."""
    stack: List[Room] = [root] if root is not None else []
    while stack:
        room = stack.pop()
        yield room
        if room.right is not None:
            stack.append(room.right)
        if room.left is not None:
            stack.append(room.left)


def render_map(root: Optional[Room]) -> List[str]:
    lines: List[str] = []
    stack: List[Tuple[Room, int, str]] = [(root, 0, "")] if root is not None else []
    while stack:
        room, depth, label = stack.pop()
        clue = f'  [clue: "{room.clue}"]' if room.clue is not None else ""
        lines.append(f"{'    ' * depth}{label}{room.name}{clue}")
        if room.right is not None:
            stack.append((room.right, depth + 1, "(d) "))
        if room.left is not None:
            stack.append((room.left, depth + 1, "(e) "))
    return lines


def teardown(root: Optional[Room]) -> int:
    """Release the subtree, children before the room itself. Returns rooms released."""
    if root is None:
        return 0
    released = 0
    stack: List[Tuple[Room, bool]] = [(root, False)]
    while stack:
        room, children_done = stack.pop()
        if children_done:
            room.left = None
            room.right = None
            room.linked = False
            released += 1
            continue
        stack.append((room, True))
        if room.right is not None:
            stack.append((room.right, False))
        if room.left is not None:
            stack.append((room.left, False))
    return released
