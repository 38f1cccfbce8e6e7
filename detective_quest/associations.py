from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

DEFAULT_BUCKET_COUNT = 31
_HASH_MASK = (1 << 64) - 1


def djb2(text: str) -> int:
    """Classic djb2 over the UTF-8 bytes, wrapped to 64 bits."""
    value = 5381
    for byte in text.encode("utf-8"):
        value = ((value << 5) + value + byte) & _HASH_MASK
    return value


@dataclass
class Entry:
    clue: str
    suspect: str
    next: Optional["Entry"] = None


class AssociationTable:
    """Fixed-size chained hash table mapping a clue to a suspect name."""

    def __init__(self, bucket_count: int = DEFAULT_BUCKET_COUNT) -> None:
        if bucket_count < 1:
            raise ValueError(f"bucket_count must be positive, got {bucket_count}")
        self.bucket_count = bucket_count
        self._buckets: List[Optional[Entry]] = [None] * bucket_count
        self._size = 0

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Tuple[str, str]],
        bucket_count: int = DEFAULT_BUCKET_COUNT,
    ) -> "AssociationTable":
        table = cls(bucket_count)
        for clue, suspect in pairs:
            table.insert(clue, suspect)
        return table

    def bucket_for(self, clue: str) -> int:
        return djb2(clue) % self.bucket_count

    def insert(self, clue: str, suspect: str) -> None:
        # Newest entry goes first, so a duplicate key shadows the older one.
        idx = self.bucket_for(clue)
        self._buckets[idx] = Entry(clue=clue, suspect=suspect, next=self._buckets[idx])
        self._size += 1

    def lookup(self, clue: str) -> Optional[str]:
        cur = self._buckets[self.bucket_for(clue)]
        while cur is not None:
            if cur.clue == clue:
                return cur.suspect
            cur = cur.next
        return None

    def items(self) -> Iterator[Tuple[str, str]]:
        for head in self._buckets:
            cur = head
            while cur is not None:
                yield cur.clue, cur.suspect
                cur = cur.next

    def suspects(self) -> List[str]:
        return sorted({suspect for _, suspect in self.items()})

    def teardown(self) -> int:
        released = 0
        for idx in range(self.bucket_count):
            cur = self._buckets[idx]
            while cur is not None:
                nxt = cur.next
                cur.next = None
                released += 1
                cur = nxt
            self._buckets[idx] = None
        self._size = 0
        return released

    def __len__(self) -> int:
        return self._size

    def __contains__(self, clue: object) -> bool:
        return isinstance(clue, str) and self.lookup(clue) is not None
