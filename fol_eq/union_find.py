from __future__ import annotations

from typing import Dict, Iterator, List


class UnionFind:
    """Disjoint-set forest over dense integer ids (union by rank, path halving)."""

    def __init__(self, size: int = 0) -> None:
        self.p: List[int] = list(range(size))
        self.r: List[int] = [0] * size

    def __len__(self) -> int:
        return len(self.p)

    def add(self) -> int:
        """Append a new singleton set and return its id."""
        x = len(self.p)
        self.p.append(x)
        self.r.append(0)
        return x

    def find(self, x: int) -> int:
        p = self.p
        # path halving
        while p[x] != x:
            p[x] = p[p[x]]
            x = p[x]
        return x

    def union(self, a: int, b: int) -> int:
        """Merge the sets of ``a`` and ``b``; return the surviving root."""
        pa, pb = self.find(a), self.find(b)
        if pa == pb:
            return pa
        ra, rb = self.r[pa], self.r[pb]
        if ra < rb:
            self.p[pa] = pb
            return pb
        if rb < ra:
            self.p[pb] = pa
            return pa
        self.p[pb] = pa
        self.r[pa] = ra + 1
        return pa

    def same(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def roots(self) -> Iterator[int]:
        return (x for x in range(len(self.p)) if self.p[x] == x)

    def groups(self) -> Dict[int, List[int]]:
        """Map each root to the ids of its set, in ascending id order."""
        out: Dict[int, List[int]] = {}
        for x in range(len(self.p)):
            out.setdefault(self.find(x), []).append(x)
        return out

    def flatten(self) -> None:
        """Point every id directly at its root."""
        for x in range(len(self.p)):
            self.p[x] = self.find(x)

    def copy(self) -> "UnionFind":
        other = UnionFind()
        other.p = list(self.p)
        other.r = list(self.r)
        return other
