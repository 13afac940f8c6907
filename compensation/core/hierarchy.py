"""
Sponsor hierarchy traversal.

Affiliates are held in an id-indexed arena and linked only through their
``sponsor_id`` parent pointers, so every traversal is an index walk that can
detect revisits instead of following nested object references.
"""

from collections import defaultdict, deque
from collections.abc import Iterable, Iterator
from typing import Any

from loguru import logger

from compensation.exceptions import CorruptHierarchyError, UnknownAffiliateError


class HierarchyResolver:
    """
    Resolves upline and downline membership over a snapshot of affiliates.

    The snapshot may be partial (e.g. only one upline chain was loaded).
    A sponsor that is missing from the snapshot is treated as the top of the
    known chain unless the resolver is strict.
    """

    def __init__(self, affiliates: Iterable[Any], strict: bool = False) -> None:
        """
        Build resolver index.

        Args:
            affiliates: Objects exposing ``id`` and ``sponsor_id``
            strict: Raise CorruptHierarchyError on dangling sponsor links
        """
        self._index: dict[int, Any] = {a.id: a for a in affiliates}
        self._children: dict[int, list[Any]] | None = None
        self.strict = strict

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, affiliate_id: object) -> bool:
        return affiliate_id in self._index

    def __iter__(self) -> Iterator[Any]:
        return iter(self._index.values())

    def get(self, affiliate_id: int) -> Any:
        """
        Get affiliate from the snapshot.

        Raises:
            UnknownAffiliateError: If the id is not in the snapshot
        """
        try:
            return self._index[affiliate_id]
        except KeyError:
            raise UnknownAffiliateError(affiliate_id) from None

    def upline_of(
        self, affiliate_id: int, max_depth: int | None = None
    ) -> list[Any]:
        """
        Get ancestors of an affiliate, nearest first.

        Args:
            affiliate_id: Starting affiliate
            max_depth: Stop after this many ancestors (None = whole chain)

        Returns:
            Ordered list of sponsor, sponsor's sponsor, ...

        Raises:
            UnknownAffiliateError: If the starting affiliate is unknown
            CorruptHierarchyError: On a sponsor cycle, or a dangling sponsor
                link when strict
        """
        current = self.get(affiliate_id)
        visited = {current.id}
        chain: list[Any] = []
        sponsor_id = current.sponsor_id

        while sponsor_id is not None:
            if max_depth is not None and len(chain) >= max_depth:
                break

            if sponsor_id in visited:
                path = [a.id for a in chain] + [sponsor_id]
                logger.error(
                    "Sponsor cycle detected, traversal aborted",
                    extra={"affiliate_id": affiliate_id, "chain": path},
                )
                raise CorruptHierarchyError(affiliate_id, path)

            sponsor = self._index.get(sponsor_id)
            if sponsor is None:
                if self.strict:
                    path = [a.id for a in chain] + [sponsor_id]
                    logger.error(
                        "Dangling sponsor reference",
                        extra={"affiliate_id": affiliate_id, "chain": path},
                    )
                    raise CorruptHierarchyError(
                        affiliate_id, path, reason="dangling sponsor"
                    )
                logger.warning(
                    "Sponsor missing from snapshot, chain ends here",
                    extra={
                        "affiliate_id": affiliate_id,
                        "missing_sponsor_id": sponsor_id,
                        "chain_length": len(chain),
                    },
                )
                break

            visited.add(sponsor_id)
            chain.append(sponsor)
            sponsor_id = sponsor.sponsor_id

        return chain

    def downline_of(self, affiliate_id: int) -> list[Any]:
        """
        Get direct children of an affiliate (one level only), ordered by id.

        Raises:
            UnknownAffiliateError: If the affiliate is unknown
        """
        self.get(affiliate_id)
        return list(self._child_index().get(affiliate_id, ()))

    def team_of(
        self, affiliate_id: int, max_depth: int | None = None
    ) -> list[tuple[Any, int]]:
        """
        Get the multi-level downline, breadth first.

        Built by recursing over ``downline_of``; already visited members
        are not expanded twice, so corrupt links cannot loop.

        Args:
            affiliate_id: Root affiliate
            max_depth: Deepest level to include (None = unlimited)

        Returns:
            List of (affiliate, depth) pairs, depth 1 = direct children
        """
        self.get(affiliate_id)
        team: list[tuple[Any, int]] = []
        visited = {affiliate_id}
        queue: deque[tuple[int, int]] = deque([(affiliate_id, 0)])

        while queue:
            parent_id, depth = queue.popleft()
            if max_depth is not None and depth >= max_depth:
                continue
            for child in self.downline_of(parent_id):
                if child.id in visited:
                    continue
                visited.add(child.id)
                team.append((child, depth + 1))
                queue.append((child.id, depth + 1))

        return team

    def find_cycles(self) -> list[int]:
        """
        Find affiliates whose sponsor links form a cycle.

        Returns:
            Sorted ids of every affiliate that is its own ancestor
        """
        in_cycle: set[int] = set()
        # 0 = unvisited, 1 = on current path, 2 = finished
        state: dict[int, int] = {}

        for start_id in self._index:
            if state.get(start_id):
                continue

            path: list[int] = []
            current_id: int | None = start_id
            while current_id in self._index and not state.get(current_id):
                state[current_id] = 1
                path.append(current_id)
                current_id = self._index[current_id].sponsor_id

            if current_id is not None and state.get(current_id) == 1:
                in_cycle.update(path[path.index(current_id):])

            for node_id in path:
                state[node_id] = 2

        return sorted(in_cycle)

    def _child_index(self) -> dict[int, list[Any]]:
        if self._children is None:
            children: dict[int, list[Any]] = defaultdict(list)
            for affiliate in self._index.values():
                if affiliate.sponsor_id is not None:
                    children[affiliate.sponsor_id].append(affiliate)
            for members in children.values():
                members.sort(key=lambda a: a.id)
            self._children = dict(children)
        return self._children
