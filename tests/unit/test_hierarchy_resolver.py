"""Tests for sponsor hierarchy traversal."""

import pytest

from compensation import CorruptHierarchyError, HierarchyResolver, UnknownAffiliateError


class TestUpline:
    """Tests for HierarchyResolver.upline_of."""

    def test_upline_nearest_first(self, node) -> None:
        """Chain 1 <- 2 <- 3 resolves to [2, 1] for affiliate 3."""
        resolver = HierarchyResolver([node(1), node(2, 1), node(3, 2)])

        assert [a.id for a in resolver.upline_of(3)] == [2, 1]

    def test_upline_max_depth(self, node) -> None:
        """Traversal stops after max_depth ancestors."""
        resolver = HierarchyResolver([node(1), node(2, 1), node(3, 2)])

        assert [a.id for a in resolver.upline_of(3, max_depth=1)] == [2]

    def test_root_has_no_upline(self, node) -> None:
        """Affiliate without sponsor has an empty upline."""
        resolver = HierarchyResolver([node(1)])

        assert resolver.upline_of(1) == []

    def test_unknown_affiliate(self, node) -> None:
        """Unknown starting affiliate raises."""
        resolver = HierarchyResolver([node(1)])

        with pytest.raises(UnknownAffiliateError):
            resolver.upline_of(99)
        with pytest.raises(UnknownAffiliateError):
            resolver.get(99)

    def test_cycle_detected(self, node) -> None:
        """Two affiliates sponsoring each other abort traversal."""
        resolver = HierarchyResolver([node(1, 2), node(2, 1)])

        with pytest.raises(CorruptHierarchyError) as exc_info:
            resolver.upline_of(1)

        assert exc_info.value.reason == "cycle"
        assert exc_info.value.chain == [2, 1]

    def test_self_sponsor_is_a_cycle(self, node) -> None:
        """An affiliate sponsoring itself is a cycle of one."""
        resolver = HierarchyResolver([node(1, 1)])

        with pytest.raises(CorruptHierarchyError):
            resolver.upline_of(1)

    def test_dangling_sponsor_ends_chain(self, node) -> None:
        """Missing sponsor is treated as the top of the known chain."""
        resolver = HierarchyResolver([node(1, 99), node(2, 1)])

        assert [a.id for a in resolver.upline_of(2)] == [1]

    def test_dangling_sponsor_strict(self, node) -> None:
        """Strict resolver reports a missing sponsor as corruption."""
        resolver = HierarchyResolver([node(1, 99), node(2, 1)], strict=True)

        with pytest.raises(CorruptHierarchyError) as exc_info:
            resolver.upline_of(2)

        assert exc_info.value.reason == "dangling sponsor"

    def test_cycle_above_depth_limit_not_reached(self, node) -> None:
        """A cycle beyond max_depth is never walked into."""
        resolver = HierarchyResolver(
            [node(1, 3), node(2, 1), node(3, 4), node(4, 3), node(5, 2)]
        )

        assert [a.id for a in resolver.upline_of(5, max_depth=2)] == [2, 1]


class TestDownline:
    """Tests for downline and team traversal."""

    @pytest.fixture
    def resolver(self, node) -> HierarchyResolver:
        """Tree: 1 <- {2, 3}, 2 <- 4, 4 <- 5, plus unrelated root 6."""
        return HierarchyResolver(
            [node(1), node(3, 1), node(2, 1), node(4, 2), node(5, 4), node(6)]
        )

    def test_downline_ordered_by_id(self, resolver: HierarchyResolver) -> None:
        """Direct children only, sorted by id."""
        assert [a.id for a in resolver.downline_of(1)] == [2, 3]
        assert resolver.downline_of(6) == []

    def test_downline_unknown(self, resolver: HierarchyResolver) -> None:
        """Unknown affiliate raises."""
        with pytest.raises(UnknownAffiliateError):
            resolver.downline_of(42)

    def test_team_breadth_first(self, resolver: HierarchyResolver) -> None:
        """Multi-level downline with depths."""
        team = [(a.id, depth) for a, depth in resolver.team_of(1)]

        assert team == [(2, 1), (3, 1), (4, 2), (5, 3)]

    def test_team_max_depth(self, resolver: HierarchyResolver) -> None:
        """Team listing stops at max_depth."""
        team = [(a.id, depth) for a, depth in resolver.team_of(1, max_depth=2)]

        assert team == [(2, 1), (3, 1), (4, 2)]

    def test_team_survives_cycle(self, node) -> None:
        """Members already visited are not expanded again."""
        resolver = HierarchyResolver([node(1, 2), node(2, 1)])

        assert [(a.id, d) for a, d in resolver.team_of(1)] == [(2, 1)]

    def test_container_protocol(self, resolver: HierarchyResolver) -> None:
        """Resolver reports size and membership."""
        assert len(resolver) == 6
        assert 5 in resolver
        assert 42 not in resolver
        assert sorted(a.id for a in resolver) == [1, 2, 3, 4, 5, 6]


class TestFindCycles:
    """Tests for HierarchyResolver.find_cycles."""

    def test_no_cycles(self, node) -> None:
        """Healthy tree has no cycle members."""
        resolver = HierarchyResolver([node(1), node(2, 1), node(3, 2)])

        assert resolver.find_cycles() == []

    def test_cycle_members_only(self, node) -> None:
        """Members leading into a cycle are not cycle members themselves."""
        resolver = HierarchyResolver(
            [node(1, 3), node(2, 1), node(3, 2), node(4, 1), node(5)]
        )

        assert resolver.find_cycles() == [1, 2, 3]
