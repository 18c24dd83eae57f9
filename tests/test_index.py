"""Tests for active index resolution."""

from __future__ import annotations

import pytest
from conftest import BASE_TIME, make_entry

from did.errors import OutOfBoundsError
from did.index import (
    active_position,
    check_position,
    count_active,
    index_entries,
    resolve_active,
)
from did.models import Entry


@pytest.fixture
def mixed() -> list[Entry]:
    """Entries a, b (deleted), c, d (deleted), e."""
    return [
        make_entry("a"),
        make_entry("b", deleted_at=BASE_TIME),
        make_entry("c"),
        make_entry("d", deleted_at=BASE_TIME),
        make_entry("e"),
    ]


class TestResolveActive:
    """Tests for resolve_active."""

    @pytest.mark.parametrize(("index", "position"), [(1, 0), (2, 2), (3, 4)])
    def test_skips_tombstones(
        self,
        mixed: list[Entry],
        index: int,
        position: int,
    ) -> None:
        """Active indices count only entries that are not deleted."""
        assert resolve_active(mixed, index) == position

    @pytest.mark.parametrize("index", [0, -1, 4])
    def test_out_of_range(self, mixed: list[Entry], index: int) -> None:
        """Indices outside 1..active count raise with the valid range."""
        with pytest.raises(OutOfBoundsError, match="valid range is 1-3") as exc_info:
            resolve_active(mixed, index)
        assert exc_info.value.requested == index
        assert exc_info.value.available == 3

    def test_no_entries(self) -> None:
        """An empty log reports that there are no entries."""
        with pytest.raises(OutOfBoundsError, match="there are no entries"):
            resolve_active([], 1)

    def test_only_tombstones(self) -> None:
        """A log of tombstones has no active indices."""
        with pytest.raises(IndexError):
            resolve_active([make_entry(deleted_at=BASE_TIME)], 1)


class TestActivePosition:
    """Tests for active_position and index_entries."""

    def test_active_position(self, mixed: list[Entry]) -> None:
        """Physical positions map back to their active indices."""
        assert [active_position(mixed, p) for p in range(5)] == [1, None, 2, None, 3]

    @pytest.mark.parametrize("position", [-1, 5])
    def test_active_position_outside(self, mixed: list[Entry], position: int) -> None:
        """Positions outside the list have no active index."""
        assert active_position(mixed, position) is None

    def test_index_entries(self, mixed: list[Entry]) -> None:
        """index_entries pairs each active entry with index and position."""
        indexed = index_entries(mixed)
        assert [(i.entry.description, i.active_index, i.position) for i in indexed] == [
            ("a", 1, 0),
            ("c", 2, 2),
            ("e", 3, 4),
        ]

    def test_count_active(self, mixed: list[Entry]) -> None:
        """count_active ignores tombstones."""
        assert count_active(mixed) == 3
        assert count_active([]) == 0


class TestCheckPosition:
    """Tests for check_position."""

    def test_valid_position_includes_tombstones(self, mixed: list[Entry]) -> None:
        """Positions address the full log."""
        assert check_position(mixed, 3) == 3

    @pytest.mark.parametrize("position", [-1, 5])
    def test_invalid_position(self, mixed: list[Entry], position: int) -> None:
        """Out-of-range positions report the 0-based range."""
        with pytest.raises(OutOfBoundsError, match="valid range is 0-4"):
            check_position(mixed, position)

    def test_empty_log(self) -> None:
        """Any position in an empty log is out of range."""
        with pytest.raises(OutOfBoundsError, match="the log is empty"):
            check_position([], 0)
