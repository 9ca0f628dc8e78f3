"""Tests for grid types and grid adjacency."""

import pytest

from grid_types import DEFAULT_TIMINGS, CascadeTimings, CellState, Grid, cell_sequence
from topology import eccentricity, grid_neighbors, neighbors, wave_rings


# =============================================================================
# Test Grid
# =============================================================================


class TestGrid:
    """Tests for the Grid value type."""

    def test_full_rows(self) -> None:
        """A 5x5 grid has 5 rows."""
        assert Grid(5, 25).rows == 5

    def test_partial_last_row(self) -> None:
        """A trailing partial row still counts as a row."""
        assert Grid(5, 7).rows == 2

    def test_degenerate_columns(self) -> None:
        """Zero columns means zero rows."""
        assert Grid(0, 3).rows == 0

    def test_negative_cell_count_rejected(self) -> None:
        """A negative cell count is a ValueError."""
        with pytest.raises(ValueError, match="Invalid grid size"):
            Grid(5, -1)

    def test_contains(self) -> None:
        """contains() covers exactly [0, total_cells)."""
        grid = Grid(4, 10)
        assert grid.contains(0)
        assert grid.contains(9)
        assert not grid.contains(10)
        assert not grid.contains(-1)

    def test_position(self) -> None:
        """position() splits an index into (row, col)."""
        assert Grid(5, 25).position(12) == (2, 2)
        assert Grid(5, 25).position(24) == (4, 4)

    def test_grid_is_frozen(self) -> None:
        """Grid is immutable."""
        grid = Grid(3, 9)
        with pytest.raises(AttributeError):
            grid.columns = 4  # type: ignore[misc]


# =============================================================================
# Test Timings
# =============================================================================


class TestTimings:
    """Tests for the per-cell timing constants."""

    def test_default_offsets(self) -> None:
        """Default offsets are 300, 1800 and 2300 ms."""
        assert DEFAULT_TIMINGS.hidden_at == 300
        assert DEFAULT_TIMINGS.fading_in_at == 1800
        assert DEFAULT_TIMINGS.idle_at == 2300

    def test_max_hop_delay(self) -> None:
        """The fourth neighbor fires 50 + 3 * 30 ms after its parent."""
        assert DEFAULT_TIMINGS.max_hop_delay == 140

    def test_scaled(self) -> None:
        """scaled() multiplies every duration."""
        timings = CascadeTimings().scaled(2)
        assert timings.explode_duration == 600
        assert timings.hidden_duration == 3000
        assert timings.fade_in_duration == 1000
        assert timings.propagation_delay == 100
        assert timings.neighbor_stagger == 60
        assert timings.idle_at == 4600

    def test_scaled_rejects_non_positive(self) -> None:
        """A zero or negative factor is a ValueError."""
        with pytest.raises(ValueError, match="scale factor"):
            CascadeTimings().scaled(0)
        with pytest.raises(ValueError):
            CascadeTimings().scaled(-1)

    def test_negative_duration_rejected(self) -> None:
        """A negative duration is a ValueError naming the field."""
        with pytest.raises(ValueError, match="hidden_duration: -2000"):
            CascadeTimings(hidden_duration=-2000)
        with pytest.raises(ValueError, match="neighbor_stagger"):
            CascadeTimings(neighbor_stagger=-1)

    def test_zero_durations_allowed(self) -> None:
        """Zero-length phases are valid."""
        timings = CascadeTimings(propagation_delay=0, neighbor_stagger=0)
        assert timings.max_hop_delay == 0

    def test_cell_sequence(self) -> None:
        """Every triggered cell runs exploding, hidden, fading-in, idle."""
        assert cell_sequence() == (
            (0, CellState.EXPLODING),
            (300, CellState.HIDDEN),
            (1800, CellState.FADING_IN),
            (2300, CellState.IDLE),
        )

    def test_cell_sequence_offsets_increase(self) -> None:
        """Offsets are strictly increasing for scaled timings too."""
        offsets = [offset for offset, _ in cell_sequence(CascadeTimings().scaled(0.5))]
        assert offsets == sorted(offsets)
        assert len(set(offsets)) == len(offsets)


# =============================================================================
# Test Neighbors
# =============================================================================


class TestNeighbors:
    """Tests for neighbors()."""

    def test_top_left_corner(self) -> None:
        """Top-left corner has right and bottom neighbors."""
        assert neighbors(0, 5, 25) == [1, 5]

    def test_interior(self) -> None:
        """Interior cell has all four neighbors in left, right, top, bottom order."""
        assert neighbors(12, 5, 25) == [11, 13, 7, 17]

    def test_bottom_right_corner(self) -> None:
        """Bottom-right corner has left and top neighbors."""
        assert neighbors(24, 5, 25) == [23, 19]

    def test_top_edge(self) -> None:
        """Top edge cell has no top neighbor."""
        assert neighbors(2, 5, 25) == [1, 3, 7]

    def test_left_edge(self) -> None:
        """Left edge cell has no left neighbor."""
        assert neighbors(10, 5, 25) == [11, 5, 15]

    def test_single_cell(self) -> None:
        """A one-cell grid has no neighbors."""
        assert neighbors(0, 1, 1) == []

    def test_single_column(self) -> None:
        """A one-column grid only links up and down."""
        assert neighbors(0, 1, 4) == [1]
        assert neighbors(2, 1, 4) == [1, 3]
        assert neighbors(3, 1, 4) == [2]

    def test_non_positive_columns(self) -> None:
        """A grid with no columns has no adjacency."""
        assert neighbors(0, 0, 10) == []
        assert neighbors(3, -2, 10) == []

    def test_no_bottom_below_partial_row(self) -> None:
        """Cells above the gap of a partial last row have no bottom neighbor."""
        # 5 columns, 7 cells: second row holds 5 and 6 only
        assert neighbors(3, 5, 7) == [2, 4]
        assert neighbors(1, 5, 7) == [0, 2, 6]

    def test_right_of_partial_row_end(self) -> None:
        """The right slot of the last cell in a partial row is past the end."""
        assert neighbors(6, 5, 7) == [5, 7, 1]

    def test_grid_neighbors(self) -> None:
        """grid_neighbors() delegates with the grid's dimensions."""
        assert grid_neighbors(Grid(5, 25), 12) == [11, 13, 7, 17]

    def test_adjacency_is_symmetric(self) -> None:
        """On a full grid, b is a neighbor of a iff a is a neighbor of b."""
        columns, total = 6, 24
        for a in range(total):
            for b in neighbors(a, columns, total):
                assert a in neighbors(b, columns, total)


# =============================================================================
# Test Wave Rings
# =============================================================================


class TestWaveRings:
    """Tests for breadth-first rings and eccentricity."""

    def test_rings_from_corner(self) -> None:
        """Rings from a corner of a 3x3 grid are the anti-diagonals."""
        assert wave_rings(Grid(3, 9), 0) == [[0], [1, 3], [2, 4, 6], [5, 7], [8]]

    def test_rings_from_center(self) -> None:
        """Rings from the center of a 3x3 grid."""
        assert wave_rings(Grid(3, 9), 4) == [[4], [3, 5, 1, 7], [0, 6, 2, 8]]

    def test_rings_skip_cells_past_the_end(self) -> None:
        """Phantom cells beyond a partial last row never appear in a ring."""
        rings = wave_rings(Grid(5, 7), 6)
        cells = [cell for ring in rings for cell in ring]
        assert sorted(cells) == list(range(7))

    def test_rings_outside_grid(self) -> None:
        """An origin outside the grid has no rings."""
        assert wave_rings(Grid(3, 9), 9) == []

    def test_eccentricity(self) -> None:
        """Eccentricity is the index of the last ring."""
        assert eccentricity(Grid(3, 9), 0) == 4
        assert eccentricity(Grid(3, 9), 4) == 2
        assert eccentricity(Grid(1, 1), 0) == 0
        assert eccentricity(Grid(5, 25), 12) == 4
