"""
Tests for FSSP lattices and histories.
"""

import pytest
import mlx.core as mx

from fssp.errors import InvalidInitialCondition
from fssp.state import History, Lattice, PendingSnapshot, create_initial_lattice, default_interior
from fssp.symbols import Symbol


G = Symbol.GENERAL
I = Symbol.IDLE


class TestLattice:
    """Tests for Lattice dataclass."""

    def test_properties(self):
        """Lattice reports size and interior."""
        lattice = Lattice.from_interior([Symbol.LEFT_FIRST_OFFICER, I, I])

        assert lattice.n == 3
        assert len(lattice) == 5
        assert lattice.interior == (Symbol.LEFT_FIRST_OFFICER, I, I)
        assert lattice[0] is G and lattice[4] is G

    def test_rejects_bad_boundary(self):
        """Boundary cells must be General."""
        with pytest.raises(ValueError, match="boundary"):
            Lattice((I, I, G))

    def test_rejects_empty_interior(self):
        """A lattice needs at least one automaton."""
        with pytest.raises(ValueError, match="interior"):
            Lattice((G, G))

    def test_coerces_indices(self):
        """Integer cells are coerced to symbols."""
        lattice = Lattice((1, 14, 1))
        assert lattice.interior == (Symbol.FIRE,)

    def test_immutable(self):
        """Lattices cannot be modified after creation."""
        lattice = Lattice.from_interior([I])
        with pytest.raises(AttributeError):
            lattice.cells = (G, Symbol.FIRE, G)

    def test_queries(self):
        """Contains / count / all_equal inspect only the interior."""
        lattice = Lattice.from_interior([Symbol.FIRE, Symbol.FIRE])

        assert lattice.contains(Symbol.FIRE)
        assert not lattice.contains(G)
        assert lattice.count(Symbol.FIRE) == 2
        assert lattice.all_equal(Symbol.FIRE)

    def test_as_array(self):
        """Array form holds symbol indices including sentinels."""
        lattice = Lattice.from_interior([Symbol.LEFT_ECHO])
        assert lattice.as_array().tolist() == [1, 6, 1]


class TestCreateInitialLattice:
    """Tests for lattice initialization."""

    def test_default_left_officer(self):
        """Default interior is idle with the officer at position 1."""
        lattice = create_initial_lattice(5)

        assert lattice.cells == (G, Symbol.LEFT_FIRST_OFFICER, I, I, I, I, G)

    def test_right_officer(self):
        """start_side='right' places the right officer at position n."""
        lattice = create_initial_lattice(4, start_side="right")

        assert lattice.cells == (G, I, I, I, Symbol.RIGHT_FIRST_OFFICER, G)

    def test_single_soldier(self):
        """n = 1 holds just the officer."""
        assert create_initial_lattice(1).interior == (Symbol.LEFT_FIRST_OFFICER,)

    def test_custom_condition(self):
        """Custom interiors accept symbols and role names."""
        lattice = create_initial_lattice(3, ["Idle", Symbol.ANNOUNCER, "re_announcer"])

        assert lattice.interior == (I, Symbol.ANNOUNCER, Symbol.RE_ANNOUNCER)

    def test_wrong_length(self):
        """An interior of length n + 1 is rejected with both lengths."""
        with pytest.raises(InvalidInitialCondition) as excinfo:
            create_initial_lattice(5, [I] * 6)

        assert excinfo.value.expected == 5
        assert excinfo.value.actual == 6

    def test_invalid_n(self):
        """n must be at least 1."""
        with pytest.raises(ValueError, match="n must be"):
            create_initial_lattice(0)

    def test_invalid_start_side(self):
        """Unknown start sides are rejected."""
        with pytest.raises(ValueError, match="start_side"):
            default_interior(3, "top")


class TestHistory:
    """Tests for History."""

    def test_sequence_behaviour(self):
        """History is indexable and iterable."""
        first = create_initial_lattice(2)
        history = History((first, PendingSnapshot(step=1, n=2)))

        assert len(history) == 2
        assert history[0] is first
        assert list(history)[1] == PendingSnapshot(step=1, n=2)
        assert history.n == 2
        assert history.steps_simulated == 1
        assert history.lattices() == (first,)

    def test_rejects_empty(self):
        """A history needs at least one snapshot."""
        with pytest.raises(ValueError):
            History(())

    def test_rejects_pending_first(self):
        """Snapshot 0 must be simulated."""
        with pytest.raises(ValueError, match="snapshot 0"):
            History((PendingSnapshot(step=0, n=1),))

    def test_rejects_interleaved_pending(self):
        """Pending snapshots only form a trailing suffix."""
        lattice = create_initial_lattice(1)
        with pytest.raises(ValueError, match="pending"):
            History((lattice, PendingSnapshot(step=1, n=1), lattice))

    def test_rejects_mixed_sizes(self):
        """Every snapshot has the same line length."""
        with pytest.raises(ValueError, match="line length"):
            History((create_initial_lattice(1), create_initial_lattice(2)))

    def test_as_array(self):
        """Array form stacks the populated snapshots."""
        history = History((
            create_initial_lattice(1),
            Lattice.from_interior([Symbol.LEFT_ECHO]),
            PendingSnapshot(step=2, n=1),
        ))

        array = history.as_array()

        assert array.shape == (2, 3)
        assert array.dtype == mx.int32
        assert array.tolist() == [[1, 2, 1], [1, 6, 1]]
