"""
Lattice and history representation for FSSP.

A lattice is the line of n automata framed by two General sentinels:

    position:  0        1 .. n       n+1
    symbol:    General  interior     General

A history is the time-indexed sequence of snapshots produced by a run.
Each snapshot is either a populated Lattice or a PendingSnapshot marking a
step the simulator never reached.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Union

import mlx.core as mx

from .errors import InvalidInitialCondition
from .symbols import Symbol


START_SIDES = ("left", "right")


@dataclass(frozen=True)
class Lattice:
    """
    One immutable snapshot of the line.

    Attributes:
        cells: n + 2 symbols, sentinels included
    """

    cells: tuple[Symbol, ...]

    def __post_init__(self) -> None:
        cells = tuple(Symbol(c) for c in self.cells)
        object.__setattr__(self, "cells", cells)
        if len(cells) < 3:
            raise ValueError(f"a lattice needs at least one interior cell, got {len(cells)} cells")
        if cells[0] != Symbol.GENERAL or cells[-1] != Symbol.GENERAL:
            raise ValueError(
                f"boundary cells must be General, got {cells[0].role} and {cells[-1].role}"
            )

    @classmethod
    def from_interior(cls, interior: Sequence[Symbol]) -> "Lattice":
        """Frame an interior assignment with General sentinels."""
        return cls((Symbol.GENERAL, *interior, Symbol.GENERAL))

    @property
    def n(self) -> int:
        """Number of real automata."""
        return len(self.cells) - 2

    @property
    def interior(self) -> tuple[Symbol, ...]:
        return self.cells[1:-1]

    def count(self, symbol: Symbol) -> int:
        """Number of interior cells holding ``symbol``."""
        return self.interior.count(symbol)

    def contains(self, symbol: Symbol) -> bool:
        return symbol in self.interior

    def all_equal(self, symbol: Symbol) -> bool:
        return all(c == symbol for c in self.interior)

    def as_array(self) -> mx.array:
        """Symbol indices as an int32 array of length n + 2."""
        return mx.array([int(c) for c in self.cells], dtype=mx.int32)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, position: int) -> Symbol:
        return self.cells[position]

    def __str__(self) -> str:
        return " ".join(c.role for c in self.cells)


@dataclass(frozen=True)
class PendingSnapshot:
    """
    Placeholder for a step the simulator did not advance to.

    Attributes:
        step: Index this snapshot would have had
        n: Number of automata in the line
    """

    step: int
    n: int


Snapshot = Union[Lattice, PendingSnapshot]


@dataclass(frozen=True)
class History(Sequence[Snapshot]):
    """
    Ordered, read-only sequence of snapshots; index 0 is the initial lattice.

    Pending snapshots, when present, only ever form a trailing suffix.

    Attributes:
        snapshots: Lattice or PendingSnapshot for each step
    """

    snapshots: tuple[Snapshot, ...]

    def __post_init__(self) -> None:
        if not self.snapshots:
            raise ValueError("a history needs at least one snapshot")
        if not isinstance(self.snapshots[0], Lattice):
            raise ValueError("snapshot 0 must be a simulated lattice")
        sizes = {s.n for s in self.snapshots}
        if len(sizes) != 1:
            raise ValueError(f"all snapshots must share one line length, got {sorted(sizes)}")
        seen_pending = False
        for snapshot in self.snapshots:
            if isinstance(snapshot, PendingSnapshot):
                seen_pending = True
            elif seen_pending:
                raise ValueError("pending snapshots may only appear after every simulated one")

    @property
    def n(self) -> int:
        return self.snapshots[0].n

    @property
    def steps_simulated(self) -> int:
        """Number of populated snapshots (including the initial one)."""
        return len(self.lattices())

    def lattices(self) -> tuple[Lattice, ...]:
        """The populated prefix of the history."""
        return tuple(s for s in self.snapshots if isinstance(s, Lattice))

    def as_array(self) -> mx.array:
        """Populated snapshots as an int32 array of shape [steps_simulated, n + 2]."""
        return mx.stack([lattice.as_array() for lattice in self.lattices()])

    def __len__(self) -> int:
        return len(self.snapshots)

    def __getitem__(self, index):
        return self.snapshots[index]

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self.snapshots)


def default_interior(n: int, start_side: str = "left") -> tuple[Symbol, ...]:
    """All-Idle interior with a first officer at the chosen end."""
    if start_side not in START_SIDES:
        raise ValueError(f"start_side must be one of {START_SIDES}, got {start_side!r}")
    interior = [Symbol.IDLE] * n
    if start_side == "left":
        interior[0] = Symbol.LEFT_FIRST_OFFICER
    else:
        interior[-1] = Symbol.RIGHT_FIRST_OFFICER
    return tuple(interior)


def create_initial_lattice(
    n: int,
    initial_condition: Optional[Sequence[Union[Symbol, str]]] = None,
    start_side: str = "left",
) -> Lattice:
    """
    Create the lattice for time step 0.

    Args:
        n: Number of automata (>= 1)
        initial_condition: Optional interior assignment of length n; items
            may be Symbols or role names
        start_side: End that holds the officer when no initial condition
            is given ("left" or "right")

    Returns:
        Lattice of n + 2 cells with General sentinels

    Raises:
        InvalidInitialCondition: If ``initial_condition`` is not of length n
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")

    if initial_condition is None:
        return Lattice.from_interior(default_interior(n, start_side))

    interior = tuple(Symbol.parse(c) for c in initial_condition)
    if len(interior) != n:
        raise InvalidInitialCondition(expected=n, actual=len(interior))
    return Lattice.from_interior(interior)
