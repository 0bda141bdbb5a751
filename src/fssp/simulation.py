"""
Main simulation loop for FSSP.

Every step is a pure function of the previous lattice and the rule
catalog: each interior cell reads its (left, self, right) neighborhood from
the previous snapshot and looks up its next role. The whole interior is
updated in one vectorised gather, so no cell observes a partially updated
line.

Fire has no successor rule. Once any automaton fires the line is
terminal, and a run pads the remaining requested steps with
PendingSnapshot markers.
"""

from typing import Callable, Optional, Sequence, Union

import mlx.core as mx
from tqdm import tqdm

from .catalog import StateCatalog
from .config import Config
from .errors import UnmatchedNeighborhoodError
from .state import History, Lattice, PendingSnapshot, Snapshot, create_initial_lattice
from .symbols import NUM_SYMBOLS, Symbol


def step_lattice(lattice: Lattice, catalog: StateCatalog, step_index: int = 1) -> Lattice:
    """
    Compute the next snapshot of the line.

    Args:
        lattice: Previous snapshot (not modified)
        catalog: Validated rule catalog
        step_index: Index of the snapshot being produced (for diagnostics)

    Returns:
        New lattice with the same sentinels and every interior cell updated

    Raises:
        UnmatchedNeighborhoodError: If some neighborhood has no rule; the
            lowest such position is reported
    """
    cells = lattice.as_array()

    left = cells[:-2]
    center = cells[1:-1]
    right = cells[2:]
    codes = (left * NUM_SYMBOLS + center) * NUM_SYMBOLS + right

    next_interior = mx.take(catalog.table, codes).tolist()

    if -1 in next_interior:
        offset = next_interior.index(-1)
        raise UnmatchedNeighborhoodError(
            triple=lattice.cells[offset:offset + 3],
            position=offset + 1,
            step=step_index,
        )

    return Lattice.from_interior([Symbol(v) for v in next_interior])


def is_terminal(lattice: Lattice, fire_symbol: Symbol = Symbol.FIRE) -> bool:
    """True once any automaton has fired; the line cannot advance further."""
    return lattice.contains(fire_symbol)


def run_simulation(
    n: int,
    steps: Optional[int] = None,
    initial_condition: Optional[Sequence[Union[Symbol, str]]] = None,
    catalog: Optional[StateCatalog] = None,
    start_side: str = "left",
    show_progress: bool = False,
) -> History:
    """
    Simulate a line of n automata.

    Args:
        n: Number of automata (>= 1)
        steps: Snapshots to produce, initial lattice included (default 3n)
        initial_condition: Optional interior assignment of length n
        catalog: Rule catalog (built with the identity assignment if omitted)
        start_side: End holding the officer for the default initial condition
        show_progress: Whether to show a progress bar

    Returns:
        History of exactly ``steps`` snapshots

    Raises:
        InvalidInitialCondition: If ``initial_condition`` has the wrong length
        UnmatchedNeighborhoodError: If the catalog does not cover a reached
            neighborhood
    """
    if steps is None:
        steps = 3 * n
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")
    if catalog is None:
        catalog = StateCatalog.build()

    lattice = create_initial_lattice(n, initial_condition, start_side)
    snapshots: list[Snapshot] = [lattice]

    iterator = range(1, steps)
    if show_progress:
        iterator = tqdm(iterator, desc=f"Simulating n={n}")

    for t in iterator:
        if is_terminal(lattice, catalog.fire_symbol):
            break
        lattice = step_lattice(lattice, catalog, step_index=t)
        snapshots.append(lattice)

    snapshots.extend(PendingSnapshot(step=t, n=n) for t in range(len(snapshots), steps))
    return History(tuple(snapshots))


class Simulation:
    """
    FSSP simulation manager.

    Holds the current lattice and the snapshots produced so far, and
    provides hooks for reporting between steps.

    Attributes:
        config: Run configuration
        catalog: Rule catalog shared by every step
        state: Current lattice
        step_count: Number of steps executed
        history: Lattices produced so far, initial lattice first
    """

    def __init__(
        self,
        config: Config,
        catalog: Optional[StateCatalog] = None,
        initial_condition: Optional[Sequence[Union[Symbol, str]]] = None,
    ):
        """
        Initialize simulation.

        Args:
            config: Run configuration
            catalog: Optional pre-built catalog (built from the config's
                colour set otherwise)
            initial_condition: Optional interior assignment overriding the
                config's
        """
        self.config = config
        self.catalog = catalog if catalog is not None else StateCatalog.build(config.symbol_assignment)
        if initial_condition is None:
            initial_condition = config.initial_symbols
        self.initial_condition = initial_condition
        self.reset()

    @property
    def halted(self) -> bool:
        """True once the line has fired and cannot advance."""
        return is_terminal(self.state, self.catalog.fire_symbol)

    def step(self) -> None:
        """
        Advance the line by one timestep.

        Raises:
            RuntimeError: If the line has already fired
            UnmatchedNeighborhoodError: If the catalog has no rule for a
                reached neighborhood
        """
        if self.halted:
            raise RuntimeError(f"simulation halted: the line fired at step {self.step_count}")
        self.state = step_lattice(self.state, self.catalog, step_index=self.step_count + 1)
        self.history.append(self.state)
        self.step_count += 1

    def run(
        self,
        steps: Optional[int] = None,
        callback: Optional[Callable[["Simulation"], None]] = None,
        callback_interval: int = 1,
        show_progress: bool = True,
    ) -> History:
        """
        Run until the history holds ``steps`` snapshots or the line fires.

        Args:
            steps: Total snapshots wanted, initial lattice included
                (defaults to the config's step count)
            callback: Optional function called periodically
            callback_interval: How often to call callback
            show_progress: Whether to show progress bar

        Returns:
            History of exactly ``steps`` snapshots, padded with PendingSnapshot
            markers when the line fired earlier
        """
        if steps is None:
            steps = self.config.total_steps

        iterator = range(len(self.history), steps)
        if show_progress:
            iterator = tqdm(iterator, desc="Simulating")

        for i in iterator:
            if self.halted:
                break
            self.step()

            if callback is not None and self.step_count % callback_interval == 0:
                callback(self)

        return self.get_history(steps)

    def get_history(self, steps: Optional[int] = None) -> History:
        """
        Snapshot the run so far as an immutable History.

        Args:
            steps: Exact length of the result; lattices past it are dropped
                and missing ones are padded with PendingSnapshot markers
        """
        snapshots: list[Snapshot] = list(self.history)
        if steps is not None:
            if steps < 1:
                raise ValueError(f"steps must be >= 1, got {steps}")
            del snapshots[steps:]
            snapshots.extend(
                PendingSnapshot(step=t, n=self.config.n) for t in range(len(snapshots), steps)
            )
        return History(tuple(snapshots))

    def reset(self) -> None:
        """Reset simulation to its initial lattice."""
        self.state = create_initial_lattice(
            self.config.n,
            self.initial_condition,
            self.config.start_side,
        )
        self.history: list[Lattice] = [self.state]
        self.step_count = 0

    def get_state_dict(self) -> dict:
        """Get serializable state dictionary."""
        return {
            "step_count": self.step_count,
            "halted": self.halted,
            "config": self.config.to_dict(),
            "state": [symbol.role for symbol in self.state.cells],
            "history": [[symbol.role for symbol in lattice.cells] for lattice in self.history],
        }
