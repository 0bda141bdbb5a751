"""
Solution verification for FSSP runs.

Inspects a finished history and certifies whether every automaton fired
simultaneously and for the first time, and whether it did so within the
classical 3n step bound. Verification never alters the history.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Iterable, Optional, Sequence

from .catalog import StateCatalog
from .simulation import run_simulation
from .state import Lattice, Snapshot
from .symbols import Symbol


class Outcome(str, Enum):
    """Classification of a finished run."""

    SOLVED = "solved"
    FIRED_EARLY = "fired_early"
    NOT_SOLVED = "not_solved"


@dataclass(frozen=True)
class VerificationReport:
    """
    Result of verifying one history.

    Attributes:
        outcome: Solved, fired early, or not solved
        fired_at_step: First snapshot in which any automaton fired (None if never)
        trimmed_length: Snapshots left after dropping trailing pending ones
        within_bound: Whether the last step index is at most 3n
        n: Number of automata
    """

    outcome: Outcome
    fired_at_step: Optional[int]
    trimmed_length: int
    within_bound: bool
    n: int

    @property
    def solved(self) -> bool:
        return self.outcome is Outcome.SOLVED

    @property
    def steps_taken(self) -> int:
        """Index of the last simulated snapshot."""
        return self.trimmed_length - 1

    def summary_lines(self) -> list[str]:
        """Human-readable verdict lines."""
        if self.outcome is Outcome.SOLVED:
            lines = ["Found a solution"]
        elif self.outcome is Outcome.FIRED_EARLY:
            lines = ["Someone fired early"]
        else:
            lines = ["Not a solution"]
        if not self.within_bound:
            lines.append("Solution takes greater than t = 3n steps")
        return lines

    def to_dict(self) -> dict:
        d = asdict(self)
        d["outcome"] = self.outcome.value
        return d


def trim_history(history: Sequence[Snapshot]) -> tuple[Lattice, ...]:
    """
    Drop trailing snapshots the simulator never reached.

    Args:
        history: Snapshots in time order

    Returns:
        Snapshots up to and including the last simulated lattice
    """
    end = len(history)
    while end > 0 and not isinstance(history[end - 1], Lattice):
        end -= 1
    return tuple(history[:end])


def verify(
    history: Sequence[Snapshot],
    fire_symbol: Symbol = Symbol.FIRE,
    n: Optional[int] = None,
) -> VerificationReport:
    """
    Certify whether a history synchronizes the line.

    Classification over the trimmed history:
        - FIRED_EARLY if any automaton holds ``fire_symbol`` before the
          last snapshot
        - SOLVED if every automaton holds it in the last snapshot
        - NOT_SOLVED otherwise

    Simulated runs halt at the first snapshot holding Fire, so a partial
    firing is always the last trimmed snapshot and is reported as
    NOT_SOLVED. FIRED_EARLY only arises from histories that keep going
    after some automaton has fired.

    Args:
        history: Snapshots in time order (typically a History)
        fire_symbol: Terminal role
        n: Number of automata (taken from the history if omitted)

    Returns:
        VerificationReport

    Raises:
        ValueError: If the history has no simulated snapshot
    """
    trimmed = trim_history(history)
    if not trimmed:
        raise ValueError("history contains no simulated snapshots")
    if n is None:
        n = trimmed[0].n

    fired_at_step = next(
        (t for t, lattice in enumerate(trimmed) if lattice.contains(fire_symbol)),
        None,
    )
    last = len(trimmed) - 1

    if fired_at_step is not None and fired_at_step < last:
        outcome = Outcome.FIRED_EARLY
    elif trimmed[-1].all_equal(fire_symbol):
        outcome = Outcome.SOLVED
    else:
        outcome = Outcome.NOT_SOLVED

    return VerificationReport(
        outcome=outcome,
        fired_at_step=fired_at_step,
        trimmed_length=len(trimmed),
        within_bound=last <= 3 * n,
        n=n,
    )


def verify_sizes(
    sizes: Iterable[int],
    catalog: Optional[StateCatalog] = None,
    start_side: str = "left",
) -> dict[int, VerificationReport]:
    """
    Run and verify the default simulation for several line lengths.

    Args:
        sizes: Line lengths to check
        catalog: Shared rule catalog (built once if omitted)
        start_side: End holding the officer

    Returns:
        Dictionary mapping each n to its report
    """
    if catalog is None:
        catalog = StateCatalog.build()

    reports = {}
    for n in sizes:
        history = run_simulation(n, catalog=catalog, start_side=start_side)
        reports[n] = verify(history, catalog.fire_symbol, n)
    return reports


def print_verification_summary(report: VerificationReport) -> None:
    """Print a formatted verdict for one run."""
    print("=" * 50)
    print(f"FSSP VERIFICATION (n={report.n})")
    print("=" * 50)

    for line in report.summary_lines():
        print(line)

    print()
    print(f"Outcome: {report.outcome.value}")
    fired = report.fired_at_step if report.fired_at_step is not None else "never"
    print(f"  Fired at step: {fired}")
    print(f"  Steps simulated: {report.steps_taken} (bound 3n = {3 * report.n})")
    print(f"  Within bound: {report.within_bound}")
    print("=" * 50)


def print_sweep_summary(reports: dict[int, VerificationReport]) -> None:
    """Print one line per verified line length."""
    print(f"{'n':>5} {'outcome':>12} {'fired':>6} {'3n':>5}")
    for n, report in reports.items():
        fired = report.fired_at_step if report.fired_at_step is not None else "-"
        print(f"{n:>5} {report.outcome.value:>12} {fired:>6} {3 * n:>5}")

    solved = sum(1 for r in reports.values() if r.solved and r.within_bound)
    print(f"{solved}/{len(reports)} line lengths synchronized within 3n")
