"""
Error taxonomy for FSSP.

Every error here signals a static defect (a malformed rule catalog, a bad
initial condition, or a catalog that does not cover the reachable state
space). None of them are transient, so callers should never retry.
"""

from typing import Sequence

from .symbols import Symbol, Triple


def format_triple(triple: Triple) -> str:
    """Render a neighborhood triple as ``(Left, Self, Right)`` role names."""
    return "(" + ", ".join(symbol.role for symbol in triple) + ")"


class FSSPError(Exception):
    """Base class for all FSSP errors."""


class DuplicateRuleError(FSSPError):
    """
    Raised at catalog build time when a triple belongs to more than one group.

    Attributes:
        duplicates: Offending triple -> results of every group claiming it,
            in group priority order
    """

    def __init__(self, duplicates: dict[Triple, tuple[Symbol, ...]]):
        self.duplicates = dict(duplicates)
        lines = [
            f"  {format_triple(triple)} -> {', '.join(s.role for s in groups)}"
            for triple, groups in self.duplicates.items()
        ]
        super().__init__(
            f"{len(self.duplicates)} neighborhood triple(s) appear in more than one rule group:\n"
            + "\n".join(lines)
        )


class InvalidInitialCondition(FSSPError):
    """
    Raised when a caller-supplied interior has the wrong length.

    Attributes:
        expected: Number of interior cells required (n)
        actual: Number of cells supplied
    """

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"initial condition must have exactly {expected} cell(s), got {actual}"
        )


class UnmatchedNeighborhoodError(FSSPError):
    """
    Raised during a step when no rule group matches an observed triple.

    This means the rule catalog does not cover the state space reached for
    the requested line length; it is never a data error.

    Attributes:
        triple: The unmatched (left, self, right) neighborhood
        position: Lattice position of the cell being updated (1..n)
        step: Index of the snapshot being produced
    """

    def __init__(self, triple: Sequence[Symbol], position: int, step: int):
        self.triple: Triple = tuple(triple)
        self.position = position
        self.step = step
        super().__init__(
            f"no rule matches neighborhood {format_triple(self.triple)} "
            f"at position {position} while computing step {step}"
        )
