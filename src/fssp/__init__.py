"""
FSSP - Firing Squad Synchronization Problem

A deterministic cellular automaton that fires a line of n identical
soldiers simultaneously in at most 3n steps.
"""

__version__ = "0.1.0"

from .catalog import StateCatalog
from .config import Config
from .errors import (
    DuplicateRuleError,
    FSSPError,
    InvalidInitialCondition,
    UnmatchedNeighborhoodError,
)
from .simulation import Simulation, run_simulation, step_lattice
from .state import History, Lattice, PendingSnapshot, create_initial_lattice
from .symbols import Symbol, SymbolAssignment, color_set
from .verification import Outcome, VerificationReport, verify

__all__ = [
    "Config",
    "DuplicateRuleError",
    "FSSPError",
    "History",
    "InvalidInitialCondition",
    "Lattice",
    "Outcome",
    "PendingSnapshot",
    "Simulation",
    "StateCatalog",
    "Symbol",
    "SymbolAssignment",
    "UnmatchedNeighborhoodError",
    "VerificationReport",
    "color_set",
    "create_initial_lattice",
    "run_simulation",
    "step_lattice",
    "verify",
    "__version__",
]
