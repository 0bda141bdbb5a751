"""
Configuration dataclass for FSSP runs.

Only ``n``, ``steps``, ``start_side`` and ``initial_condition`` affect the
simulation; the remaining fields are consumed by the pattern renderer.
"""

from dataclasses import dataclass, asdict
from typing import Any, Optional

from .state import START_SIDES
from .symbols import COLOR_SETS, Symbol, SymbolAssignment, color_set


FIT_METHODS = ("crop",)


@dataclass
class Config:
    """
    Complete configuration for an FSSP run.

    Defaults reproduce the reference run: 24 soldiers, 3n steps, the
    officer on the left and the first cross-stitch colour set.

    Attributes:
        n: Number of automata in the line

        # Simulation
        steps: Snapshots to produce, initial lattice included (None -> 3n)
        start_side: End holding the first officer ("left" or "right")
        initial_condition: Optional interior assignment as role names

        # Rendering
        color_set: Shipped colour set number (1..12)
        raster_dims: Pattern size in stitches (rows, cols)
        fit_method: How the history is fitted to the raster ("crop")
    """

    n: int = 24

    # Simulation
    steps: Optional[int] = None
    start_side: str = "left"
    initial_condition: Optional[tuple[str, ...]] = None

    # Rendering
    color_set: int = 1
    raster_dims: tuple[int, int] = (69, 33)
    fit_method: str = "crop"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        self._validate()

    def _validate(self) -> None:
        """Check that all parameters are in valid ranges."""
        if self.n < 1:
            raise ValueError(f"n must be >= 1, got {self.n}")

        if self.steps is not None and self.steps < 1:
            raise ValueError(f"steps must be >= 1, got {self.steps}")

        if self.start_side not in START_SIDES:
            raise ValueError(f"start_side must be one of {START_SIDES}, got {self.start_side}")

        if self.initial_condition is not None:
            self.initial_condition = tuple(self.initial_condition)
            for name in self.initial_condition:
                Symbol.parse(name)

        if self.color_set not in COLOR_SETS:
            raise ValueError(f"color_set must be in 1..{len(COLOR_SETS)}, got {self.color_set}")

        if len(self.raster_dims) != 2 or min(self.raster_dims) < 1:
            raise ValueError(f"raster_dims must be two positive sizes, got {self.raster_dims}")

        if self.fit_method not in FIT_METHODS:
            raise ValueError(f"fit_method must be one of {FIT_METHODS}, got {self.fit_method}")

    @property
    def total_steps(self) -> int:
        """Snapshots to simulate; the classical 3n bound unless overridden."""
        return self.steps if self.steps is not None else 3 * self.n

    @property
    def symbol_assignment(self) -> SymbolAssignment:
        return color_set(self.color_set)

    @property
    def initial_symbols(self) -> Optional[tuple[Symbol, ...]]:
        if self.initial_condition is None:
            return None
        return tuple(Symbol.parse(name) for name in self.initial_condition)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        d = dict(d)
        # JSON round-trips tuples as lists
        if isinstance(d.get("raster_dims"), list):
            d["raster_dims"] = tuple(d["raster_dims"])
        if isinstance(d.get("initial_condition"), list):
            d["initial_condition"] = tuple(d["initial_condition"])
        return cls(**d)

    @classmethod
    def from_args(cls, args: Any) -> "Config":
        """Create config from argparse namespace."""
        # Extract only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        config_dict = {k: v for k, v in vars(args).items() if k in known_fields and v is not None}
        return cls(**config_dict)

    def __repr__(self) -> str:
        return (
            f"Config(\n"
            f"  n={self.n}, steps={self.total_steps}, start_side={self.start_side},\n"
            f"  initial_condition={self.initial_condition},\n"
            f"  color_set={self.color_set}, raster_dims={self.raster_dims}, fit_method={self.fit_method}\n"
            f")"
        )
