"""
Logical roles of the firing squad automata and their rendering identifiers.

A Symbol is a pure enumeration value. Its integer value is only an index
used to compile the rule lookup; any colour or numeric label a renderer
needs comes from a SymbolAssignment instead.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Union


class Symbol(IntEnum):
    """The 15 roles an automaton (or boundary sentinel) can hold."""

    IDLE = 0
    GENERAL = 1
    LEFT_FIRST_OFFICER = 2
    LEFT_SECOND_OFFICER = 3
    LEFT_THIRD_OFFICER = 4
    LEFT_FOURTH_OFFICER = 5
    LEFT_ECHO = 6
    RIGHT_FIRST_OFFICER = 7
    RIGHT_SECOND_OFFICER = 8
    RIGHT_THIRD_OFFICER = 9
    RIGHT_FOURTH_OFFICER = 10
    RIGHT_ECHO = 11
    ANNOUNCER = 12
    RE_ANNOUNCER = 13
    FIRE = 14

    @property
    def role(self) -> str:
        """CamelCase role name, e.g. ``LeftFirstOfficer``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def parse(cls, value: Union["Symbol", int, str]) -> "Symbol":
        """
        Coerce a Symbol, member name or role name into a Symbol.

        Args:
            value: ``Symbol.IDLE``, ``"IDLE"``, ``"Idle"`` or ``"idle"``

        Returns:
            The matching Symbol

        Raises:
            ValueError: If the name does not match any role
        """
        if isinstance(value, Symbol):
            return value
        if isinstance(value, int):
            return cls(value)
        key = str(value).strip().replace("-", "_")
        if key.upper() in cls.__members__:
            return cls[key.upper()]
        for symbol in cls:
            if symbol.role.lower() == key.lower():
                return symbol
        raise ValueError(f"unknown symbol {value!r}")


NUM_SYMBOLS = len(Symbol)

# (left, self, right) neighborhood
Triple = tuple[Symbol, Symbol, Symbol]


@dataclass(frozen=True)
class SymbolAssignment:
    """
    Injective mapping from every Symbol to a rendering identifier.

    Used only by renderers for colour selection; it never affects rule
    semantics or simulation behaviour.

    Attributes:
        identifiers: Identifier for each Symbol, indexed by Symbol value
    """

    identifiers: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.identifiers) != NUM_SYMBOLS:
            raise ValueError(
                f"symbol assignment needs {NUM_SYMBOLS} identifiers, got {len(self.identifiers)}"
            )
        if len(set(self.identifiers)) != NUM_SYMBOLS:
            raise ValueError(f"symbol assignment identifiers must be distinct, got {self.identifiers}")

    @classmethod
    def from_sequence(cls, values: Iterable[int]) -> "SymbolAssignment":
        """Create an assignment from identifiers listed in Symbol order."""
        return cls(tuple(int(v) for v in values))

    @classmethod
    def from_mapping(cls, mapping: dict[Symbol, int]) -> "SymbolAssignment":
        """Create an assignment from an explicit {Symbol: identifier} mapping."""
        missing = [s.role for s in Symbol if s not in mapping]
        if missing:
            raise ValueError(f"symbol assignment is missing roles: {', '.join(missing)}")
        return cls(tuple(int(mapping[s]) for s in Symbol))

    @classmethod
    def identity(cls) -> "SymbolAssignment":
        """Standard assignment: each role gets its 1-based position."""
        return cls(tuple(s.value + 1 for s in Symbol))

    def __getitem__(self, symbol: Symbol) -> int:
        return self.identifiers[int(symbol)]

    def swapped(self, a: Symbol, b: Symbol) -> "SymbolAssignment":
        """Return a copy with the identifiers of two roles exchanged."""
        ids = list(self.identifiers)
        ids[a], ids[b] = ids[b], ids[a]
        return SymbolAssignment(tuple(ids))

    def as_dict(self) -> dict[Symbol, int]:
        return {s: self.identifiers[s] for s in Symbol}

    def symbol_for(self, identifier: int) -> Symbol:
        """Inverse lookup from identifier to role."""
        return Symbol(self.identifiers.index(identifier))


# Solid-colour cross-stitch sets, identifiers listed in Symbol order
_BASE_COLOR_SETS = (
    (1, 2, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 3, 4, 5),
    (6, 7, 1, 2, 3, 4, 5, 11, 12, 13, 14, 15, 8, 9, 10),
    (11, 12, 6, 7, 8, 9, 10, 1, 2, 3, 4, 5, 13, 14, 15),
)

# Each tier swaps one more left/right pair on top of the previous tier
_SWAP_TIERS = (
    (Symbol.LEFT_ECHO, Symbol.RIGHT_ECHO),
    (Symbol.LEFT_FOURTH_OFFICER, Symbol.RIGHT_FOURTH_OFFICER),
    (Symbol.LEFT_SECOND_OFFICER, Symbol.RIGHT_SECOND_OFFICER),
)


def _build_color_sets() -> dict[int, SymbolAssignment]:
    sets = {
        i + 1: SymbolAssignment.from_sequence(values)
        for i, values in enumerate(_BASE_COLOR_SETS)
    }
    base = len(_BASE_COLOR_SETS)
    for tier, (a, b) in enumerate(_SWAP_TIERS):
        for offset in range(1, base + 1):
            previous = tier * base + offset
            sets[previous + base] = sets[previous].swapped(a, b)
    return sets


COLOR_SETS: dict[int, SymbolAssignment] = _build_color_sets()


def color_set(index: int) -> SymbolAssignment:
    """
    Look up one of the shipped cross-stitch colour sets.

    Args:
        index: Colour set number, 1..12

    Returns:
        The corresponding SymbolAssignment
    """
    if index not in COLOR_SETS:
        raise ValueError(f"color_set must be in 1..{len(COLOR_SETS)}, got {index}")
    return COLOR_SETS[index]
