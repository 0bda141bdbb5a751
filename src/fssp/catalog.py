"""
Transition rule catalog for the 3n firing squad solution.

The catalog is a fixed, hand-verified artifact. Each rule maps a
(left, self, right) neighborhood to the next role of the middle automaton.
Rules are grouped by the role they produce, and the groups are declared in
a fixed priority order that is used only to report conflicts: a triple
claimed by two groups is a build-time error, never resolved at run time.

Rules were accumulated one line length at a time (the ``# n = ...`` markers
note the smallest length that first needed each block). Together they
synchronize every length that has been checked, but no proof of coverage
for all n exists, so sweeps in the test suite exercise a wide range.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

import mlx.core as mx

from .errors import DuplicateRuleError
from .symbols import NUM_SYMBOLS, Symbol, SymbolAssignment, Triple


I = Symbol.IDLE
G = Symbol.GENERAL
L1 = Symbol.LEFT_FIRST_OFFICER
L2 = Symbol.LEFT_SECOND_OFFICER
L3 = Symbol.LEFT_THIRD_OFFICER
L4 = Symbol.LEFT_FOURTH_OFFICER
LE = Symbol.LEFT_ECHO
R1 = Symbol.RIGHT_FIRST_OFFICER
R2 = Symbol.RIGHT_SECOND_OFFICER
R3 = Symbol.RIGHT_THIRD_OFFICER
R4 = Symbol.RIGHT_FOURTH_OFFICER
RE = Symbol.RIGHT_ECHO
AN = Symbol.ANNOUNCER
RA = Symbol.RE_ANNOUNCER
FI = Symbol.FIRE

# Result roles in priority order. General is only ever a boundary sentinel.
GROUP_ORDER: tuple[Symbol, ...] = (
    I, L1, L2, L3, L4, LE, R1, R2, R3, R4, RE, AN, RA, FI,
)

RULES: Mapping[Symbol, tuple[Triple, ...]] = MappingProxyType({
    Symbol.IDLE: (
        # n = 3 * 2**k
        (I, I, I),
        (I, L4, L1),
        (I, I, L2),
        (I, I, L3),
        (I, I, L4),
        (G, L4, L1),
        (G, I, L2),
        (G, I, L3),
        (G, I, L4),
        (G, I, I),
        (I, I, G),
        (L1, LE, I),
        (LE, I, I),
        (L1, LE, G),
        (LE, I, G),
        (R1, R4, I),
        (R2, I, I),
        (R3, I, I),
        (R4, I, I),
        (R1, R4, G),
        (R2, I, G),
        (R3, I, G),
        (R4, I, G),
        (I, RE, R1),
        (I, I, RE),
        (G, RE, R1),
        (G, I, RE),
        (R1, R4, L4),
        (R4, L4, L1),
        (L1, LE, RE),
        (LE, RE, R1),
        # n = 7
        (R1, R4, AN),
        (AN, L4, L1),
        # n = 9
        (R2, I, RA),
        (RA, I, L2),
        (R3, I, RA),
        (RA, I, L3),
        # n = 11
        (R4, I, RA),
        (RA, I, L4),
        (I, I, RA),
        (RA, I, I),
        # n = 13
        (L1, LE, RA),
        (RA, RE, R1),
        # n = 17
        (LE, I, RA),
        (RA, I, RE),
    ),
    Symbol.LEFT_FIRST_OFFICER: (
        # n = 3 * 2**k
        (L1, I, I),
        (L1, L1, I),
        (L1, L1, L1),
        (L2, L1, I),
        (L2, L1, L1),
        (L3, L1, L1),
        (L1, I, G),
        (L3, LE, I),
        (RE, R3, I),
        (AN, I, I),
        (AN, I, G),
        # n = 2
        (RE, R3, G),
        # n = 4
        (RE, R3, L3),
        (L3, LE, G),
        # n = 5
        (RE, R3, AN),
        # n = 7
        (AN, I, RA),
        # n = 8
        (L3, LE, RE),
        # n = 9
        (L1, I, RA),
        (L3, LE, RA),
    ),
    Symbol.LEFT_SECOND_OFFICER: (
        # n = 3 * 2**k
        (G, L1, I),
        (L4, L1, L1),
        (R1, L1, I),
        # n = 5
        (RA, L1, I),
    ),
    Symbol.LEFT_THIRD_OFFICER: (
        # n = 3 * 2**k
        (G, L2, L1),
        (I, L2, L1),
        (R2, L2, L1),
        # n = 5
        (RA, L2, L1),
    ),
    Symbol.LEFT_FOURTH_OFFICER: (
        # n = 3 * 2**k
        (G, L3, L1),
        (I, L3, L1),
        (R3, L3, L1),
        # n = 7
        (AN, L3, L1),
    ),
    Symbol.LEFT_ECHO: (
        # n = 3 * 2**k
        (L1, L1, LE),
        (L2, L1, LE),
        (L3, L1, LE),
        (L1, L1, G),
        (L1, L1, R1),
        (RA, L1, G),
        (RA, L1, R1),
        # n = 1
        (G, L1, G),
        # n = 4
        (L2, L1, G),
        (R1, L1, R1),
        # n = 8
        (L2, L1, R1),
        # n = 9
        (L2, L1, RA),
        # n = 13
        (L1, L1, RA),
    ),
    Symbol.RIGHT_FIRST_OFFICER: (
        # n = 3 * 2**k
        (I, I, R1),
        (I, R1, R1),
        (R1, R1, R1),
        (I, R1, R2),
        (R1, R1, R2),
        (R1, R1, R3),
        (G, I, R1),
        (I, L3, LE),
        (I, RE, R3),
        (G, I, AN),
        (I, I, AN),
        # n = 2
        (G, L3, LE),
        # n = 4
        (R3, L3, LE),
        (G, RE, R3),
        # n = 5
        (AN, L3, LE),
        # n = 7
        (RA, I, AN),
        # n = 8
        (LE, RE, R3),
        # n = 9
        (RA, I, R1),
        (RA, RE, R3),
    ),
    Symbol.RIGHT_SECOND_OFFICER: (
        # n = 3 * 2**k
        (I, R1, G),
        (R1, R1, R4),
        (I, R1, L1),
        # n = 5
        (I, R1, RA),
    ),
    Symbol.RIGHT_THIRD_OFFICER: (
        # n = 3 * 2**k
        (R1, R2, G),
        (R1, R2, I),
        (R1, R2, L2),
        # n = 5
        (R1, R2, RA),
    ),
    Symbol.RIGHT_FOURTH_OFFICER: (
        # n = 3 * 2**k
        (R1, R3, G),
        (R1, R3, I),
        (R1, R3, L3),
        # n = 7
        (R1, R3, AN),
    ),
    Symbol.RIGHT_ECHO: (
        # n = 3 * 2**k
        (RE, R1, R1),
        (RE, R1, R2),
        (RE, R1, R3),
        (G, R1, R1),
        (L1, R1, R1),
        (G, R1, RA),
        (L1, R1, RA),
        # n = 1
        (G, R1, G),
        # n = 4
        (G, R1, R2),
        (L1, R1, L1),
        # n = 8
        (L1, R1, R2),
        # n = 9
        (RA, R1, R2),
        # n = 13
        (RA, R1, R1),
    ),
    Symbol.ANNOUNCER: (
        # n = 3 * 2**k
        (RE, R1, R4),
        (L4, L1, LE),
        # n = 5
        (R2, RA, L2),
        (R3, AN, L3),
        (L1, AN, R1),
        # n = 7
        (RA, R1, RA),
        (RA, L1, RA),
        # n = 9
        (RA, R1, L1),
        (R1, L1, RA),
    ),
    Symbol.RE_ANNOUNCER: (
        # n = 3 * 2**k
        (I, AN, I),
        (I, RA, I),
        (LE, RA, RE),
        (R1, RA, L1),
        (L1, RA, R1),
        # n = 2
        (G, R1, L1),
        (R1, L1, G),
        # n = 4
        (R1, RA, RA),
        (RA, RA, L1),
        # n = 5
        (AN, R1, L1),
        (R1, L1, AN),
        # n = 7
        (R4, AN, L4),
    ),
    Symbol.FIRE: (
        # n = 3 * 2**k
        (G, RE, RA),
        (RA, LE, G),
        (RE, RA, LE),
        (LE, RE, RA),
        (RA, LE, RE),
        # n = 1
        (G, LE, G),
        (G, RE, G),
        # n = 2
        (G, RA, RA),
        (RA, RA, G),
        # n = 4
        (RE, RA, G),
        (G, RA, LE),
        # n = 5
        (AN, RA, RA),
        (RA, RA, AN),
        (RA, AN, RA),
        # n = 7
        (AN, RA, AN),
        (RE, RA, AN),
        (AN, RA, LE),
        # n = 8
        (LE, RE, LE),
        (RE, LE, RE),
        # n = 9
        (LE, RE, AN),
        (RE, AN, RA),
        (RA, AN, LE),
        (AN, LE, RE),
    ),
})


def encode_triple(left: int, center: int, right: int) -> int:
    """Flatten a neighborhood into an index of the compiled lookup table."""
    return (int(left) * NUM_SYMBOLS + int(center)) * NUM_SYMBOLS + int(right)


@dataclass(frozen=True)
class RuleGroup:
    """
    All neighborhoods that produce one result role.

    Attributes:
        result: Role assigned to the middle automaton on a match
        triples: Matching (left, self, right) neighborhoods
        identifier: Rendering identifier attached to ``result``
    """

    result: Symbol
    triples: tuple[Triple, ...]
    identifier: int

    def __len__(self) -> int:
        return len(self.triples)

    def __contains__(self, triple: object) -> bool:
        return triple in self.triples


def build_rule_groups(
    assignment: Optional[SymbolAssignment] = None,
) -> tuple[SymbolAssignment, tuple[RuleGroup, ...]]:
    """
    Declare the 14 rule groups in priority order.

    Args:
        assignment: Rendering identifiers for each role (identity if omitted)

    Returns:
        (symbol table, rule groups)
    """
    if assignment is None:
        assignment = SymbolAssignment.identity()

    groups = tuple(
        RuleGroup(result=result, triples=RULES[result], identifier=assignment[result])
        for result in GROUP_ORDER
    )
    return assignment, groups


def validate_rule_groups(groups: tuple[RuleGroup, ...]) -> None:
    """
    Check that no triple belongs to more than one group.

    Raises:
        DuplicateRuleError: Listing every offending triple with all the
            groups (in priority order) that claim it
    """
    claims: dict[Triple, list[Symbol]] = {}
    for group in groups:
        for triple in group.triples:
            claims.setdefault(triple, []).append(group.result)

    duplicates = {
        triple: tuple(results)
        for triple, results in claims.items()
        if len(results) > 1
    }
    if duplicates:
        raise DuplicateRuleError(duplicates)


@dataclass(frozen=True)
class StateCatalog:
    """
    Validated, immutable rule catalog.

    Built once per run and safe to share between simulations. The groups
    are compiled into a single lookup from neighborhood to result; the
    ``table`` form is an ``mx.array`` of length 15**3 holding the result
    index for every encoded triple, or -1 where no rule applies.

    Attributes:
        symbols: Rendering identifiers for each role
        groups: The 14 rule groups in priority order
        transitions: Read-only {triple: result} lookup
        table: Compiled lookup for vectorised stepping
    """

    symbols: SymbolAssignment
    groups: tuple[RuleGroup, ...]
    transitions: Mapping[Triple, Symbol] = field(repr=False)
    table: mx.array = field(repr=False, compare=False)

    @classmethod
    def build(cls, assignment: Optional[SymbolAssignment] = None) -> "StateCatalog":
        """
        Declare, validate and compile the rule catalog.

        Args:
            assignment: Rendering identifiers for each role (identity if omitted)

        Returns:
            A ready-to-use StateCatalog

        Raises:
            DuplicateRuleError: If any triple appears in more than one group
        """
        symbols, groups = build_rule_groups(assignment)
        validate_rule_groups(groups)

        transitions = {
            triple: group.result
            for group in groups
            for triple in group.triples
        }

        table = [-1] * NUM_SYMBOLS ** 3
        for triple, result in transitions.items():
            table[encode_triple(*triple)] = int(result)

        return cls(
            symbols=symbols,
            groups=groups,
            transitions=MappingProxyType(transitions),
            table=mx.array(table, dtype=mx.int32),
        )

    @property
    def rule_count(self) -> int:
        """Total number of declared neighborhoods."""
        return len(self.transitions)

    @property
    def fire_symbol(self) -> Symbol:
        return FI

    def group(self, result: Symbol) -> RuleGroup:
        """Rule group producing ``result``."""
        for group in self.groups:
            if group.result == result:
                return group
        raise KeyError(f"no rule group produces {Symbol(result).role}")

    def triples(self) -> frozenset[Triple]:
        return frozenset(self.transitions)

    def next_symbol(self, left: Symbol, center: Symbol, right: Symbol) -> Optional[Symbol]:
        """Result for one neighborhood, or None if the catalog has no rule."""
        return self.transitions.get((Symbol(left), Symbol(center), Symbol(right)))
