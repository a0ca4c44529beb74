from dataclasses import dataclass
from enum import Enum

from simulator.errors import ParseError


@dataclass(frozen=True, order=True)
class State:
    id: int

    def __post_init__(self):
        if self.id < 0:
            raise ValueError(f"State id must be non-negative, got {self.id}")

    def __repr__(self):
        return f"State ({self.id})"

    def __str__(self):
        return str(self.id)


class Move(Enum):
    LEFT = "L"
    RIGHT = "R"
    STAY = "S"

    @classmethod
    def parse(cls, token):
        try:
            return cls(token)
        except ValueError:
            raise ParseError(f"Move not recognized: {token!r} (expected L, R or S)") from None

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Rule:
    state: State
    read_symbol: str
    write_symbol: str
    move: Move
    next_state: State

    def __str__(self):
        return f"{self.state} {self.read_symbol} {self.write_symbol} {self.move} {self.next_state}"


class TransitionTable:
    """
    Ordered rule set with first-match lookup.
    Rules sharing a (state, read symbol) key are kept, but only the first
    one inserted is ever returned by lookup.
    """

    def __init__(self, rules=()):
        self._rules = tuple(rules)
        self._index = {}
        for rule in self._rules:
            self._index.setdefault((rule.state, rule.read_symbol), rule)

    @property
    def rules(self):
        return self._rules

    def lookup(self, state, symbol):
        return self._index.get((state, symbol))

    def duplicates(self):
        """Rules shadowed by an earlier rule for the same key."""
        return [rule for rule in self._rules if self._index[(rule.state, rule.read_symbol)] is not rule]

    def __iter__(self):
        return iter(self._rules)

    def __len__(self):
        return len(self._rules)

    def __repr__(self):
        return f"TransitionTable ({len(self._rules)} rules)"


# === Construction API ===

def parse_state(token):
    token = token.strip()
    if not (token.isascii() and token.isdigit()):
        raise ParseError(f"Invalid state id: {token!r}")
    return State(int(token))


def make_states(count):
    if count < 0:
        raise ParseError(f"State count must be non-negative, got {count}")
    return [State(i) for i in range(count)]


def make_final_states(ids):
    return frozenset(parse_state(i) for i in ids)


def _parse_symbol(token, role):
    if len(token) != 1:
        raise ParseError(f"{role} symbol must be a single character, got {token!r}")
    return token


def parse_rule(definition):
    """Parse a `state read write move next_state` line into a Rule."""
    tokens = definition.split()
    if len(tokens) != 5:
        raise ParseError(f"Expected 5 tokens in rule, got {len(tokens)}: {definition.strip()!r}")
    state, read_symbol, write_symbol, move, next_state = tokens
    return Rule(
        state=parse_state(state),
        read_symbol=_parse_symbol(read_symbol, "Read"),
        write_symbol=_parse_symbol(write_symbol, "Write"),
        move=Move.parse(move),
        next_state=parse_state(next_state),
    )
