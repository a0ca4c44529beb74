from dataclasses import dataclass
from enum import Enum

from simulator.errors import HaltedNonFinal, InvalidMachineError
from simulator.transitions import State, TransitionTable


class Outcome(Enum):
    ACCEPTED = "accepted"
    HALTED_NON_FINAL = "halted_non_final"


@dataclass(frozen=True)
class RunResult:
    outcome: Outcome
    tape: str
    state: State
    steps: int

    @property
    def accepted(self):
        return self.outcome is Outcome.ACCEPTED

    def raise_for_outcome(self):
        if not self.accepted:
            raise HaltedNonFinal(self)
        return self


class TuringMachine:
    """
    Deterministic single-tape machine.

    The machine owns its tape and current state; the transition table is
    never mutated and can be shared between machines. `run` has no step
    bound, callers that need one drive `step` themselves (see
    simulator.evaluator).
    """

    def __init__(self, states, initial_state, final_states, alphabet, rules, blank, tape):
        self._states = tuple(states)
        self._initial_state = initial_state
        self._final_states = frozenset(final_states)
        self._alphabet = tuple(alphabet)
        self._table = rules if isinstance(rules, TransitionTable) else TransitionTable(rules)
        self._blank = blank
        self._tape = tape
        self._validate()
        self._current_state = State(initial_state.id)
        self._steps = 0

    def _validate(self):
        known = set(self._states)
        if self._initial_state not in known:
            raise InvalidMachineError(f"Initial state {self._initial_state} is not a declared state")
        unknown_finals = sorted(self._final_states - known)
        if unknown_finals:
            raise InvalidMachineError(f"Final states {[s.id for s in unknown_finals]} are not declared states")
        for rule in self._table:
            if rule.state not in known or rule.next_state not in known:
                raise InvalidMachineError(f"Rule '{rule}' references an undeclared state")
        if self._tape.blank != self._blank:
            raise InvalidMachineError(
                f"Tape blank {self._tape.blank!r} does not match machine blank {self._blank!r}"
            )

    # === Read-only views ===
    @property
    def states(self):
        return self._states

    @property
    def initial_state(self):
        return self._initial_state

    @property
    def final_states(self):
        return self._final_states

    @property
    def alphabet(self):
        return self._alphabet

    @property
    def table(self):
        return self._table

    @property
    def blank(self):
        return self._blank

    @property
    def tape(self):
        return self._tape

    @property
    def current_state(self):
        return self._current_state

    @property
    def steps(self):
        return self._steps

    def is_accepting(self):
        return self._current_state in self._final_states

    # === Execution ===
    def step(self):
        """Apply one transition. Returns True when no rule matches (halted)."""
        rule = self._table.lookup(self._current_state, self._tape.read())
        if rule is None:
            return True
        self._tape.write(rule.write_symbol)
        self._tape.move(rule.move)
        self._current_state = rule.next_state
        self._steps += 1
        return False

    def result(self, steps=None):
        outcome = Outcome.ACCEPTED if self.is_accepting() else Outcome.HALTED_NON_FINAL
        return RunResult(
            outcome=outcome,
            tape=self._tape.render(),
            state=self._current_state,
            steps=self._steps if steps is None else steps,
        )

    def run(self):
        start = self._steps
        while not self.step():
            pass
        return self.result(steps=self._steps - start)

    def describe(self):
        rules = "\n".join(f"    {rule}" for rule in self._table) or "    (none)"
        return (
            "Turing Machine\n"
            f" - States: {[s.id for s in self._states]}\n"
            f" - Initial State: {self._initial_state}\n"
            f" - Final States: {sorted(s.id for s in self._final_states)}\n"
            f" - Alphabet: {list(self._alphabet)}\n"
            f" - Rules:\n{rules}\n"
            f" - Blank: {self._blank}\n"
            f" - Current Tape: {self._tape}\n"
            f" - Current State: {self._current_state}"
        )

    def __str__(self):
        return self.describe()

    def __repr__(self):
        return (
            f"TuringMachine (states={len(self._states)}, rules={len(self._table)}, "
            f"current={self._current_state!r})"
        )
