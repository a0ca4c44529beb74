"""
Text and file boundary for machine definitions.

Machine definition format, one item per line:

    <n_states>
    <initial_state_id>
    <final_id_1>,<final_id_2>,...
    <blank_char>
    <state> <read> <write> <move> <next_state>   (one line per rule)

A tape definition is the symbol sequence itself, one symbol per character.
Everything here aborts on the first error; no partial machine is returned.
"""

from dataclasses import dataclass
from pathlib import Path

from simulator.errors import ParseError
from simulator.tape import Tape
from simulator.transitions import (
    TransitionTable,
    make_final_states,
    make_states,
    parse_rule,
    parse_state,
)
from simulator.turing_machine import TuringMachine

DEFAULT_BLANK = "$"
HEADER_LINES = ("state count", "initial state", "final states", "blank symbol")


@dataclass(frozen=True)
class MachineDefinition:
    states: tuple
    initial_state: object
    final_states: frozenset
    blank: str
    rules: TransitionTable
    alphabet: tuple

    def build(self, tape):
        return TuringMachine(
            self.states,
            self.initial_state,
            self.final_states,
            self.alphabet,
            self.rules,
            self.blank,
            tape,
        )


def derive_alphabet(rules):
    """Distinct read/write symbols, in the order they first appear."""
    seen = {}
    for rule in rules:
        seen.setdefault(rule.read_symbol, None)
        seen.setdefault(rule.write_symbol, None)
    return tuple(seen)


def _parse_blank(line, lineno):
    if len(line) == 1:
        return line
    stripped = line.strip()
    if len(stripped) != 1:
        raise ParseError(f"Blank symbol must be a single character, got {line!r}", line=lineno)
    return stripped


def _parse_final_states(line, lineno):
    if not line.strip():
        return frozenset()
    try:
        return make_final_states(line.split(","))
    except ParseError as e:
        raise ParseError(str(e), line=lineno) from None


def _split_lines(text):
    # Only "\n" ends a line; one trailing "\r" per line is dropped
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_definition(text):
    lines = _split_lines(text)
    if len(lines) < len(HEADER_LINES):
        missing = HEADER_LINES[len(lines)]
        raise ParseError(f"Machine definition ended before the {missing} line", line=len(lines) + 1)

    count = lines[0].strip()
    if not (count.isascii() and count.isdigit()):
        raise ParseError(f"Invalid state count: {count!r}", line=1)
    states = make_states(int(count))
    try:
        initial_state = parse_state(lines[1])
    except ParseError as e:
        raise ParseError(str(e), line=2) from None
    final_states = _parse_final_states(lines[2], 3)
    blank = _parse_blank(lines[3], 4)

    rules = []
    for lineno, line in enumerate(lines[4:], start=5):
        if not line.strip():
            continue
        try:
            rules.append(parse_rule(line))
        except ParseError as e:
            raise ParseError(str(e), line=lineno) from None

    return MachineDefinition(
        states=tuple(states),
        initial_state=initial_state,
        final_states=final_states,
        blank=blank,
        rules=TransitionTable(rules),
        alphabet=derive_alphabet(rules),
    )


def parse_tape(text, blank=DEFAULT_BLANK):
    # Multi-line sources form a single tape: lines are joined without terminators
    return Tape("".join(_split_lines(text)), blank)


def build_machine(definition_text, tape_text):
    definition = parse_definition(definition_text)
    return definition.build(parse_tape(tape_text, definition.blank))


# === File helpers ===
def _read_text(path):
    with open(Path(path), "r", encoding="utf-8", newline="") as f:
        try:
            return f.read()
        except UnicodeDecodeError as e:
            raise ParseError(f"{path} is not valid UTF-8: {e}") from None


def load_definition(path):
    return parse_definition(_read_text(path))


def load_tape(path, blank=DEFAULT_BLANK):
    return parse_tape(_read_text(path), blank)


def load_machine(machine_path, tape_path):
    definition = load_definition(machine_path)
    return definition.build(load_tape(tape_path, definition.blank))
