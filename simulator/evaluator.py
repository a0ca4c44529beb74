from dataclasses import dataclass
from typing import Optional

from simulator.turing_machine import RunResult


@dataclass(frozen=True)
class Evaluation:
    halted: bool
    steps: int
    result: Optional[RunResult] = None


def run_bounded(machine, max_steps=None, on_step=None):
    """
    Drive a machine one step at a time, stopping after max_steps applied
    transitions. max_steps=None runs until the machine halts.
    on_step, when given, is called with the machine after every applied
    transition.
    """
    steps = 0
    while max_steps is None or steps < max_steps:
        if machine.step():
            return Evaluation(halted=True, steps=steps, result=machine.result(steps=steps))
        steps += 1
        if on_step is not None:
            on_step(machine)

    # The bound was reached; one more lookup tells whether it halted exactly there
    if machine.table.lookup(machine.current_state, machine.tape.read()) is None:
        return Evaluation(halted=True, steps=steps, result=machine.result(steps=steps))
    return Evaluation(halted=False, steps=steps)
