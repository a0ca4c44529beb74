class TuringMachineError(Exception):
    """Base class for every error raised by the simulator."""


class ParseError(TuringMachineError, ValueError):
    """A machine or tape definition could not be parsed."""

    def __init__(self, message, line=None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class InvalidMachineError(TuringMachineError, ValueError):
    """Parsed values do not form a consistent machine."""


class HaltedNonFinal(TuringMachineError):
    def __init__(self, result):
        self.result = result
        super().__init__(f"Finished in a non-final state ({result.state})")
