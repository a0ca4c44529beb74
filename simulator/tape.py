from simulator.transitions import Move


class Tape:
    """
    Materialized window of an infinite tape.
    Cells are only stored once the head has visited them, new cells are
    filled with the blank symbol.
    """

    def __init__(self, content, blank):
        self._content = list(content)
        if not self._content:
            self._content.append(blank)
        self._head = 0
        self._blank = blank

    @property
    def head(self):
        return self._head

    @property
    def blank(self):
        return self._blank

    @property
    def content(self):
        return list(self._content)

    def read(self):
        return self._content[self._head]

    def write(self, symbol):
        self._content[self._head] = symbol

    def move(self, direction):
        if direction is Move.RIGHT:
            self._move_right()
        elif direction is Move.LEFT:
            self._move_left()

    def _move_right(self):
        if self._head == len(self._content) - 1:
            self._content.append(self._blank)
        self._head += 1

    def _move_left(self):
        # Extending leftward shifts the content, so the head stays on index 0
        if self._head == 0:
            self._content.insert(0, self._blank)
        else:
            self._head -= 1

    def render(self):
        return "".join(self._content)

    def window(self, radius=10):
        """Display the cells around the head with a caret under it."""
        start = max(self._head - radius, 0)
        end = min(self._head + radius + 1, len(self._content))
        cells = self._content[start:end]
        tape_str = " ".join(cells)
        head_str = " ".join("^" if pos == self._head else " " for pos in range(start, end))
        return f"{tape_str}\n{head_str.rstrip()}"

    def __len__(self):
        return len(self._content)

    def __eq__(self, other):
        if not isinstance(other, Tape):
            return NotImplemented
        return (self._content, self._head, self._blank) == (other._content, other._head, other._blank)

    def __repr__(self):
        return f"Tape ({self._content!r}, head={self._head})"

    def __str__(self):
        return self.render()
