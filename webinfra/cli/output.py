"""
Output abstraction for CLI commands.

Provides a testable interface for CLI output, allowing commands to be tested
without capturing stdout.
"""

import sys
from typing import Protocol, TextIO


class OutputWriter(Protocol):
    """Protocol for CLI output writing."""

    def write(self, text: str = "") -> None:
        """Write text with trailing newline."""
        ...


class ConsoleOutput:
    """
    Output writer printing to a stream (stdout by default).

    Example:
        buffer = io.StringIO()
        out = ConsoleOutput(buffer)
        out.write("Hello")
        assert buffer.getvalue() == "Hello\\n"
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def write(self, text: str = "") -> None:
        print(text, file=self._stream)


class BufferedOutput:
    """Output writer collecting lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write(self, text: str = "") -> None:
        self.lines.extend(text.split("\n"))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)
