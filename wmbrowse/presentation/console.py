"""
Console — Operator I/O with a non-blocking readiness check

The session loop must never block waiting for input, so input_ready()
polls the terminal without reading a whole line. Lines are assembled from
raw reads of the file descriptor; text-mode buffering would otherwise hide
pasted lines from the readiness check.

Streams without a file descriptor (StringIO in tests, pipes wrapped by
other tools) are read line-by-line and always report ready.
"""

import codecs
import io
import os
import select
import sys
from typing import Optional

from .symbols import safe_print


READ_CHUNK = 4096


class Console:
    """Line-oriented operator console."""

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout
        self._fd = self._fileno(self.stdin)
        self._pending = ""
        self._eof = False
        self._decoder = codecs.getincrementaldecoder(
            getattr(self.stdin, "encoding", None) or "utf-8"
        )(errors="replace")

    @property
    def stdout(self):
        return self._stdout if self._stdout is not None else sys.stdout

    @staticmethod
    def _fileno(stream) -> Optional[int]:
        try:
            return stream.fileno()
        except (AttributeError, OSError, io.UnsupportedOperation):
            return None

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def input_ready(self) -> bool:
        """
        True if a full line (or end of input) can be read without blocking.
        Never blocks.
        """
        if self._fd is None:
            return True
        if "\n" in self._pending or self._eof:
            return True
        if not self._poll():
            return False
        self._fill()
        return "\n" in self._pending or self._eof

    def readline(self) -> Optional[str]:
        """
        Read one line, blocking until it is complete.

        Returns:
            Line without its trailing newline, or None at end of input
        """
        if self._fd is None:
            line = self.stdin.readline()
            if not line:
                return None
            return line.rstrip("\r\n")

        while "\n" not in self._pending and not self._eof:
            self._fill()
        if "\n" in self._pending:
            line, self._pending = self._pending.split("\n", 1)
            return line.rstrip("\r")
        if self._pending:
            line, self._pending = self._pending, ""
            return line
        return None

    def ask(self, prompt: str) -> Optional[str]:
        """Show a prompt and read the operator's answer (None at end of input)."""
        self.write(prompt, end="")
        return self.readline()

    def _poll(self) -> bool:
        if os.name == "nt":
            import msvcrt
            return msvcrt.kbhit()
        readable, _, _ = select.select([self._fd], [], [], 0)
        return bool(readable)

    def _fill(self) -> None:
        chunk = os.read(self._fd, READ_CHUNK)
        if not chunk:
            self._pending += self._decoder.decode(b"", final=True)
            self._eof = True
            return
        self._pending += self._decoder.decode(chunk)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def write(self, text: str = "", end: str = "\n") -> None:
        safe_print(text, end=end, file=self.stdout)
        self.stdout.flush()
