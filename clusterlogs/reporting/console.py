"""Console sinks for rendered logs.

Plain output goes to the out file, failure-styled output to the err file.
Both default to the process streams and can be redirected for a scope.
"""

import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

FAILURE_PREFIX = "❌  "
LOG_ENTRY_PREFIX = "    "


class Console:
    def __init__(self):
        self.out_file: Optional[TextIO] = None
        self.err_file: Optional[TextIO] = None

    @property
    def out(self) -> TextIO:
        return self.out_file or sys.stdout

    @property
    def err(self) -> TextIO:
        return self.err_file or sys.stderr

    def styled(self, text: str = "") -> None:
        """Write a line to the out file."""
        print(text, file=self.out)

    def failure(self, text: str) -> None:
        print(f"{FAILURE_PREFIX}{text}", file=self.err)

    def log_entry(self, text: str) -> None:
        print(f"{LOG_ENTRY_PREFIX}{text}", file=self.err)

    @contextmanager
    def redirected(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> Iterator["Console"]:
        """Send output to the given files, restoring the previous ones on exit."""
        previous = (self.out_file, self.err_file)
        if out is not None:
            self.out_file = out
        if err is not None:
            self.err_file = err
        try:
            yield self
        finally:
            self.out_file, self.err_file = previous


console = Console()
