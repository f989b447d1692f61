"""Terminal output for the ghworkflow CLI: results on stdout, problems on stderr."""

from __future__ import annotations

import sys
from typing import Optional


class Console:
    def __init__(self, debug: bool = False):
        # debug: full tracebacks and [DEBUG] lines
        self.debug = debug

    def print_generated(self, workflow: str, output: str, job_count: int) -> None:
        print("\nWORKFLOW GENERATED")
        print(f"Workflow: {workflow}")
        print(f"Jobs: {job_count}")
        print(f"Output: {output}")

    def print_up_to_date(self, output: str) -> None:
        print(f"UP TO DATE: {output}")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """`ERROR: <title>`, the message, indented detail lines, then an optional hint."""
        out = sys.stderr
        print(f"\nERROR: {title}", file=out)
        print(message, file=out)
        for line in details or []:
            print(f"  {line}", file=out)
        if suggestion:
            print(f"\n{suggestion}", file=out)

    def print_exception(self, exc: BaseException) -> None:
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        print(message)

    def print_debug(self, message: str) -> None:
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Process-wide console, replaced by the CLI group once --debug is known
_console: Optional[Console] = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    global _console
    _console = console
