"""
Engine output channels.

The engine talks to the user through two print-style sinks: ``printout``
for normal output and ``printerr`` for warnings and errors.  Engine code
must always look them up through this module (``output.printout(...)``)
so that a caller can swap them for the duration of one call.
"""

from __future__ import annotations

import sys
from typing import Callable

Sink = Callable[..., None]


def _default_printout(*args: object) -> None:
    sys.stdout.write("\t".join(str(a) for a in args) + "\n")


def _default_printerr(*args: object) -> None:
    sys.stderr.write("\t".join(str(a) for a in args) + "\n")


printout: Sink = _default_printout
printerr: Sink = _default_printerr


def reset_sinks() -> None:
    """Reinstall the stdout/stderr sinks (used by tests)."""
    global printout, printerr
    printout = _default_printout
    printerr = _default_printerr
