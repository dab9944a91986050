"""
Output redirection — route the engine's print channels into logging.

While an operation runs, everything the engine prints on its normal
channel becomes one ``logger.info`` call and everything on its error
channel one ``logger.warning`` call, text unchanged.  Outside that
window the engine's original sinks are in place.

Use ``redirected_output()`` rather than calling wrap/unwrap by hand.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from rocktree.adapters.engine import output as engine_output
from rocktree.adapters.engine.output import Sink
from rocktree.core.observability.logging_config import ENGINE_LOGGER

logger = logging.getLogger(ENGINE_LOGGER)


@dataclass(frozen=True)
class RedirectToken:
    """The sinks that were installed before ``wrap()``."""

    printout: Sink
    printerr: Sink


def _join(args: tuple[object, ...]) -> str:
    return "\t".join(str(a) for a in args)


def wrap(target: logging.Logger | None = None) -> RedirectToken:
    """Install logging sinks on the engine and return the previous ones."""
    log = target or logger
    token = RedirectToken(printout=engine_output.printout, printerr=engine_output.printerr)

    def _printout(*args: object) -> None:
        log.info("%s", _join(args))

    def _printerr(*args: object) -> None:
        log.warning("%s", _join(args))

    engine_output.printout = _printout
    engine_output.printerr = _printerr
    return token


def unwrap(token: RedirectToken) -> None:
    """Reinstall the sinks captured by ``wrap()``."""
    engine_output.printout = token.printout
    engine_output.printerr = token.printerr


@contextmanager
def redirected_output(target: logging.Logger | None = None) -> Iterator[RedirectToken]:
    token = wrap(target)
    try:
        yield token
    finally:
        unwrap(token)
