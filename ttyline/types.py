"""Enumerations and exceptions shared by the serial line helpers."""

from __future__ import annotations

import errno
from enum import Enum


class Parity(Enum):
    """Parity bit generation on the line."""

    NONE = "none"
    EVEN = "even"
    ODD = "odd"
    MARK = "mark"
    SPACE = "space"


class ParityCheck(Enum):
    """How received bytes with a parity error are handled."""

    NONE = "none"
    STRIP = "strip"
    REPLACE = "replace"
    MARK = "mark"


class Queue(Enum):
    """Which kernel queue an operation applies to."""

    INPUT = "input"
    OUTPUT = "output"
    BOTH = "both"


class UartError(OSError):
    """An operation on a serial line failed."""


class InvalidValueError(UartError, ValueError):
    """A setting was outside the range the line supports."""

    def __init__(self, message: str = "invalid value") -> None:
        super().__init__(errno.EINVAL, message)