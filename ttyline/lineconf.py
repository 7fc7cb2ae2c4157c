"""Reading and changing serial line settings through termios."""

from __future__ import annotations

import errno
import fcntl
import struct
import termios
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta

from ttyline.types import InvalidValueError, Parity, ParityCheck, Queue, UartError

XON = 17
XOFF = 19

_IFLAG, _OFLAG, _CFLAG, _LFLAG, _ISPEED, _OSPEED, _CC = range(7)

_CMSPAR = getattr(termios, "CMSPAR", 0o10000000000)
_CRTSCTS = getattr(termios, "CRTSCTS", 0o20000000000)
_TIOCINQ = getattr(termios, "TIOCINQ", termios.FIONREAD)
_TIOCOUTQ = termios.TIOCOUTQ

_SPEEDS = (
    0, 50, 75, 110, 134, 150, 200, 300, 600, 1_200, 1_800, 2_400, 4_800,
    9_600, 19_200, 38_400, 57_600, 115_200, 230_400, 460_800, 500_000,
    576_000, 921_600, 1_000_000, 1_152_000, 1_500_000, 2_000_000,
    2_500_000, 3_000_000, 3_500_000, 4_000_000,
)
_BAUD_BY_SPEED = {
    speed: getattr(termios, f"B{speed}")
    for speed in _SPEEDS
    if hasattr(termios, f"B{speed}")
}
_SPEED_BY_BAUD = {baud: speed for speed, baud in _BAUD_BY_SPEED.items()}

_DATA_BITS = {termios.CS5: 5, termios.CS6: 6, termios.CS7: 7, termios.CS8: 8}
_CSIZE_BY_BITS = {bits: flag for flag, bits in _DATA_BITS.items()}

_FLUSH_QUEUES = {
    Queue.INPUT: termios.TCIFLUSH,
    Queue.OUTPUT: termios.TCOFLUSH,
    Queue.BOTH: termios.TCIOFLUSH,
}


@contextmanager
def _errors() -> Iterator[None]:
    """Turn termios and OS failures into UartError."""
    try:
        yield
    except UartError:
        raise
    except termios.error as exc:
        code, message = (exc.args + (None, None))[:2]
        raise UartError(code, message) from exc
    except OSError as exc:
        raise UartError(exc.errno, exc.strerror) from exc


@contextmanager
def _modify(fd: int) -> Iterator[list]:
    """Yield the line attributes and write them back if no error occurred."""
    attr = attributes(fd)
    yield attr
    set_attributes(fd, attr)


def _cc_get(value: int | bytes) -> int:
    return value if isinstance(value, int) else value[0]


def _cc_set(value: int) -> bytes:
    return bytes([value])


def _modem_bits(fd: int) -> int:
    with _errors():
        reply = fcntl.ioctl(fd, termios.TIOCMGET, struct.pack("i", 0))
    return struct.unpack("i", reply)[0]


def _set_modem_bit(fd: int, bit: int, asserted: bool) -> None:
    request = termios.TIOCMBIS if asserted else termios.TIOCMBIC
    with _errors():
        fcntl.ioctl(fd, request, struct.pack("i", bit))


def _queue_length(fd: int, request: int) -> int:
    with _errors():
        reply = fcntl.ioctl(fd, request, struct.pack("i", 0))
    return struct.unpack("i", reply)[0]


def attributes(fd: int) -> list:
    """Return the termios attribute list of the line."""
    with _errors():
        return termios.tcgetattr(fd)


def set_attributes(fd: int, attr: list) -> None:
    """Apply a termios attribute list to the line immediately."""
    try:
        termios.tcsetattr(fd, termios.TCSANOW, attr)
    except termios.error as exc:
        if exc.args and exc.args[0] == errno.EINVAL:
            raise InvalidValueError() from exc
        with _errors():
            raise


def line_speed(fd: int) -> int:
    """Return the output line speed in baud."""
    baud = attributes(fd)[_OSPEED]
    try:
        return _SPEED_BY_BAUD[baud]
    except KeyError:
        raise InvalidValueError(f"unknown speed code {baud!r}") from None


def set_line_speed(fd: int, line_speed: int) -> None:
    """Set both input and output line speed in baud."""
    try:
        baud = _BAUD_BY_SPEED[line_speed]
    except (KeyError, TypeError):
        raise InvalidValueError(f"unsupported line speed {line_speed!r}") from None
    with _modify(fd) as attr:
        attr[_ISPEED] = baud
        attr[_OSPEED] = baud


def parity(fd: int) -> Parity:
    """Return the parity mode of the line."""
    cflag = attributes(fd)[_CFLAG]
    if not cflag & termios.PARENB:
        return Parity.NONE
    if not cflag & termios.PARODD:
        return Parity.EVEN
    return Parity.ODD


def set_parity(fd: int, parity: Parity) -> None:
    """Set the parity mode of the line."""
    with _modify(fd) as attr:
        if parity is Parity.NONE:
            attr[_CFLAG] &= ~(termios.PARENB | termios.PARODD)
        elif parity is Parity.EVEN:
            attr[_CFLAG] |= termios.PARENB
            attr[_CFLAG] &= ~termios.PARODD
        elif parity is Parity.ODD:
            attr[_CFLAG] |= termios.PARENB | termios.PARODD
        elif parity is Parity.MARK:
            attr[_CFLAG] |= termios.PARENB | termios.PARODD | _CMSPAR
        elif parity is Parity.SPACE:
            attr[_CFLAG] |= termios.PARENB | _CMSPAR
            attr[_CFLAG] &= ~termios.PARODD
        else:
            raise InvalidValueError(f"unknown parity {parity!r}")


def parity_check(fd: int) -> ParityCheck:
    """Return how parity errors on input are handled."""
    iflag = attributes(fd)[_IFLAG]
    if not iflag & termios.INPCK:
        return ParityCheck.NONE
    ignpar = bool(iflag & termios.IGNPAR)
    parmrk = bool(iflag & termios.PARMRK)
    if ignpar and not parmrk:
        return ParityCheck.STRIP
    if not ignpar and not parmrk:
        return ParityCheck.REPLACE
    if not ignpar and parmrk:
        return ParityCheck.MARK
    return ParityCheck.NONE


def set_parity_check(fd: int, parity_check: ParityCheck) -> None:
    """Set how parity errors on input are handled."""
    inpck, ignpar, parmrk = termios.INPCK, termios.IGNPAR, termios.PARMRK
    with _modify(fd) as attr:
        if parity_check is ParityCheck.NONE:
            attr[_IFLAG] &= ~(inpck | ignpar | parmrk)
        elif parity_check is ParityCheck.STRIP:
            attr[_IFLAG] |= inpck | ignpar
            attr[_IFLAG] &= ~parmrk
        elif parity_check is ParityCheck.REPLACE:
            attr[_IFLAG] |= inpck
            attr[_IFLAG] &= ~(ignpar | parmrk)
        elif parity_check is ParityCheck.MARK:
            attr[_IFLAG] |= inpck | parmrk
            attr[_IFLAG] &= ~ignpar
        else:
            raise InvalidValueError(f"unknown parity check {parity_check!r}")


def data_bits(fd: int) -> int:
    """Return the number of data bits per character."""
    size = attributes(fd)[_CFLAG] & termios.CSIZE
    try:
        return _DATA_BITS[size]
    except KeyError:
        raise InvalidValueError(f"unknown character size {size!r}") from None


def set_data_bits(fd: int, data_bits: int) -> None:
    """Set the number of data bits per character (5 to 8)."""
    with _modify(fd) as attr:
        if data_bits not in _CSIZE_BY_BITS:
            raise InvalidValueError(f"unsupported data bits {data_bits!r}")
        attr[_CFLAG] &= ~termios.CSIZE
        attr[_CFLAG] |= _CSIZE_BY_BITS[data_bits]


def stop_bits(fd: int) -> int:
    """Return the number of stop bits (1 or 2)."""
    return 2 if attributes(fd)[_CFLAG] & termios.CSTOPB else 1


def set_stop_bits(fd: int, stop_bits: int) -> None:
    """Set the number of stop bits (1 or 2)."""
    with _modify(fd) as attr:
        if stop_bits == 1:
            attr[_CFLAG] &= ~termios.CSTOPB
        elif stop_bits == 2:
            attr[_CFLAG] |= termios.CSTOPB
        else:
            raise InvalidValueError(f"unsupported stop bits {stop_bits!r}")


def set_raw_mode(fd: int) -> None:
    """Put the line into non-canonical raw mode."""
    with _modify(fd) as attr:
        attr[_IFLAG] &= ~(
            termios.IGNBRK | termios.BRKINT | termios.PARMRK | termios.ISTRIP
            | termios.INLCR | termios.IGNCR | termios.ICRNL | termios.IXON
        )
        attr[_OFLAG] &= ~termios.OPOST
        attr[_LFLAG] &= ~(
            termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG | termios.IEXTEN
        )
        attr[_CFLAG] &= ~(termios.CSIZE | termios.PARENB)
        attr[_CFLAG] |= termios.CS8
        attr[_CC][termios.VMIN] = _cc_set(1)
        attr[_CC][termios.VTIME] = _cc_set(0)


def read_mode(fd: int) -> tuple[int, float]:
    """Return the minimum read length and the read timeout in seconds."""
    cc = attributes(fd)[_CC]
    return _cc_get(cc[termios.VMIN]), _cc_get(cc[termios.VTIME]) / 10


def set_read_mode(fd: int, min_length: int, timeout: float | timedelta) -> None:
    """Set the minimum read length and the read timeout.

    The timeout is stored in tenths of a second, truncated and capped at 25.5 s.
    """
    if not 0 <= min_length <= 255:
        raise InvalidValueError(f"minimum length out of range: {min_length!r}")
    if isinstance(timeout, timedelta):
        micros = timeout // timedelta(microseconds=1)
    else:
        micros = round(timeout * 1_000_000)
    if micros < 0:
        raise InvalidValueError(f"negative timeout: {timeout!r}")
    deciseconds = min(micros // 100_000, 255)
    with _modify(fd) as attr:
        attr[_CC][termios.VMIN] = _cc_set(min_length)
        attr[_CC][termios.VTIME] = _cc_set(deciseconds)


def enable_read(fd: int) -> None:
    """Enable the receiver; without it all input is discarded."""
    with _modify(fd) as attr:
        attr[_CFLAG] |= termios.CREAD


def ignore_carrier_detect(fd: int) -> None:
    """Ignore the carrier detect signal."""
    with _modify(fd) as attr:
        attr[_CFLAG] |= termios.CLOCAL


def hardware_flow_control(fd: int) -> bool:
    """Return whether RTS/CTS flow control is enabled."""
    return bool(attributes(fd)[_CFLAG] & _CRTSCTS)


def set_hardware_flow_control(fd: int, enabled: bool) -> None:
    """Enable or disable RTS/CTS flow control."""
    with _modify(fd) as attr:
        if enabled:
            attr[_CFLAG] |= _CRTSCTS
        else:
            attr[_CFLAG] &= ~_CRTSCTS


def status(fd: int) -> int:
    """Return the raw modem control signal bits."""
    return _modem_bits(fd)


def cts(fd: int) -> bool:
    """Return the state of the CTS line."""
    return bool(_modem_bits(fd) & termios.TIOCM_CTS)


def rts(fd: int) -> bool:
    """Return the state of the RTS line."""
    return bool(_modem_bits(fd) & termios.TIOCM_RTS)


def set_rts(fd: int, rts: bool) -> None:
    """Assert or release the RTS line."""
    _set_modem_bit(fd, termios.TIOCM_RTS, rts)


def dcd(fd: int) -> bool:
    """Return the state of the DCD line."""
    return bool(_modem_bits(fd) & termios.TIOCM_CAR)


def ri(fd: int) -> bool:
    """Return the state of the RI line."""
    return bool(_modem_bits(fd) & termios.TIOCM_RNG)


def dsr(fd: int) -> bool:
    """Return the state of the DSR line."""
    return bool(_modem_bits(fd) & termios.TIOCM_DSR)


def dtr(fd: int) -> bool:
    """Return the state of the DTR line."""
    return bool(_modem_bits(fd) & termios.TIOCM_DTR)


def set_dtr(fd: int, dtr: bool) -> None:
    """Assert or release the DTR line."""
    _set_modem_bit(fd, termios.TIOCM_DTR, dtr)


def software_flow_control(fd: int) -> tuple[bool, bool]:
    """Return (incoming, outgoing) XON/XOFF flow control settings."""
    iflag = attributes(fd)[_IFLAG]
    return bool(iflag & termios.IXOFF), bool(iflag & termios.IXON)


def set_software_flow_control(fd: int, incoming_enabled: bool, outgoing_enabled: bool) -> None:
    """Set XON/XOFF flow control for each direction."""
    with _modify(fd) as attr:
        attr[_IFLAG] &= ~(termios.IXON | termios.IXOFF | termios.IXANY)
        attr[_CC][termios.VSTART] = _cc_set(XON)
        attr[_CC][termios.VSTOP] = _cc_set(XOFF)
        if incoming_enabled:
            attr[_IFLAG] |= termios.IXOFF
        if outgoing_enabled:
            attr[_IFLAG] |= termios.IXON


def send_stop(fd: int) -> None:
    """Transmit an XOFF character."""
    with _errors():
        termios.tcflow(fd, termios.TCIOFF)


def send_start(fd: int) -> None:
    """Transmit an XON character."""
    with _errors():
        termios.tcflow(fd, termios.TCION)


def flush(fd: int, queue_type: Queue) -> None:
    """Discard data waiting in the given queue."""
    try:
        selector = _FLUSH_QUEUES[queue_type]
    except KeyError:
        raise InvalidValueError(f"unknown queue {queue_type!r}") from None
    with _errors():
        termios.tcflush(fd, selector)


def drain(fd: int) -> None:
    """Wait until all outgoing data has been transmitted."""
    with _errors():
        termios.tcdrain(fd)


def input_len(fd: int) -> int:
    """Return the number of bytes waiting in the input queue."""
    return _queue_length(fd, _TIOCINQ)


def output_len(fd: int) -> int:
    """Return the number of bytes waiting in the output queue."""
    return _queue_length(fd, _TIOCOUTQ)