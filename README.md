# ttyline

Small helpers for configuring and inspecting a serial line on Linux
through the POSIX termios interface. Every function in `ttyline.lineconf`
takes an open file descriptor for a TTY device and either reads one
setting or changes one setting while leaving the rest alone.

## Installation

```
pip install ttyline
```

## Usage

```python
import os
from datetime import timedelta

from ttyline.lineconf import (
    set_raw_mode, enable_read, ignore_carrier_detect,
    set_line_speed, set_data_bits, set_stop_bits, set_parity,
    set_read_mode, line_speed, parity, read_mode, drain, flush,
)
from ttyline.types import Parity, Queue

fd = os.open("/dev/ttyUSB0", os.O_RDWR | os.O_NOCTTY)
try:
    set_raw_mode(fd)
    enable_read(fd)
    ignore_carrier_detect(fd)
    set_line_speed(fd, 115_200)
    set_data_bits(fd, 8)
    set_stop_bits(fd, 1)
    set_parity(fd, Parity.NONE)
    set_read_mode(fd, 0, timedelta(milliseconds=500))

    print(line_speed(fd), parity(fd), read_mode(fd))  # 115200 Parity.NONE (0, 0.5)

    os.write(fd, b"hello\r\n")
    drain(fd)
    flush(fd, Queue.INPUT)
finally:
    os.close(fd)
```

## Modules

`ttyline.types` holds the enumerations and exceptions:

- `Parity`: `NONE`, `EVEN`, `ODD`, `MARK`, `SPACE`.
- `ParityCheck`: `NONE`, `STRIP`, `REPLACE`, `MARK`.
- `Queue`: `INPUT`, `OUTPUT`, `BOTH`.
- `UartError` (an `OSError`) and `InvalidValueError` (both a `UartError`
  and a `ValueError`, with errno `EINVAL`).

`ttyline.lineconf` holds the functions:

- `attributes(fd)` / `set_attributes(fd, attr)`: read and apply the raw
  termios attribute list (applied with `TCSANOW`).
- `line_speed(fd)` / `set_line_speed(fd, line_speed)`: standard rates from
  0 to 4,000,000 baud, as far as the platform's `termios` module defines
  them. Setting changes both input and output speed.
- `data_bits(fd)` / `set_data_bits(fd, data_bits)`: 5 to 8.
- `stop_bits(fd)` / `set_stop_bits(fd, stop_bits)`: 1 or 2.
- `parity(fd)` / `set_parity(fd, parity)`: all five `Parity` values can be
  set; reading reports only `NONE`, `EVEN` or `ODD`, so a line set to mark
  parity reads as `ODD` and one set to space parity reads as `EVEN`.
- `parity_check(fd)` / `set_parity_check(fd, parity_check)`.
- `set_raw_mode(fd)`: non-canonical raw mode, 8 data bits, no parity,
  minimum read length 1 and no timeout.
- `read_mode(fd)` / `set_read_mode(fd, min_length, timeout)`: the minimum
  read length (0 to 255) and the read timeout. The timeout is given in
  seconds or as a `timedelta`, stored in tenths of a second (truncated,
  capped at 25.5 s), and read back as seconds.
- `enable_read(fd)` and `ignore_carrier_detect(fd)`.
- `hardware_flow_control(fd)` / `set_hardware_flow_control(fd, enabled)`:
  RTS/CTS.
- `software_flow_control(fd)` / `set_software_flow_control(fd,
  incoming_enabled, outgoing_enabled)`: XON/XOFF; reading returns
  `(incoming, outgoing)`. Setting also fixes the start and stop
  characters to XON (17) and XOFF (19).
- `send_stop(fd)` / `send_start(fd)`: transmit XOFF / XON.
- Modem control lines: `status(fd)` returns the raw bits (compare with
  `termios.TIOCM_*`); `cts`, `rts`, `dcd`, `ri`, `dsr` and `dtr` return
  one line each; `set_rts(fd, rts)` and `set_dtr(fd, dtr)` assert or
  release a line.
- `flush(fd, queue_type)`, `drain(fd)`, `input_len(fd)` and
  `output_len(fd)`.

## Errors

A value that the line cannot take, such as an unsupported baud rate, a
data-bit count outside 5–8, or a setting the driver rejects with `EINVAL`,
raises `InvalidValueError`. Any other failure of the underlying system
call raises `UartError`, carrying the system errno and message.

## What it does not do

There is no serial port object and no reading or writing of data: open,
read, write and close the device yourself (for example with `os.open`,
`os.read` and `os.write`). The package does not find or list serial
devices, and it has no command-line tool.

## Tests

```
pip install ttyline[test]
pytest
```