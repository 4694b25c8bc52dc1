"""Byte channels that stream specifiers resolve to."""

from __future__ import annotations

import enum
from typing import BinaryIO, Callable, Protocol


class Direction(enum.Enum):
    INPUT = "input"
    OUTPUT = "output"


class Channel(Protocol):
    """Abstract channel interface."""

    def read(self, n: int) -> bytes: ...
    def write(self, data: bytes) -> None: ...
    def flush(self) -> None: ...
    def close(self) -> None: ...


class StdChannel:
    """Process standard input or output.  Never closes the stream."""

    def __init__(self, stream: BinaryIO, name: str):
        self.stream = stream
        self.name = name

    def read(self, n: int) -> bytes:
        return self.stream.read(n) or b""

    def write(self, data: bytes) -> None:
        self.stream.write(data)

    def flush(self) -> None:
        self.stream.flush()

    def close(self) -> None:
        self.flush()

    def __repr__(self) -> str:
        return f"StdChannel({self.name})"


class FileChannel:
    """Read from / write to a raw binary file."""

    def __init__(self, path: str, mode: str = "rb"):
        self.path = path
        self._f = open(path, mode)

    def read(self, n: int) -> bytes:
        return self._f.read(n) or b""

    def write(self, data: bytes) -> None:
        self._f.write(data)

    def flush(self) -> None:
        if not self._f.closed and self._f.writable():
            self._f.flush()

    def close(self) -> None:
        self._f.close()

    @property
    def closed(self) -> bool:
        return self._f.closed


class BrokenChannel:
    """Output file that could not be created.

    The creation error is re-raised on first use rather than at resolution.
    """

    def __init__(self, path: str, error: OSError):
        self.path = path
        self.error = error

    def read(self, n: int) -> bytes:
        raise OSError(f"{self.path}: channel unavailable") from self.error

    def write(self, data: bytes) -> None:
        raise OSError(f"{self.path}: channel unavailable") from self.error

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


class SerialChannel:
    """UART / serial port channel (requires pyserial).

    *opener* builds the underlying port object from the device name and
    defaults to ``serial.Serial``.
    """

    def __init__(self, port: str, opener: Callable[[str], object] | None = None,
                 timeout: float | None = None):
        import serial
        self.port = port
        if opener is None:
            self._ser = serial.Serial(port, timeout=timeout)
        else:
            self._ser = opener(port)

    @property
    def baudrate(self) -> int:
        return self._ser.baudrate

    def set_baudrate(self, baudrate: int) -> int:
        """Apply *baudrate* and return the rate the port now runs at.

        Raises ValueError if the port does not support the rate.
        """
        import serial
        if baudrate not in self._ser.BAUDRATES:
            raise ValueError(f"unsupported baud rate: {baudrate}")
        try:
            self._ser.baudrate = baudrate
        except serial.SerialException as e:
            raise ValueError(str(e)) from e
        return self._ser.baudrate

    def read(self, n: int) -> bytes:
        return self._ser.read(n)

    def write(self, data: bytes) -> None:
        self._ser.write(data)

    def flush(self) -> None:
        self._ser.flush()

    def close(self) -> None:
        self._ser.close()
