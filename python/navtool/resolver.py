"""Stream specifier resolution.

A specifier is one of:
  -                     standard input / output
  <prefix><name>[:baud] serial port (prefix "COM" on Windows, "/dev/tty" elsewhere)
  <path>                binary file

Serial and file channels are pooled by specifier text, so resolving the same
text twice returns the same channel.  Input and output share one key space.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import BinaryIO, Callable

from .channel import (
    BrokenChannel, Channel, Direction, FileChannel, SerialChannel, StdChannel,
)
from .pool import ChannelPool

logger = logging.getLogger(__name__)

STD_SPEC = "-"
COMPORT_PREFIX = "COM" if sys.platform == "win32" else "/dev/tty"

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


class ResolveError(Exception):
    """A specifier could not be turned into a usable channel."""

    def __init__(self, spec: str, reason: str):
        super().__init__(f"{spec} => {reason}")
        self.spec = spec
        self.reason = reason


class UnsupportedBaudrateError(ResolveError):
    def __init__(self, spec: str, baudrate: int):
        super().__init__(spec, f"Unsupported baudrate {baudrate}")
        self.baudrate = baudrate


class InputNotFoundError(ResolveError):
    def __init__(self, spec: str, reason: str = "File not found"):
        super().__init__(spec, reason)


def parse_baudrate(text: str) -> int:
    """Parse a baud suffix the way C ``atoi`` does (0 if no leading integer)."""
    m = _LEADING_INT.match(text)
    return int(m.group()) if m else 0


def split_serial_spec(spec: str) -> tuple[str, str | None]:
    """Split ``name[:baud]`` at the first colon."""
    name, sep, baud = spec.partition(":")
    return name, (baud if sep else None)


class SpecResolver:
    """Maps specifier strings to channels held in a ChannelPool."""

    def __init__(self, pool: ChannelPool, serial_prefix: str = COMPORT_PREFIX,
                 stdin: BinaryIO | None = None, stdout: BinaryIO | None = None,
                 serial_opener: Callable[[str], object] | None = None):
        self.pool = pool
        self.serial_prefix = serial_prefix
        self._serial_opener = serial_opener
        self._std: dict[Direction, StdChannel] = {}
        self._stdin = stdin
        self._stdout = stdout

    def resolve(self, spec: str, direction: Direction,
                force_file: bool = False) -> Channel:
        """Return the channel for *spec*, opening it on first use.

        Raises ResolveError (or a subclass) when the endpoint cannot be
        used; the caller decides whether that ends the program.
        """
        if not spec:
            raise ValueError("empty stream specifier")
        if not force_file:
            if spec == STD_SPEC:
                return self._std_channel(direction)
            if spec.startswith(self.serial_prefix):
                return self._resolve_serial(spec)
        return self._resolve_file(spec, direction)

    def resolve_input(self, spec: str, force_file: bool = False) -> Channel:
        return self.resolve(spec, Direction.INPUT, force_file)

    def resolve_output(self, spec: str, force_file: bool = False) -> Channel:
        return self.resolve(spec, Direction.OUTPUT, force_file)

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    def _std_channel(self, direction: Direction) -> StdChannel:
        channel = self._std.get(direction)
        if channel is None:
            if direction is Direction.INPUT:
                channel = StdChannel(self._stdin or sys.stdin.buffer, "stdin")
            else:
                channel = StdChannel(self._stdout or sys.stdout.buffer, "stdout")
            self._std[direction] = channel
        logger.debug("[%s]", channel.name)
        return channel

    def _resolve_serial(self, spec: str) -> Channel:
        logger.info("%s", spec)
        name, baud_spec = split_serial_spec(spec)

        pooled = self.pool.get(name)
        if pooled is not None:
            if baud_spec is not None:
                logger.warning("%s already open, ignoring baudrate %s",
                               name, baud_spec)
            return pooled

        def open_port() -> Channel:
            try:
                channel = SerialChannel(name, opener=self._serial_opener)
            except (OSError, ValueError) as e:
                raise ResolveError(name, f"Cannot open port ({e})") from e
            if baud_spec is not None:
                self._set_baudrate(channel, name, baud_spec)
            return channel

        return self.pool.get_or_create(name, open_port)

    @staticmethod
    def _set_baudrate(channel: SerialChannel, name: str, baud_spec: str) -> None:
        baudrate = parse_baudrate(baud_spec)
        try:
            actual = channel.set_baudrate(baudrate)
        except ValueError as e:
            channel.close()
            raise UnsupportedBaudrateError(name, baudrate) from e
        if actual != baudrate:
            channel.close()
            raise UnsupportedBaudrateError(name, baudrate)

    def _resolve_file(self, spec: str, direction: Direction) -> Channel:
        logger.info("%s", spec)

        def open_file() -> Channel:
            if direction is Direction.INPUT:
                try:
                    return FileChannel(spec, "rb")
                except OSError as e:
                    raise InputNotFoundError(spec) from e
            try:
                return FileChannel(spec, "wb")
            except OSError as e:
                logger.warning("%s => cannot create (%s)", spec, e)
                return BrokenChannel(spec, e)

        return self.pool.get_or_create(spec, open_file)
