"""Command-line option cascade shared by the navtool commands.

Options use the ``--name=value`` form; boolean options also accept a bare
``--name``.  Each recognised option is echoed to the log.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .channel import Channel
    from .resolver import SpecResolver

logger = logging.getLogger(__name__)

_GPST_RE = re.compile(r"--(start|end)-gpst=([+-]?\d+):(.+)$")


@dataclass
class GlobalOptions:
    start_gpstime: float = 0.0
    start_gpswn: int = 0
    end_gpstime: float = math.inf
    end_gpswn: int = 0
    out_is_n_packet: bool = False
    out_spec: str = "-"
    out: Channel | None = field(default=None, repr=False)

    @staticmethod
    def get_value(spec: str, key: str, accept_no_value: bool = True) -> str | None:
        """Return the value of ``--key=value``, or None if *spec* is not *key*.

        A bare ``--key`` yields ``"true"`` when *accept_no_value* is set.
        """
        if not spec.startswith("--"):
            return None
        rest = spec[2:]
        if not rest.startswith(key):
            return None
        rest = rest[len(key):]
        if rest.startswith("="):
            return rest[1:]
        if rest:
            # longer option name sharing this prefix
            return None
        return "true" if accept_no_value else None

    @staticmethod
    def is_true(value: str) -> bool:
        return value in ("on", "true")

    def is_time_in_range(self, t: float) -> bool:
        return self.start_gpstime <= t <= self.end_gpstime

    def check_spec(self, spec: str, resolver: SpecResolver | None = None,
                   force_file: bool = False) -> bool:
        """Consume one argument.  Returns True when it was recognised.

        With a *resolver*, ``--out`` is resolved immediately (as a file path
        when *force_file* is set).

        Raises ValueError for a recognised option with a malformed value.
        """
        m = _GPST_RE.match(spec)
        if m:
            which, wn, tow = m.group(1), int(m.group(2)), float(m.group(3))
            if which == "start":
                self.start_gpswn, self.start_gpstime = wn, tow
            else:
                self.end_gpswn, self.end_gpstime = wn, tow
            logger.info("%s-gpst: %d:%s", which, wn, tow)
            return True

        value = self.get_value(spec, "start-gpst", False)
        if value is not None:
            self.start_gpstime = float(value)
            logger.info("start-gpst: %s", self.start_gpstime)
            return True
        value = self.get_value(spec, "start-gpswn", False)
        if value is not None:
            self.start_gpswn = int(value)
            logger.info("start-gpswn: %d", self.start_gpswn)
            return True
        value = self.get_value(spec, "end-gpst", False)
        if value is not None:
            self.end_gpstime = float(value)
            logger.info("end-gpst: %s", self.end_gpstime)
            return True
        value = self.get_value(spec, "end-gpswn", False)
        if value is not None:
            self.end_gpswn = int(value)
            logger.info("end-gpswn: %d", self.end_gpswn)
            return True
        value = self.get_value(spec, "out_N_packet", True)
        if value is not None:
            self.out_is_n_packet = self.is_true(value)
            logger.info("out_N_packet: %s", "on" if self.out_is_n_packet else "off")
            return True
        value = self.get_value(spec, "out", False)
        if value is not None:
            if not value:
                raise ValueError("--out requires a stream specifier")
            self.out_spec = value
            logger.info("out: %s", value)
            if resolver is not None:
                self.out = resolver.resolve_output(value, force_file)
            return True
        return False
