"""N0 navigation packet encoding and decoding.

Packet layout (32 bytes, little-endian):
  [marker 'N'][reserved × 3]
  [itow_ms: uint32]
  [latitude: int32, deg × 1e7][longitude: int32, deg × 1e7]
  [height: int32, m × 1e4]
  [v_north, v_east, v_down: int16, m/s × 1e2]
  [heading, pitch, roll: int16, deg × 1e2]
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

import numpy as np

from .nav import NavigationState, NavSolution
from .units import deg2rad, rad2deg, to_fixed

logger = logging.getLogger(__name__)

N0_MARKER = b"N"
N0_FMT = "<c3xIiiihhhhhh"
N0_SIZE = struct.calcsize(N0_FMT)  # 32

ITOW_SCALE = 1e3
LATLNG_SCALE = 1e7
HEIGHT_SCALE = 1e4
VELOCITY_SCALE = 1e2
ATTITUDE_SCALE = 1e2

N0_DTYPE = np.dtype([
    ("marker", "S1"),
    ("reserved", "V3"),
    ("itow", "<u4"),
    ("latitude", "<i4"),
    ("longitude", "<i4"),
    ("height", "<i4"),
    ("v_north", "<i2"),
    ("v_east", "<i2"),
    ("v_down", "<i2"),
    ("heading", "<i2"),
    ("pitch", "<i2"),
    ("roll", "<i2"),
])


def encode_n0(itow: float, nav: NavigationState) -> bytes:
    """Build an N0 packet from a time-of-week [s] and a navigation state.

    Every field is truncated and wrapped to its integer width; this never
    raises for float input.
    """
    return struct.pack(
        N0_FMT,
        N0_MARKER,
        to_fixed(itow, ITOW_SCALE, 32, signed=False),
        to_fixed(rad2deg(nav.latitude), LATLNG_SCALE, 32),
        to_fixed(rad2deg(nav.longitude), LATLNG_SCALE, 32),
        to_fixed(nav.height, HEIGHT_SCALE, 32),
        to_fixed(nav.v_north, VELOCITY_SCALE, 16),
        to_fixed(nav.v_east, VELOCITY_SCALE, 16),
        to_fixed(nav.v_down, VELOCITY_SCALE, 16),
        to_fixed(rad2deg(nav.heading), ATTITUDE_SCALE, 16),
        to_fixed(rad2deg(nav.pitch), ATTITUDE_SCALE, 16),
        to_fixed(rad2deg(nav.roll), ATTITUDE_SCALE, 16),
    )


@dataclass
class N0Record:
    """Decoded N0 packet in physical units (seconds, degrees, meters, m/s)."""
    itow: float
    latitude: float
    longitude: float
    height: float
    v_north: float
    v_east: float
    v_down: float
    heading: float
    pitch: float
    roll: float

    def to_nav(self) -> NavSolution:
        return NavSolution(
            longitude=deg2rad(self.longitude), latitude=deg2rad(self.latitude),
            height=self.height,
            v_north=self.v_north, v_east=self.v_east, v_down=self.v_down,
            heading=deg2rad(self.heading), pitch=deg2rad(self.pitch),
            roll=deg2rad(self.roll),
        )


def decode_n0(data: bytes, offset: int = 0) -> N0Record:
    """Decode one N0 packet starting at *offset*."""
    if len(data) - offset < N0_SIZE:
        raise ValueError(f"N0 packet needs {N0_SIZE} bytes, "
                         f"got {len(data) - offset}")
    (marker, itow, lat, lng, h,
     v_n, v_e, v_d, psi, theta, phi) = struct.unpack_from(N0_FMT, data, offset)
    if marker != N0_MARKER:
        raise ValueError(f"Bad N0 marker: {marker!r}")
    return N0Record(
        itow=itow / ITOW_SCALE,
        latitude=lat / LATLNG_SCALE,
        longitude=lng / LATLNG_SCALE,
        height=h / HEIGHT_SCALE,
        v_north=v_n / VELOCITY_SCALE,
        v_east=v_e / VELOCITY_SCALE,
        v_down=v_d / VELOCITY_SCALE,
        heading=psi / ATTITUDE_SCALE,
        pitch=theta / ATTITUDE_SCALE,
        roll=phi / ATTITUDE_SCALE,
    )


def n0_array(data: bytes) -> np.ndarray:
    """View a contiguous N0 log as a structured array of raw fields.

    Trailing bytes that do not form a whole packet are ignored.
    """
    count = len(data) // N0_SIZE
    return np.frombuffer(data, dtype=N0_DTYPE, count=count)


class N0StreamDecoder:
    """Stateful decoder that reassembles N0 packets from a byte stream.

    Bytes that do not start with the 'N' marker are discarded until the
    next marker, so a stream joined mid-packet resynchronises.
    """

    def __init__(self):
        self.skipped: int = 0
        self._buf = bytearray()

    def feed(self, data: bytes) -> list[N0Record]:
        """Feed raw bytes, return any complete decoded records."""
        self._buf.extend(data)
        results: list[N0Record] = []

        while len(self._buf) >= N0_SIZE:
            if self._buf[0] != N0_MARKER[0]:
                pos = self._buf.find(N0_MARKER)
                drop = pos if pos >= 0 else len(self._buf)
                logger.warning("skipping %d bytes without N0 marker", drop)
                self.skipped += drop
                del self._buf[:drop]
                continue
            results.append(decode_n0(bytes(self._buf[:N0_SIZE])))
            del self._buf[:N0_SIZE]

        return results

    def reset(self):
        """Clear internal buffer."""
        self._buf.clear()
