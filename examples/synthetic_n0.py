#!/usr/bin/env python3
"""Generate a synthetic circular trajectory as N0 packets.

Writes one packet per 0.1 s to any stream specifier (file, '-', or a serial
port such as /dev/ttyUSB0:115200).

Usage:
    python examples/synthetic_n0.py /tmp/circle.n0
    navtool dump /tmp/circle.n0
"""

import math
import sys

from navtool.nav import NavSolution
from navtool.packet import encode_n0
from navtool.pool import ChannelPool
from navtool.resolver import SpecResolver
from navtool.units import deg2rad

RADIUS_M = 50.0
SPEED_MS = 5.0
ORIGIN_LAT, ORIGIN_LNG = 35.0, 139.0
EARTH_R = 6378137.0

spec = sys.argv[1] if len(sys.argv) > 1 else "-"

with ChannelPool() as pool:
    out = SpecResolver(pool).resolve_output(spec)
    omega = SPEED_MS / RADIUS_M
    for i in range(600):
        t = 100.0 + i * 0.1
        theta = omega * (t - 100.0)
        north = RADIUS_M * math.sin(theta)
        east = RADIUS_M * (1 - math.cos(theta))
        nav = NavSolution(
            latitude=deg2rad(ORIGIN_LAT) + north / EARTH_R,
            longitude=deg2rad(ORIGIN_LNG)
            + east / (EARTH_R * math.cos(deg2rad(ORIGIN_LAT))),
            height=20.0 + math.sin(theta),
            v_north=SPEED_MS * math.cos(theta),
            v_east=SPEED_MS * math.sin(theta),
            heading=theta % (2 * math.pi),
            roll=deg2rad(10.0),
        )
        out.write(encode_n0(t, nav))
