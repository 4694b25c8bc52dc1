#!/usr/bin/env python3
"""Print N0 packets arriving on a serial port.

Usage:
    python examples/serial_dump.py /dev/ttyUSB0:115200
"""

import sys

from navtool.packet import N0StreamDecoder
from navtool.pool import ChannelPool
from navtool.resolver import ResolveError, SpecResolver

spec = sys.argv[1] if len(sys.argv) > 1 else "/dev/ttyUSB0:115200"

with ChannelPool() as pool:
    try:
        port = SpecResolver(pool).resolve_input(spec)
    except ResolveError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    decoder = N0StreamDecoder()
    try:
        while True:
            data = port.read(64)
            if not data:
                continue
            for rec in decoder.feed(data):
                print(f"{rec.itow:10.3f} lat={rec.latitude:.7f} "
                      f"lng={rec.longitude:.7f} h={rec.height:.2f} "
                      f"yaw={rec.heading:.2f}")
    except KeyboardInterrupt:
        pass
