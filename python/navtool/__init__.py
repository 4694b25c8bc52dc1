"""navtool - navigation stream resolution and N0 packet encoding."""

from .channel import Channel, Direction, FileChannel, SerialChannel, StdChannel
from .nav import NavigationState, NavSolution, format_nav, parse_nav
from .options import GlobalOptions
from .packet import N0Record, N0StreamDecoder, decode_n0, encode_n0, n0_array
from .pool import ChannelPool
from .resolver import (
    SpecResolver, ResolveError, UnsupportedBaudrateError, InputNotFoundError,
)

__all__ = [
    "Channel", "Direction", "FileChannel", "SerialChannel", "StdChannel",
    "NavigationState", "NavSolution", "format_nav", "parse_nav",
    "GlobalOptions",
    "N0Record", "N0StreamDecoder", "decode_n0", "encode_n0", "n0_array",
    "ChannelPool",
    "SpecResolver", "ResolveError", "UnsupportedBaudrateError",
    "InputNotFoundError",
]
