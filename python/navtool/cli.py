"""navtool command-line tool."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterator

import numpy as np

from .channel import Channel
from .nav import NAV_LABELS, format_nav, parse_nav
from .options import GlobalOptions
from .packet import N0StreamDecoder, encode_n0, n0_array
from .pool import ChannelPool
from .resolver import STD_SPEC, ResolveError, SpecResolver

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096


def _iter_lines(channel: Channel) -> Iterator[str]:
    """Yield decoded text lines from a channel until it is exhausted."""
    buf = bytearray()
    while True:
        data = channel.read(CHUNK_SIZE)
        if not data:
            break
        buf.extend(data)
        while True:
            pos = buf.find(b"\n")
            if pos < 0:
                break
            line = bytes(buf[:pos])
            del buf[:pos + 1]
            yield line.decode("utf-8", errors="replace").rstrip("\r")
    if buf:
        yield bytes(buf).decode("utf-8", errors="replace").rstrip("\r")


def _parse_options(parser: argparse.ArgumentParser,
                   extras: list[str]) -> GlobalOptions:
    """Run the option cascade without opening anything."""
    options = GlobalOptions()
    for arg in extras:
        try:
            recognised = options.check_spec(arg)
        except ValueError as e:
            parser.error(f"{arg}: {e}")
        if not recognised:
            parser.error(f"unrecognized option: {arg}")
    return options


def _is_file_spec(spec: str, resolver: SpecResolver, force_file: bool) -> bool:
    if force_file:
        return True
    return spec != STD_SPEC and not spec.startswith(resolver.serial_prefix)


def cmd_encode(args: argparse.Namespace, extras: list[str],
               parser: argparse.ArgumentParser, resolver: SpecResolver) -> None:
    """Convert text navigation rows into N0 packets or normalised rows."""
    options = _parse_options(parser, extras)
    if (options.out_spec == args.input
            and _is_file_spec(args.input, resolver, args.force_file)):
        parser.error(f"input and --out are the same file: {args.input}")

    src = resolver.resolve_input(args.input, args.force_file)
    out = resolver.resolve_output(options.out_spec, args.force_file)
    options.out = out

    if not options.out_is_n_packet:
        out.write((", ".join(["itow"] + NAV_LABELS) + "\n").encode())

    written = 0
    for lineno, line in enumerate(_iter_lines(src), 1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        try:
            itow, nav = parse_nav(text.split(","))
        except ValueError:
            logger.debug("line %d skipped: %s", lineno, text)
            continue
        if not options.is_time_in_range(itow):
            continue
        if options.out_is_n_packet:
            out.write(encode_n0(itow, nav))
        else:
            out.write((format_nav(nav, itow) + "\n").encode())
        written += 1
    out.flush()
    logger.info("encoded %d records", written)


def cmd_dump(args: argparse.Namespace, resolver: SpecResolver) -> None:
    """Decode an N0 stream and print it as text rows."""
    src = resolver.resolve_input(args.input, args.force_file)
    decoder = N0StreamDecoder()
    print(", ".join(["itow"] + NAV_LABELS[:-1]))
    while True:
        data = src.read(CHUNK_SIZE)
        if not data:
            break
        for record in decoder.feed(data):
            print(format_nav(record.to_nav(), record.itow, azimuth=False))
    if decoder.skipped:
        logger.warning("%d bytes skipped while resynchronising", decoder.skipped)


def cmd_info(args: argparse.Namespace, resolver: SpecResolver) -> None:
    """Print summary info about an N0 log."""
    src = resolver.resolve_input(args.input, args.force_file)
    chunks = []
    while True:
        data = src.read(1 << 16)
        if not data:
            break
        chunks.append(data)
    raw = b"".join(chunks)
    packets = n0_array(raw)

    print(f"Input:      {args.input}")
    print(f"Size:       {len(raw):,} bytes")
    print(f"Packets:    {len(packets):,}")
    bad = int(np.count_nonzero(packets["marker"] != b"N")) if len(packets) else 0
    if bad:
        print(f"Bad marker: {bad:,}")
    if len(packets):
        itow = packets["itow"] / 1000.0
        print(f"Time range: {itow.min():.3f}s - {itow.max():.3f}s")
    else:
        print("Time range: (empty)")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="navtool", description="navigation stream tool",
        epilog="Stream specifiers: '-' for stdin/stdout, a serial device "
               "(e.g. /dev/ttyUSB0:115200), or a file path.")
    parser.add_argument("--force-file", action="store_true",
                        help="Treat every specifier as a file path")
    sub = parser.add_subparsers(dest="command")

    # encode
    p_encode = sub.add_parser(
        "encode", help="Convert text navigation rows",
        description="Extra options: --out=SPEC, --out_N_packet[=on|off], "
                    "--start-gpst=[WN:]TOW, --end-gpst=[WN:]TOW, "
                    "--start-gpswn=WN, --end-gpswn=WN")
    p_encode.add_argument("input", help="Input stream specifier")

    # dump
    p_dump = sub.add_parser("dump", help="Print an N0 packet stream as text")
    p_dump.add_argument("input", help="Input stream specifier")

    # info
    p_info = sub.add_parser("info", help="Show summary info about an N0 log")
    p_info.add_argument("input", help="Input stream specifier")

    args, extras = parser.parse_known_args(argv)
    if extras and args.command != "encode":
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    if args.command is None:
        parser.print_help()
        return

    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    with ChannelPool() as pool:
        resolver = SpecResolver(pool)
        try:
            if args.command == "encode":
                cmd_encode(args, extras, parser, resolver)
            elif args.command == "dump":
                cmd_dump(args, resolver)
            elif args.command == "info":
                cmd_info(args, resolver)
        except ResolveError as e:
            logger.error("%s", e)
            sys.exit(1)


if __name__ == "__main__":
    main()
