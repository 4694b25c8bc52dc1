"""Test the option cascade.

Run from the repo root:
    python3 tests/test_options.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import io
import math
import shutil
import tempfile

from navtool.options import GlobalOptions
from navtool.pool import ChannelPool
from navtool.resolver import SpecResolver


def test_get_value():
    print("test_get_value...", end="")

    get = GlobalOptions.get_value
    assert get("--out=foo.bin", "out", False) == "foo.bin"
    assert get("--out=", "out", False) == ""
    assert get("--out", "out", False) is None
    assert get("--out_N_packet", "out_N_packet") == "true"
    assert get("--out_N_packet=off", "out_N_packet") == "off"
    assert get("--out_N_packet", "out", False) is None
    assert get("-out=x", "out") is None
    assert get("input.csv", "out") is None

    assert GlobalOptions.is_true("on")
    assert GlobalOptions.is_true("true")
    assert not GlobalOptions.is_true("off")
    assert not GlobalOptions.is_true("1")

    print(" OK")


def test_defaults():
    print("test_defaults...", end="")

    opts = GlobalOptions()
    assert opts.start_gpstime == 0
    assert opts.end_gpstime == math.inf
    assert not opts.out_is_n_packet
    assert opts.out_spec == "-"
    assert opts.is_time_in_range(1e9)

    print(" OK")


def test_time_window():
    print("test_time_window...", end="")

    opts = GlobalOptions()
    assert opts.check_spec("--start-gpst=1800:100.5")
    assert opts.start_gpswn == 1800
    assert opts.start_gpstime == 100.5
    assert opts.check_spec("--end-gpst=200")
    assert opts.end_gpstime == 200.0
    assert opts.end_gpswn == 0
    assert opts.check_spec("--end-gpswn=1801")
    assert opts.end_gpswn == 1801
    assert opts.check_spec("--start-gpswn=1799")
    assert opts.start_gpswn == 1799

    assert not opts.is_time_in_range(100.4)
    assert opts.is_time_in_range(100.5)
    assert opts.is_time_in_range(200.0)
    assert not opts.is_time_in_range(200.1)

    try:
        opts.check_spec("--end-gpst=soon")
    except ValueError:
        pass
    else:
        raise AssertionError("malformed time accepted")

    print(" OK")


def test_flags_and_unknown():
    print("test_flags_and_unknown...", end="")

    opts = GlobalOptions()
    assert opts.check_spec("--out_N_packet")
    assert opts.out_is_n_packet
    assert opts.check_spec("--out_N_packet=off")
    assert not opts.out_is_n_packet
    assert opts.check_spec("--out_N_packet=on")
    assert opts.out_is_n_packet

    assert not opts.check_spec("--use_magnet")
    assert not opts.check_spec("log.csv")

    print(" OK")


def test_out_resolves_channel():
    print("test_out_resolves_channel...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        path = os.path.join(tmpdir, "n0.bin")
        with ChannelPool() as pool:
            resolver = SpecResolver(pool, stdout=io.BytesIO())
            opts = GlobalOptions()
            assert opts.check_spec(f"--out={path}", resolver)
            assert opts.out_spec == path
            assert opts.out is resolver.resolve_output(path)
            assert path in pool

            # without a resolver only the specifier is recorded
            opts2 = GlobalOptions()
            assert opts2.check_spec("--out=-")
            assert opts2.out is None

            try:
                opts2.check_spec("--out=", resolver)
            except ValueError:
                pass
            else:
                raise AssertionError("empty --out accepted")
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_out_force_file():
    """With force_file, --out=- names a file rather than stdout."""
    print("test_out_force_file...", end="")

    tmpdir = tempfile.mkdtemp()
    cwd = os.getcwd()
    stdout = io.BytesIO()
    try:
        os.chdir(tmpdir)
        with ChannelPool() as pool:
            resolver = SpecResolver(pool, stdout=stdout)
            opts = GlobalOptions()
            assert opts.check_spec("--out=-", resolver, force_file=True)
            assert "-" in pool
            opts.out.write(b"x")
        assert stdout.getvalue() == b""
        with open(os.path.join(tmpdir, "-"), "rb") as f:
            assert f.read() == b"x"
    finally:
        os.chdir(cwd)
        shutil.rmtree(tmpdir)

    print(" OK")


if __name__ == "__main__":
    print("navtool option tests")
    print("====================\n")

    test_get_value()
    test_defaults()
    test_time_window()
    test_flags_and_unknown()
    test_out_resolves_channel()
    test_out_force_file()

    print("\nAll tests passed.")
