"""End-to-end tests for the navtool command-line tool.

Run from the repo root:
    python3 tests/test_cli.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import contextlib
import io
import shutil
import struct
import tempfile

from navtool.cli import main
from navtool.packet import N0_SIZE, decode_n0

ROWS = """\
# itow, longitude, latitude, height, v_north, v_east, v_down, yaw, pitch, roll, azimuth
100.0, 139.5, 35.25, 10.0, 1.0, 0.0, 0.0, 45.0, 0.0, 0.0, 0.0
101.0, 139.5, 35.25, 11.0, 1.5, 0.5, -0.25, 90.0, 1.0, -1.0, 0.0
not, a, row
102.0, 139.5, 35.25, 12.0, 2.0, 0.0, 0.0, 180.0, 0.0, 0.0
"""


def run(argv):
    """Run main() capturing stdout; returns (exit_code, stdout)."""
    out = io.StringIO()
    code = 0
    with contextlib.redirect_stdout(out):
        try:
            main(argv)
        except SystemExit as e:
            code = e.code
    return code, out.getvalue()


def test_encode_n0_then_dump():
    print("test_encode_n0_then_dump...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        src = os.path.join(tmpdir, "nav.csv")
        dst = os.path.join(tmpdir, "nav.n0")
        with open(src, "w") as f:
            f.write(ROWS)

        code, _ = run(["encode", src, f"--out={dst}", "--out_N_packet"])
        assert code == 0

        with open(dst, "rb") as f:
            data = f.read()
        assert len(data) == 3 * N0_SIZE
        first = decode_n0(data)
        assert first.itow == 100.0
        assert first.heading == 45.0
        assert struct.unpack_from("<i", data, 16)[0] == 100000

        code, text = run(["dump", dst])
        assert code == 0
        lines = text.strip().splitlines()
        assert lines[0].startswith("itow, longitude")
        assert len(lines) == 4
        assert lines[1].startswith("100, ")

        code, text = run(["info", dst])
        assert code == 0
        assert "Packets:    3" in text
        assert "100.000s - 102.000s" in text
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_encode_time_window_text():
    print("test_encode_time_window_text...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        src = os.path.join(tmpdir, "nav.csv")
        dst = os.path.join(tmpdir, "nav.txt")
        with open(src, "w") as f:
            f.write(ROWS)

        code, _ = run(["encode", src, f"--out={dst}",
                       "--start-gpst=2000:100.5", "--end-gpst=101.5"])
        assert code == 0

        with open(dst) as f:
            lines = f.read().strip().splitlines()
        assert lines[0].startswith("itow, longitude")
        assert len(lines) == 2
        assert lines[1].split(", ")[0] == "101"
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_missing_input_exits_1():
    print("test_missing_input_exits_1...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        code, _ = run(["dump", os.path.join(tmpdir, "missing.n0")])
        assert code == 1
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_bad_option_exits_2():
    print("test_bad_option_exits_2...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        src = os.path.join(tmpdir, "nav.csv")
        with open(src, "w") as f:
            f.write(ROWS)
        with contextlib.redirect_stderr(io.StringIO()):
            code, _ = run(["encode", src, "--no-such-option"])
            assert code == 2
            code, _ = run(["encode", src, "--end-gpst=later"])
            assert code == 2
            code, _ = run(["dump", src, "--out_N_packet"])
            assert code == 2
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_force_file_output():
    """--force-file makes --out=- a file named '-'."""
    print("test_force_file_output...", end="")

    tmpdir = tempfile.mkdtemp()
    cwd = os.getcwd()
    try:
        os.chdir(tmpdir)
        with open("nav.csv", "w") as f:
            f.write(ROWS)

        code, text = run(["--force-file", "encode", "nav.csv", "--out=-",
                          "--out_N_packet"])
        assert code == 0
        assert text == ""
        assert os.path.getsize(os.path.join(tmpdir, "-")) == 3 * N0_SIZE
    finally:
        os.chdir(cwd)
        shutil.rmtree(tmpdir)

    print(" OK")


def test_same_input_and_output_rejected():
    """Encoding a file onto itself is a usage error and leaves it intact."""
    print("test_same_input_and_output_rejected...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        src = os.path.join(tmpdir, "nav.csv")
        with open(src, "w") as f:
            f.write(ROWS)

        with contextlib.redirect_stderr(io.StringIO()) as err:
            code, _ = run(["encode", src, f"--out={src}"])
        assert code == 2
        assert "same file" in err.getvalue()
        with open(src) as f:
            assert f.read() == ROWS
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_missing_input_creates_no_output():
    print("test_missing_input_creates_no_output...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        dst = os.path.join(tmpdir, "out.n0")
        code, _ = run(["encode", os.path.join(tmpdir, "missing.csv"),
                       f"--out={dst}"])
        assert code == 1
        assert not os.path.exists(dst)
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


if __name__ == "__main__":
    print("navtool CLI tests")
    print("=================\n")

    test_encode_n0_then_dump()
    test_encode_time_window_text()
    test_missing_input_exits_1()
    test_bad_option_exits_2()
    test_force_file_output()
    test_same_input_and_output_rejected()
    test_missing_input_creates_no_output()

    print("\nAll tests passed.")
