import struct

from fargodisk.byteswap import main, swap_doubles, swap_file


def test_little_endian_becomes_big_endian():
    values = (1.5, -2.25, 1e300)
    little = struct.pack("<3d", *values)
    assert swap_doubles(little) == struct.pack(">3d", *values)


def test_swap_is_an_involution():
    data = bytes(range(40))
    assert swap_doubles(swap_doubles(data)) == data


def test_trailing_bytes_untouched():
    data = bytes(range(11))
    swapped = swap_doubles(data)
    assert swapped[:8] == bytes(range(7, -1, -1))
    assert swapped[8:] == bytes([8, 9, 10])


def test_short_input_unchanged():
    assert swap_doubles(b"abc") == b"abc"


def test_swap_file_in_place(tmp_path):
    path = tmp_path / "field.dat"
    path.write_bytes(struct.pack("<2d", 3.0, 4.0))
    swap_file(path)
    assert struct.unpack(">2d", path.read_bytes()) == (3.0, 4.0)


def test_main_swaps_file(tmp_path):
    path = tmp_path / "gasdens0.dat"
    path.write_bytes(struct.pack(">d", 7.5))
    assert main([str(path)]) == 0
    assert struct.unpack("<d", path.read_bytes()) == (7.5,)


def test_main_usage_error():
    assert main([]) == 1
    assert main(["a", "b"]) == 1


def test_main_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.dat")]) == 1