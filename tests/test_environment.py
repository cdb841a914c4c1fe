from unittest import mock

import pytest

from lrzkit.environment import (
    SetupError,
    clean_passphrase,
    compress_output_name,
    decompress_output_name,
    get_ram,
    temp_dir,
)


def test_temp_dir_default():
    assert temp_dir({}) == "/tmp/"


def test_temp_dir_adds_slash():
    assert temp_dir({"TMP": "/var/scratch"}) == "/var/scratch/"


def test_temp_dir_keeps_existing_slash():
    assert temp_dir({"TEMP": "/data/"}) == "/data/"


def test_temp_dir_precedence():
    environ = {"TEMP": "/d", "TEMPDIR": "/c", "TMP": "/b", "TMPDIR": "/a"}
    assert temp_dir(environ) == "/a/"
    del environ["TMPDIR"]
    assert temp_dir(environ) == "/b/"
    del environ["TMP"]
    assert temp_dir(environ) == "/c/"
    del environ["TEMPDIR"]
    assert temp_dir(environ) == "/d/"


def test_compress_name_appends_suffix():
    assert compress_output_name("dir/file.txt", None, None, ".lrz") == "dir/file.txt.lrz"


def test_compress_name_with_outdir_strips_path():
    assert compress_output_name("a/b/file.txt", None, "out/", ".lrz") == "out/file.txt.lrz"


def test_compress_name_uses_outname():
    assert compress_output_name("file", "chosen.lrz", "out/", ".lrz") == "chosen.lrz"


def test_compress_name_same_as_input():
    with pytest.raises(SetupError):
        compress_output_name("file.lrz", "file.lrz", None, ".lrz")


def test_decompress_name_strips_suffix():
    assert decompress_output_name("dir/file.txt.lrz", None, None, ".lrz") == "dir/file.txt"


def test_decompress_name_with_outdir():
    assert decompress_output_name("x/y/data.lrz", None, "out/", ".lrz") == "out/data"


def test_decompress_name_uses_outname():
    assert decompress_output_name("data.lrz", "restored", None, ".lrz") == "restored"


def test_decompress_round_trips_compress_name():
    archive = compress_output_name("notes.txt", None, None, ".lrz")
    assert decompress_output_name(archive, None, None, ".lrz") == "notes.txt"


@pytest.mark.parametrize("entered", ["secret\n", "secret\r\n", "secret\r", "secret"])
def test_clean_passphrase(entered):
    assert clean_passphrase(entered) == "secret"


@pytest.mark.parametrize("entered", ["", "\n", "\r\n"])
def test_clean_passphrase_empty(entered):
    with pytest.raises(SetupError):
        clean_passphrase(entered)


def test_get_ram_positive():
    assert get_ram() > 0


def test_get_ram_falls_back_to_meminfo():
    with mock.patch("os.sysconf", side_effect=ValueError, create=True), mock.patch(
        "builtins.open", mock.mock_open(read_data="MemFree: 10 kB\nMemTotal: 2048 kB\n")
    ):
        assert get_ram() == 2048 * 1024


def test_get_ram_fails_without_memtotal():
    with mock.patch("os.sysconf", side_effect=ValueError, create=True), mock.patch(
        "builtins.open", mock.mock_open(read_data="MemFree: 10 kB\n")
    ):
        with pytest.raises(SetupError):
            get_ram()