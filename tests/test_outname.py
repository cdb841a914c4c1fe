import pathlib

import pytest

from lrzkit.outname import strip_short_extension


@pytest.mark.parametrize(
    "path, expected",
    [
        ("archive.lrz", "archive"),
        ("data.tar.lrz", "data.tar"),
        ("dir/file.gz", "dir/file"),
        ("a.", "a"),
    ],
)
def test_strips_short_extension(path, expected):
    assert strip_short_extension(path) == expected


@pytest.mark.parametrize("path", ["file.long", "noext", "dir.v1/file", "x.abcd"])
def test_keeps_long_or_missing_extension(path):
    assert strip_short_extension(path) == path


def test_accepts_path_objects():
    assert strip_short_extension(pathlib.PurePosixPath("archive.lrz")) == "archive"


def test_result_is_prefix():
    for path in ["a.b.c", "x.lrz", "plain"]:
        result = strip_short_extension(path)
        assert path.startswith(result)