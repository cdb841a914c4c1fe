"""Set-up helpers: temporary directory, output names, passphrases and RAM."""

from __future__ import annotations

import os
from collections.abc import Mapping

DEFAULT_TMPDIR = "/tmp"
TMPDIR_VARIABLES = ("TMPDIR", "TMP", "TEMPDIR", "TEMP")
MEMINFO = "/proc/meminfo"


class SetupError(RuntimeError):
    """Raised when an operation cannot be prepared."""


def temp_dir(environ: Mapping[str, str] | None = None) -> str:
    """Directory for temporary files, always ending in a slash."""
    if environ is None:
        environ = os.environ
    directory = next(
        (environ[name] for name in TMPDIR_VARIABLES if name in environ), DEFAULT_TMPDIR
    )
    if not directory.endswith("/"):
        directory += "/"
    return directory


def _base_name(infile: str, outdir: str | None) -> str:
    if outdir and "/" in infile:
        return infile.rsplit("/", 1)[1]
    return infile


def compress_output_name(
    infile: str, outname: str | None, outdir: str | None, suffix: str
) -> str:
    """Name of the archive written when compressing infile."""
    if outname:
        outfile = outname
    else:
        outfile = (outdir or "") + _base_name(infile, outdir) + suffix
    if outfile == infile:
        raise SetupError(f"Input and Output files are the same. {infile}. Exiting")
    return outfile


def decompress_output_name(
    infile: str, outname: str | None, outdir: str | None, suffix: str
) -> str:
    """Name of the file written when decompressing infile."""
    if outname:
        outfile = outname
    else:
        base = _base_name(infile, outdir)
        dot = base.rfind(".")
        if dot != -1 and base[dot:] == suffix:
            base = base[:dot]
        outfile = (outdir or "") + base
    if outfile == infile:
        raise SetupError("Output and Input files are the same...Cannot continue")
    return outfile


def clean_passphrase(text: str) -> str:
    """Strip a trailing line ending from an entered passphrase."""
    if len(text) > 1 and text[-2] in "\r\n":
        text = text[:-2]
    elif text and text[-1] in "\r\n":
        text = text[:-1]
    if not text:
        raise SetupError("Empty passphrase")
    return text


def _sysconf_ram() -> int:
    sysconf = getattr(os, "sysconf", None)
    if sysconf is None:
        return 0
    try:
        return int(sysconf("SC_PHYS_PAGES")) * int(sysconf("SC_PAGE_SIZE"))
    except (ValueError, OSError):
        return 0


def _meminfo_ram() -> int:
    try:
        with open(MEMINFO) as meminfo:
            for line in meminfo:
                if line.startswith("MemTotal:"):
                    fields = line.split()
                    try:
                        return int(fields[1]) * 1024
                    except (IndexError, ValueError):
                        return 0
    except OSError as exc:
        raise SetupError(f"Failed to open {MEMINFO}") from exc
    return 0


def get_ram() -> int:
    """Physical memory in bytes."""
    ramsize = _sysconf_ram()
    if ramsize <= 0:
        ramsize = _meminfo_ram()
    if ramsize <= 0:
        raise SetupError("No memory or can't determine ram? Can't continue.")
    return ramsize