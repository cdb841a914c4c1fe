"""Walk the chunk and stream structure of an lrzip archive."""

from __future__ import annotations

import enum
import os
import stat
from dataclasses import dataclass, field
from typing import BinaryIO

from .magic import FilterType, MagicError, MagicHeader, read_magic

NUM_STREAMS = 2


class ArchiveError(ValueError):
    """Raised when an archive is missing, unreadable or corrupt."""


class CompressionType(enum.IntEnum):
    """Back-end compression recorded in each block header."""

    NONE = 3
    BZIP2 = 4
    LZO = 5
    LZMA = 6
    GZIP = 7
    ZPAQ = 8

    @property
    def label(self) -> str:
        return self.name.lower()


def percentage(num: int, den: int) -> float:
    """Percentage of num in den, guarding small and zero denominators."""
    if den < 100:
        return (num * 100) / (den or 1)
    return num / (den // 100)


@dataclass(frozen=True)
class BlockInfo:
    """One compressed block of a stream."""

    number: int
    ctype: CompressionType
    compressed_size: int
    uncompressed_size: int
    offset: int
    next_head: int

    @property
    def percent(self) -> float:
        return percentage(self.compressed_size, self.uncompressed_size)


@dataclass
class StreamInfo:
    """The blocks of one stream within a chunk."""

    index: int
    offset: int
    blocks: list[BlockInfo] = field(default_factory=list)


@dataclass
class ChunkInfo:
    """One rzip chunk and its streams."""

    number: int
    chunk_bytes: int
    size: int
    eof: bool
    streams: list[StreamInfo] = field(default_factory=list)


def _lzma_props(props: bytes):
    if len(props) < 5:
        return None
    d = props[0]
    dic_size = max(int.from_bytes(props[1:5], "little"), 1 << 12)
    if d >= 9 * 5 * 5:
        return None
    lc = d % 9
    d //= 9
    return lc, d % 5, d // 5, dic_size


@dataclass
class ArchiveInfo:
    """Everything that can be learnt about an archive without decompressing it."""

    path: str
    header: MagicHeader
    file_size: int
    chunks: list[ChunkInfo] = field(default_factory=list)
    checksum: bytes | None = None

    @property
    def expected_size(self) -> int:
        return self.header.expected_size

    def _blocks(self):
        for chunk in self.chunks:
            for stream in chunk.streams:
                yield from stream.blocks

    @property
    def rzip_total(self) -> int:
        return sum(block.uncompressed_size for block in self._blocks())

    @property
    def backend_total(self) -> int:
        return sum(block.compressed_size for block in self._blocks())

    @property
    def compression_type(self) -> CompressionType | None:
        return next((block.ctype for block in self._blocks()), None)

    def compression_ratio(self) -> float | None:
        """Decompressed size over archive size, or None when the size is unknown."""
        if not self.expected_size or not self.file_size:
            return None
        return self.expected_size / self.file_size

    def bits_per_byte(self) -> float | None:
        """Archive bits per decompressed byte, or None when the size is unknown."""
        if not self.expected_size:
            return None
        return self.file_size / self.expected_size * 8

    def _method_line(self) -> str:
        ctype = self.compression_type
        if ctype is None:
            return "unknown"
        if ctype == CompressionType.NONE:
            return "rzip alone"
        if ctype == CompressionType.LZMA:
            props = _lzma_props(self.header.lzma_properties)
            if props is None:
                return "rzip + lzma -- Corrupt LZMA Properties"
            lc, lp, pb, dic_size = props
            return (
                f"rzip + lzma -- lc = {lc}, lp = {lp}, pb = {pb}, "
                f"Dictionary Size = {dic_size:,}"
            )
        if ctype == CompressionType.ZPAQ:
            level, block = self.header.zpaq_level, self.header.zpaq_block_size
            if level:
                return (
                    f"rzip + zpaq -- Compression Level = {level}, "
                    f"Block Size = {block}, {1 << block:,}MB"
                )
            return "rzip + zpaq"
        return f"rzip + {ctype.label}"

    def summary(self) -> str:
        """Human-readable report of the archive."""
        header = self.header
        expected = self.expected_size
        utotal, ctotal = self.rzip_total, self.backend_total
        lines = [
            "Summary",
            "=======",
            f"File: {self.path}",
            f"lrzip-next version: {header.major_version}.{header.minor_version} file",
        ]
        if header.comment:
            lines.append(f"Archive Comment: {header.comment.decode('utf-8', 'replace')}")
        lines.append(f"Compression Method: {self._method_line()}")
        if header.compression_level:
            lines.append(
                f"Rzip Compression Level: {header.rzip_compression_level}, "
                f"Lrzip-next Compression Level: {header.compression_level}"
            )
        if header.filter_used:
            text = f"Filter Used: {header.filter_type.label}"
            if header.filter_type == FilterType.DELTA:
                text += f", offset - {header.delta:,}"
            lines.append(text)
        lines.append("")
        if not expected:
            lines.append(
                "Due to using Compression to STDOUT, expected decompression size not available"
            )
        lines.append("  Stats         Percent       Compressed /   Uncompressed")
        lines.append("  -------------------------------------------------------")
        backend = (
            f"  Back end:     {percentage(ctotal, utotal):5.1f}%\t{ctotal:16,} / {utotal:14,}"
        )
        if expected:
            lines.append(
                f"  Rzip:         {percentage(utotal, expected):5.1f}%\t{utotal:16,} / {expected:14,}"
            )
            lines.append(backend)
            lines.append(
                f"  Overall:      {percentage(ctotal, expected):5.1f}%\t{ctotal:16,} / {expected:14,}"
            )
            lines.append("")
            lines.append(f"  Decompressed file size: {expected:14,}")
            lines.append(f"  Compressed file size:   {self.file_size:14,}")
            lines.append(
                f"  Compression ratio:      {self.compression_ratio():14.3f}x, "
                f"bpb: {self.bits_per_byte():.3f}"
            )
        else:
            lines.append("  Rzip:         Unavailable")
            lines.append(backend)
            lines.append("  Overall:      Unavailable")
            lines.append("")
            lines.append("  Decompressed file size:    Unavailable")
            lines.append(f"  Compressed file size:   {self.file_size:14,}")
            lines.append("  Compression ratio:         Unavailable")
        lines.append("")
        if header.hashed and self.checksum is not None:
            lines.append(f"  Checksum: {self.checksum.hex()}")
        else:
            lines.append("  CRC32 used for integrity testing")
        return "\n".join(lines) + "\n"


class _Reader:
    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def read(self, count: int, what: str) -> bytes:
        data = self._stream.read(count)
        if len(data) != count:
            raise ArchiveError(f"Failed to read {what}")
        return data

    def number(self, width: int, what: str) -> int:
        value = int.from_bytes(self.read(width, what), "little")
        if value >= 1 << 63:
            value -= 1 << 64
        return value

    def chunk_header(self) -> tuple[int, bool, int]:
        chunk_bytes = self.read(1, "chunk_byte")[0]
        if not 1 <= chunk_bytes <= 8:
            raise ArchiveError(f"Invalid chunk bytes {chunk_bytes}")
        eof = bool(self.read(1, "eof")[0])
        size = self.number(chunk_bytes, "chunk_size")
        if size < 0:
            raise ArchiveError(f"Invalid chunk size {size:,}")
        return chunk_bytes, eof, size

    def block_header(self, width: int) -> tuple[int, int, int, int]:
        ctype = self.read(1, "block header")[0]
        c_len = self.number(width, "block header")
        u_len = self.number(width, "block header")
        last_head = self.number(width, "block header")
        return ctype, c_len, u_len, last_head


def _walk(stream: BinaryIO, path: str, file_size: int, hash_length: int) -> ArchiveInfo:
    try:
        header = read_magic(stream)
    except MagicError as exc:
        raise ArchiveError(str(exc)) from exc
    if header.major_version != 0:
        raise ArchiveError(
            f"lrzip version {header.major_version}.{header.minor_version} archive is not supported"
        )
    if header.encrypted:
        raise ArchiveError("Cannot show info for encrypted archives")

    info = ArchiveInfo(path=path, header=header, file_size=file_size)
    reader = _Reader(stream)
    chunk_bytes, eof, chunk_size = reader.chunk_header()
    ofs = stream.tell()

    while True:
        if chunk_bytes > 8 or chunk_size <= 0:
            raise ArchiveError("Invalid chunk data")
        header_length = 1 + chunk_bytes * 3
        chunk = ChunkInfo(len(info.chunks) + 1, chunk_bytes, chunk_size, eof)
        c_len = 0
        for index in range(NUM_STREAMS):
            stream_ofs = ofs + index * header_length
            stream.seek(stream_ofs)
            _, c_len, u_len, last_head = reader.block_header(chunk_bytes)
            stream_info = StreamInfo(index, stream_ofs)
            second_last = 0
            while True:
                if last_head and last_head <= second_last:
                    raise ArchiveError("Invalid earlier last_head position, corrupt archive")
                second_last = last_head
                head_off = last_head + ofs
                if head_off > file_size:
                    raise ArchiveError(
                        "Offset greater than archive size, likely corrupted/truncated archive"
                    )
                stream.seek(head_off)
                code, c_len, u_len, last_head = reader.block_header(chunk_bytes)
                if last_head < 0 or c_len < 0 or u_len < 0:
                    raise ArchiveError("Entry negative, likely corrupted archive")
                try:
                    ctype = CompressionType(code)
                except ValueError:
                    raise ArchiveError(f"Unknown Compression Type: {code}") from None
                stream_info.blocks.append(
                    BlockInfo(len(stream_info.blocks) + 1, ctype, c_len, u_len, head_off, last_head)
                )
                if not last_head:
                    break
            chunk.streams.append(stream_info)
        info.chunks.append(chunk)

        ofs = stream.tell() + c_len
        if ofs >= file_size - hash_length:
            break
        stream.seek(ofs)
        chunk_bytes, eof, chunk_size = reader.chunk_header()
        ofs += 2 + chunk_bytes

    if ofs > file_size:
        raise ArchiveError("Offset greater than archive size, likely corrupted/truncated archive")

    if header.hashed and hash_length > 0:
        if hash_length > file_size:
            raise ArchiveError("Failed to seek to hash data")
        stream.seek(file_size - hash_length)
        info.checksum = reader.read(hash_length, "hash data")
    return info


def read_archive_info(path, hash_length: int) -> ArchiveInfo:
    """Read the structure of the archive at path.

    hash_length is the size of the checksum stored at the end of hashed
    archives.
    """
    path = os.fspath(path)
    try:
        st = os.stat(path)
    except OSError as exc:
        raise ArchiveError(f"File {path} not found") from exc
    if not stat.S_ISREG(st.st_mode):
        raise ArchiveError(f"File {path} is not a regular file")
    with open(path, "rb") as stream:
        return _walk(stream, path, st.st_size, hash_length)