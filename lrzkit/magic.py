"""The magic header at the start of an lrzip archive."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO

SIGNATURE = b"LRZI"
MAGIC_LEN = 20
MAGIC_V8_LEN = 18
OLD_MAGIC_LEN = 24
MAGIC_HEADER = 6
SALT_LEN = 8

LZMA_LC_LP_PB = 0x5D
FILTER_MASK = 0x07
DELTA_OFFSET_MASK = 0xF8
ZPAQ_FLAG = 0x80
MAX_LZMA2_PROP = 40


class MagicError(ValueError):
    """Raised when a magic header cannot be read or written."""


class FilterType(enum.IntEnum):
    """Pre-compression filter recorded in the header."""

    NONE = 0
    X86 = 1
    ARM = 2
    ARMT = 3
    PPC = 4
    SPARC = 5
    IA64 = 6
    DELTA = 7

    @property
    def label(self) -> str:
        return _FILTER_LABELS[self]


_FILTER_LABELS = {
    FilterType.NONE: "none",
    FilterType.X86: "x86",
    FilterType.ARM: "ARM",
    FilterType.ARMT: "ARMT",
    FilterType.PPC: "PPC",
    FilterType.SPARC: "SPARC",
    FilterType.IA64: "IA64",
    FilterType.DELTA: "Delta",
}


def enc_loops(b1: int, b2: int) -> int:
    """Number of key-stretching loops encoded by two salt bytes."""
    return b2 << b1


def magic_length(major: int, minor: int) -> int:
    """Length of the fixed magic header for an archive version."""
    if major != 0:
        return MAGIC_HEADER
    if minor < 8:
        return OLD_MAGIC_LEN
    if minor == 8:
        return MAGIC_V8_LEN
    return MAGIC_LEN


def _dic_size_from_prop(prop: int) -> int:
    return ((2 | (prop & 1)) << (prop // 2 + 11)) & 0xFFFFFFFF


def _prop_from_dic_size(dic_size: int) -> int:
    for prop in range(MAX_LZMA2_PROP):
        if dic_size <= _dic_size_from_prop(prop):
            return prop
    return MAX_LZMA2_PROP


@dataclass
class MagicHeader:
    """Decoded contents of an archive's magic header."""

    major_version: int = 0
    minor_version: int = 9
    expected_size: int = 0
    hash_code: int = 0
    enc_code: int = 0
    salt: bytes = bytes(SALT_LEN)
    filter_type: FilterType = FilterType.NONE
    delta: int = 1
    dict_size: int = 0
    lzma_properties: bytes = bytes(5)
    zpaq_level: int = 0
    zpaq_block_size: int = 0
    compression_level: int = 0
    rzip_compression_level: int = 0
    comment: bytes = b""

    @property
    def encrypted(self) -> bool:
        return self.enc_code > 0

    @property
    def hashed(self) -> bool:
        return self.hash_code > 0

    @property
    def filter_used(self) -> bool:
        return self.filter_type != FilterType.NONE

    @property
    def encryption_loops(self) -> int:
        if not self.encrypted:
            return 0
        return enc_loops(self.salt[0], self.salt[1])

    @property
    def size(self) -> int:
        """Bytes the header occupies in the archive, comment included."""
        length = magic_length(self.major_version, self.minor_version)
        if self.major_version == 0 and self.minor_version == 9:
            length += len(self.comment)
        return length

    def _filter_byte(self) -> int:
        if not self.filter_used:
            return 0
        value = 0
        if self.delta > 1:
            if self.delta <= 17:
                value = (self.delta - 1) << 3
            else:
                value = (self.delta // 16 + 16 - 1) << 3
        return (value + int(self.filter_type)) & 0xFF

    def _method_byte(self) -> int:
        if self.zpaq_level:
            return (ZPAQ_FLAG + (self.zpaq_level << 4) + self.zpaq_block_size) & 0xFF
        if self.dict_size:
            return _prop_from_dic_size(self.dict_size)
        return 0

    def to_bytes(self) -> bytes:
        """Encode the header in the 0.8 or 0.9 layout, comment included."""
        version = (self.major_version, self.minor_version)
        if version not in ((0, 8), (0, 9)):
            raise MagicError(
                f"Cannot write a version {self.major_version}.{self.minor_version} magic header"
            )
        if version == (0, 8) and self.comment:
            raise MagicError("Version 0.8 headers cannot hold a comment")
        if len(self.comment) > 255:
            raise MagicError("Archive comment is longer than 255 bytes")

        magic = bytearray(magic_length(*version))
        magic[0:4] = SIGNATURE
        magic[4] = self.major_version
        magic[5] = self.minor_version
        if self.encrypted:
            if len(self.salt) != SALT_LEN:
                raise MagicError(f"Salt must be {SALT_LEN} bytes")
            magic[6:14] = self.salt
            magic[15] = self.enc_code
        else:
            magic[6:14] = self.expected_size.to_bytes(8, "little", signed=True)
        if self.hashed:
            magic[14] = self.hash_code
        magic[16] = self._filter_byte()
        magic[17] = self._method_byte()
        if version == (0, 9):
            magic[18] = ((self.rzip_compression_level << 4) + self.compression_level) & 0xFF
            magic[19] = len(self.comment)
            return bytes(magic) + bytes(self.comment)
        return bytes(magic)


def _set_expected_size(header: MagicHeader, magic: bytes) -> None:
    header.expected_size = int.from_bytes(magic[6:14], "little", signed=True)


def _set_hash(header: MagicHeader, code: int) -> None:
    if code > 0:
        header.hash_code = code


def _set_encryption(header: MagicHeader, code: int, salt: bytes) -> None:
    if code > 0:
        header.enc_code = code
        header.salt = bytes(salt)
        header.expected_size = 0


def _set_filter(header: MagicHeader, value: int) -> None:
    if not value:
        return
    header.filter_type = FilterType(value & FILTER_MASK)
    if header.filter_type == FilterType.DELTA:
        stored = (value & DELTA_OFFSET_MASK) >> 3
        header.delta = stored + 1 if stored <= 16 else (stored - 16 + 1) * 16


def _parse_v6(header: MagicHeader, magic: bytes) -> None:
    if not magic[22]:
        _set_expected_size(header, magic)
    if magic[16]:
        header.lzma_properties = magic[16:21]
    _set_hash(header, magic[21])
    _set_encryption(header, magic[22], magic[6:14])


def _parse_v7(header: MagicHeader, magic: bytes) -> None:
    if not magic[23]:
        _set_expected_size(header, magic)
    _set_encryption(header, magic[23], magic[6:14])
    _set_filter(header, magic[16])
    if magic[17]:
        header.lzma_properties = magic[17:22]
    _set_hash(header, magic[22])


def _parse_v8(header: MagicHeader, magic: bytes) -> None:
    if not magic[15]:
        _set_expected_size(header, magic)
    _set_encryption(header, magic[15], magic[6:14])
    _set_filter(header, magic[16])
    method = magic[17]
    if 0 < method <= MAX_LZMA2_PROP:
        header.dict_size = _dic_size_from_prop(method)
        header.lzma_properties = bytes([LZMA_LC_LP_PB]) + header.dict_size.to_bytes(4, "little")
    elif method & ZPAQ_FLAG:
        header.zpaq_block_size = method & 0x0F
        header.zpaq_level = (method & 0x70) >> 4
    _set_hash(header, magic[14])


def _parse_v9(header: MagicHeader, magic: bytes, data: bytes) -> None:
    _parse_v8(header, magic)
    header.compression_level = magic[18] & 0x0F
    header.rzip_compression_level = magic[18] >> 4
    count = magic[19]
    if count:
        comment = data[MAGIC_LEN:MAGIC_LEN + count]
        if len(comment) != count:
            raise MagicError("Failed to read comment")
        header.comment = comment


def parse_magic(data) -> MagicHeader:
    """Decode a magic header (and any comment after it) from bytes."""
    data = bytes(data)
    if len(data) < MAGIC_HEADER:
        raise MagicError("Failed to read initial magic header")
    if data[:4] != SIGNATURE:
        raise MagicError("Not an lrzip file")
    major, minor = data[4], data[5]
    header = MagicHeader(major_version=major, minor_version=minor)
    if major != 0:
        return header

    length = magic_length(major, minor)
    if len(data) < length:
        raise MagicError("Failed to read magic header")
    magic = data[:length].ljust(OLD_MAGIC_LEN, b"\0")

    if minor == 6:
        _parse_v6(header, magic)
    elif minor == 7:
        _parse_v7(header, magic)
    elif minor == 8:
        _parse_v8(header, magic)
    elif minor == 9:
        _parse_v9(header, magic, data)
    else:
        raise MagicError(f"lrzip version {major}.{minor} archive is not supported")
    return header


def read_magic(stream: BinaryIO) -> MagicHeader:
    """Read a magic header from a binary stream, leaving it just past the header."""
    data = stream.read(MAGIC_HEADER)
    if len(data) != MAGIC_HEADER:
        raise MagicError("Failed to read initial magic header")
    if data[:4] != SIGNATURE:
        raise MagicError("Not an lrzip file")
    major, minor = data[4], data[5]
    if major == 0:
        remaining = magic_length(major, minor) - MAGIC_HEADER
        rest = stream.read(remaining)
        if len(rest) != remaining:
            raise MagicError("Failed to read magic header")
        data += rest
        if minor == 9 and data[19]:
            data += stream.read(data[19])
    return parse_magic(data)