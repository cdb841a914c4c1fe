# lrzkit

Pure-Python tools for working with lrzip archives and the filters they use.
The package has no runtime dependencies.

## Modules

- **`lrzkit.magic`**: the header at the start of every archive, versions 0.6
  to 0.9.
  - `parse_magic(data)` decodes header bytes, and any comment that follows
    them, into a `MagicHeader`.
  - `read_magic(stream)` reads a header from an open binary stream and leaves
    the stream just past it.
  - `MagicHeader.to_bytes()` writes a header in the 0.8 or 0.9 layout.
  - `magic_length(major, minor)` gives the fixed header length for a version.
  - `enc_loops(b1, b2)` gives the number of key-stretching loops that two salt
    bytes encode.
  - `FilterType` names the pre-compression filter recorded in the header.
  - A malformed, unsupported or unwritable header raises `MagicError`.
- **`lrzkit.info`**: reads the structure of an archive without decompressing
  it.
  - `read_archive_info(path, hash_length)` walks the chunk, stream and block
    headers and returns an `ArchiveInfo`. That holds `ChunkInfo`,
    `StreamInfo` and `BlockInfo` entries, plus the stored checksum when the
    archive is hashed. `hash_length` is the size of that trailing checksum.
  - `ArchiveInfo.compression_ratio()` and `bits_per_byte()` return `None`
    when the expected size is unknown. `summary()` renders a text report.
  - `percentage(num, den)` is the percentage helper the report uses.
  - A missing, corrupt, truncated or encrypted archive raises `ArchiveError`.
- **`lrzkit.x86`**: the reversible branch converters (BCJ) for x86 and IA-64
  code. Both rewrite a `bytearray` in place.
  - `x86_convert(data, ip, state, encoding)` returns `(processed, state)`.
  - `ia64_convert(data, ip, encoding)` returns the number of bytes processed.
- **`lrzkit.delta`**: `DeltaCoder(distance)` encodes and decodes with a byte
  distance from 1 to 256. It keeps its state between calls, so data can be fed
  in pieces. `reset()` starts a new stream.
- **`lrzkit.environment`**: set-up helpers.
  - `temp_dir()` picks the temporary directory from `TMPDIR`, `TMP`,
    `TEMPDIR` or `TEMP`, falling back to `/tmp`, always with a trailing slash.
  - `compress_output_name()` and `decompress_output_name()` derive output
    file names.
  - `clean_passphrase()` strips a trailing line ending and rejects an empty
    result.
  - `get_ram()` returns the physical memory in bytes.
  - Failures raise `SetupError`.
- **`lrzkit.queue`**: `InputQueue` holds either open streams or file names,
  never both at once, processed from the front. Invalid additions raise
  `QueueError`.
- **`lrzkit.outname`**: `strip_short_extension(path)` drops an extension
  shorter than four characters, giving a default name for a decompressed file.

## Examples

Read an archive header:

```python
from lrzkit.magic import read_magic

with open("backup.tar.lrz", "rb") as stream:
    header = read_magic(stream)
print(header.minor_version, header.expected_size, header.filter_type.label)
```

Inspect an archive:

```python
from lrzkit.info import read_archive_info

info = read_archive_info("backup.tar.lrz", 64)
print(info.summary())
ratio = info.compression_ratio()
if ratio is not None:
    print(f"ratio {ratio:.3f}x, {info.bits_per_byte():.3f} bpb")
```

Delta-filter a buffer and restore it:

```python
from lrzkit.delta import DeltaCoder

encoded = DeltaCoder(4).encode(b"\x01\x02\x03\x04\x05\x06\x07\x08")
restored = DeltaCoder(4).decode(encoded)
```

Filter x86 code in place:

```python
from lrzkit.x86 import x86_convert

code = bytearray(open("program.bin", "rb").read())
processed, state = x86_convert(code, 0, 0, True)
```

## What it does not do

lrzkit does not compress or decompress archive contents. It has no rzip stage
and no LZMA, bzip2, gzip, LZO or ZPAQ back ends. It cannot decrypt encrypted
archives, and it installs no command-line program. It reads and writes headers,
inspects archive layout, and provides the filters and helpers listed above.

## Tests

Install the `test` extra, then run the suite with pytest.