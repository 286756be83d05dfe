"""Content-type sniffing from a file's leading bytes.

Recognizes the common binary image, audio, video and archive signatures,
then falls back to a text/binary decision based on control bytes. Markup such
as SVG is never sniffed as an image. Only the first ``SNIFF_BYTES`` bytes
are ever examined.
"""

from __future__ import annotations

from pathlib import Path

SNIFF_BYTES = 512
OCTET_STREAM = "application/octet-stream"
PLAIN_TEXT = "text/plain; charset=utf-8"

_EXACT_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"ID3", "audio/mpeg"),
    (b"fLaC", "audio/flac"),
    (b"OggS\x00", "application/ogg"),
    (b"MThd\x00\x00\x00\x06", "audio/midi"),
    (b".snd", "audio/basic"),
    (b"\x1a\x45\xdf\xa3", "video/webm"),
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"\x7fELF", "application/x-executable"),
)

# Bytes that never appear in text files.
_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)


def _bmp_content_type(sample: bytes) -> str | None:
    # "BM" alone also starts plain text, so require the zeroed reserved fields.
    if len(sample) >= 14 and sample.startswith(b"BM") and sample[6:10] == b"\x00\x00\x00\x00":
        return "image/bmp"
    return None


def _riff_content_type(sample: bytes) -> str | None:
    if len(sample) < 12 or not sample.startswith(b"RIFF"):
        return None
    form = sample[8:12]
    if form == b"WEBP":
        return "image/webp"
    if form == b"WAVE":
        return "audio/wave"
    if form == b"AVI ":
        return "video/avi"
    return None


def _iso_media_content_type(sample: bytes) -> str | None:
    if len(sample) < 12 or sample[4:8] != b"ftyp":
        return None
    brand = sample[8:12]
    if brand.startswith(b"M4A"):
        return "audio/mp4"
    return "video/mp4"


def sniff_content_type(sample: bytes) -> str:
    """Return a MIME type for ``sample`` (at most ``SNIFF_BYTES`` are used)."""
    sample = sample[:SNIFF_BYTES]
    if not sample:
        return PLAIN_TEXT

    for signature, content_type in _EXACT_SIGNATURES:
        if sample.startswith(signature):
            return content_type

    for detector in (_bmp_content_type, _riff_content_type, _iso_media_content_type):
        detected = detector(sample)
        if detected is not None:
            return detected

    if sample.startswith((b"\xef\xbb\xbf", b"\xfe\xff", b"\xff\xfe")):
        return PLAIN_TEXT
    if any(byte in _BINARY_BYTES for byte in sample):
        return OCTET_STREAM
    return PLAIN_TEXT


def sniff_path(path: Path) -> str | None:
    """Sniff the leading bytes of ``path``; ``None`` when unreadable.

    Only regular files are opened, so a FIFO or device never blocks.
    """
    if not path.is_file():
        return None
    try:
        with path.open("rb") as handle:
            sample = handle.read(SNIFF_BYTES)
    except OSError:
        return None
    return sniff_content_type(sample)
