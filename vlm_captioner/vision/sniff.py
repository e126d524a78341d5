"""Content-based MIME detection (WHATWG sniffing table, first 512 bytes only)."""
from typing import Callable, NamedTuple, Optional

from vlm_captioner.constants import MIME_TEXT, MIME_UNKNOWN, SNIFF_LEN

_WHITESPACE = b"\t\n\x0c\r "

Matcher = Callable[[bytes, int], Optional[str]]


class _Exact(NamedTuple):
    sig: bytes
    ct: str

    def __call__(self, data: bytes, first_non_ws: int) -> Optional[str]:
        return self.ct if data.startswith(self.sig) else None


class _Masked(NamedTuple):
    mask: bytes
    pat: bytes
    ct: str
    skip_ws: bool = False

    def __call__(self, data: bytes, first_non_ws: int) -> Optional[str]:
        if self.skip_ws:
            data = data[first_non_ws:]
        if len(data) < len(self.pat):
            return None
        match all(d & m == p for d, m, p in zip(data, self.mask, self.pat)):
            case True:
                return self.ct
            case False:
                return None


class _Html(NamedTuple):
    tag: bytes

    def __call__(self, data: bytes, first_non_ws: int) -> Optional[str]:
        data = data[first_non_ws:]
        if len(data) < len(self.tag) + 1:
            return None
        if data[: len(self.tag)].upper() != self.tag:
            return None
        # tag-terminating byte
        if data[len(self.tag)] not in b" >":
            return None
        return "text/html; charset=utf-8"


def _mp4(data: bytes, first_non_ws: int) -> Optional[str]:
    # ISO base media file: leading "ftyp" box whose brands include "mp4".
    if len(data) < 12:
        return None
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return None
    if data[4:8] != b"ftyp":
        return None
    # offset 12 holds the minor version, not a brand
    match any(data[st:st + 3] == b"mp4" for st in range(8, box_size, 4) if st != 12):
        case True:
            return "video/mp4"
        case False:
            return None


def _is_binary_byte(b: int) -> bool:
    return b <= 0x08 or b == 0x0B or 0x0E <= b <= 0x1A or 0x1C <= b <= 0x1F


def _text(data: bytes, first_non_ws: int) -> Optional[str]:
    match any(map(_is_binary_byte, data[first_non_ws:])):
        case True:
            return None
        case False:
            return MIME_TEXT


_HTML_TAGS = (
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
    b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
    b"<BODY", b"<BR", b"<P", b"<!--",
)

_SIGNATURES: tuple[Matcher, ...] = (
    *map(_Html, _HTML_TAGS),
    _Masked(b"\xff\xff\xff\xff\xff", b"<?xml", "text/xml; charset=utf-8", skip_ws=True),
    _Exact(b"%PDF-", "application/pdf"),
    _Exact(b"%!PS-Adobe-", "application/postscript"),
    # UTF BOMs
    _Masked(b"\xff\xff\x00\x00", b"\xfe\xff\x00\x00", "text/plain; charset=utf-16be"),
    _Masked(b"\xff\xff\x00\x00", b"\xff\xfe\x00\x00", "text/plain; charset=utf-16le"),
    _Masked(b"\xff\xff\xff\x00", b"\xef\xbb\xbf\x00", "text/plain; charset=utf-8"),
    # images
    _Exact(b"\x00\x00\x01\x00", "image/x-icon"),
    _Exact(b"\x00\x00\x02\x00", "image/x-icon"),
    _Exact(b"BM", "image/bmp"),
    _Exact(b"GIF87a", "image/gif"),
    _Exact(b"GIF89a", "image/gif"),
    _Masked(
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff\xff\xff",
        b"RIFF\x00\x00\x00\x00WEBPVP",
        "image/webp",
    ),
    _Exact(b"\x89PNG\r\n\x1a\n", "image/png"),
    _Exact(b"\xff\xd8\xff", "image/jpeg"),
    # audio / video
    _Masked(b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff", b"FORM\x00\x00\x00\x00AIFF", "audio/aiff"),
    _Masked(b"\xff\xff\xff", b"ID3", "audio/mpeg"),
    _Masked(b"\xff\xff\xff\xff\xff", b"OggS\x00", "application/ogg"),
    _Masked(b"\xff" * 8, b"MThd\x00\x00\x00\x06", "audio/midi"),
    _Masked(b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff", b"RIFF\x00\x00\x00\x00AVI ", "video/avi"),
    _Masked(b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff", b"RIFF\x00\x00\x00\x00WAVE", "audio/wave"),
    _mp4,
    _Exact(b"\x1a\x45\xdf\xa3", "video/webm"),
    # fonts
    _Masked(b"\x00" * 34 + b"\xff\xff", b"\x00" * 34 + b"LP", "application/vnd.ms-fontobject"),
    _Exact(b"\x00\x01\x00\x00", "font/ttf"),
    _Exact(b"OTTO", "font/otf"),
    _Exact(b"ttcf", "font/collection"),
    _Exact(b"wOFF", "font/woff"),
    _Exact(b"wOF2", "font/woff2"),
    # archives
    _Exact(b"\x1f\x8b\x08", "application/x-gzip"),
    _Exact(b"PK\x03\x04", "application/zip"),
    _Exact(b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    _Exact(b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    _Exact(b"\x00asm", "application/wasm"),
    # must stay last
    _text,
)


def _first_non_ws(data: bytes) -> int:
    return next((i for i, b in enumerate(data) if b not in _WHITESPACE), len(data))


def detect_content_type(data: bytes) -> str:
    """Return the MIME type for ``data`` judged by its leading bytes, never a file name.

    Falls back to ``application/octet-stream`` when nothing matches.
    """
    head = data[:SNIFF_LEN]
    first = _first_non_ws(head)
    return next(
        (ct for ct in (sig(head, first) for sig in _SIGNATURES) if ct is not None),
        MIME_UNKNOWN,
    )
