"""Loader for colour cycling images in the canvascycle script format.

The format is a loosely JSON-like object with unquoted attribute names and
single-quoted strings:

    {filename:'X.LBM', width:640, height:480,
     colors:[[r,g,b],...], cycles:[{reverse:0,rate:280,low:1,high:3},...],
     pixels:[...]}

Files that hold an IFF ILBM or PBM image are recognised and loaded as such.
"""

from __future__ import annotations

import os
from enum import Enum, auto
from typing import Union

from .image import PALETTE_SIZE, Color, ColorRange, Image
from .lbm import file_is_lbm, load_image_lbm

_PUNCT = frozenset("{},[]:")
_SPACE = frozenset(" \t\n\v\f\r")
_DIGITS = frozenset("0123456789")


class CanvasFormatError(ValueError):
    """Raised when a canvascycle image description cannot be parsed."""


class _Kind(Enum):
    NUM = auto()
    NAME = auto()
    STR = auto()
    PUNCT = auto()
    END = auto()


def _is_alpha(c: str | None) -> bool:
    return c is not None and c.isascii() and c.isalpha()


def _is_digit(c: str | None) -> bool:
    return c is not None and c in _DIGITS


class _Lexer:
    """Tokenizer with one character of lookahead in ``nextc``."""

    def __init__(self, text: str, pos: int) -> None:
        self._text = text
        self._pos = pos
        self.nextc = self._getc()

    def _getc(self) -> str | None:
        if self._pos >= len(self._text):
            return None
        c = self._text[self._pos]
        self._pos += 1
        return c

    def _next_char(self) -> str | None:
        c = self._getc()
        while c is not None and c in _SPACE:
            c = self._getc()
        return c

    def _collect(self, accept) -> str:
        chars = []
        while accept(self.nextc):
            chars.append(self.nextc)
            self.nextc = self._next_char()
        return "".join(chars)

    def next_token(self) -> tuple[_Kind, str]:
        c = self.nextc
        if c is None:
            return _Kind.END, ""

        if c in _PUNCT:
            self.nextc = self._next_char()
            return _Kind.PUNCT, c

        if c == "'":
            chars = []
            c = self._next_char()
            while c is not None and c != "'":
                chars.append(c)
                c = self._getc()
            self.nextc = self._next_char()
            return _Kind.STR, "".join(chars)

        if _is_alpha(c):
            return _Kind.NAME, self._collect(_is_alpha)
        if _is_digit(c):
            return _Kind.NUM, self._collect(_is_digit)

        raise CanvasFormatError(f"unexpected character: {c!r}")

    def expect(self, kind: _Kind, text: str | None = None) -> str:
        found_kind, found = self.next_token()
        if found_kind is not kind or (text is not None and found != text):
            wanted = repr(text) if text is not None else kind.name.lower()
            raise CanvasFormatError(f"expected {wanted}, found {found!r}")
        return found

    def expect_number(self) -> int:
        return int(self.expect(_Kind.NUM))

    def skip_comma(self) -> None:
        if self.nextc == ",":
            self.next_token()


def _palette(lex: _Lexer, palette: list[Color]) -> None:
    lex.expect(_Kind.PUNCT, "[")
    index = 0
    while (tok := lex.next_token()) == (_Kind.PUNCT, "["):
        r = lex.expect_number()
        lex.expect(_Kind.PUNCT, ",")
        g = lex.expect_number()
        lex.expect(_Kind.PUNCT, ",")
        b = lex.expect_number()
        lex.expect(_Kind.PUNCT, "]")
        if index < PALETTE_SIZE:
            palette[index] = Color(r & 0xFF, g & 0xFF, b & 0xFF)
        index += 1
        lex.skip_comma()

    if tok != (_Kind.PUNCT, "]"):
        raise CanvasFormatError("palette must be closed by a ']' token")


def _crange(lex: _Lexer) -> ColorRange:
    rng = ColorRange()
    lex.expect(_Kind.PUNCT, "{")
    while lex.nextc is not None and lex.nextc != "}":
        name = lex.expect(_Kind.NAME)
        lex.expect(_Kind.PUNCT, ":")
        value = lex.expect_number()
        if name == "reverse":
            rng.cmode = value
        elif name == "rate":
            rng.rate = value
        elif name == "low":
            rng.low = value
        elif name == "high":
            rng.high = value
        else:
            raise CanvasFormatError(f"invalid attribute {name} in cycles range")
        lex.skip_comma()
    lex.expect(_Kind.PUNCT, "}")
    return rng


def _cycles(lex: _Lexer) -> list[ColorRange]:
    lex.expect(_Kind.PUNCT, "[")
    ranges: list[ColorRange] = []
    while lex.nextc == "{":
        rng = _crange(lex)
        if rng.low != rng.high and rng.rate > 0:
            ranges.insert(0, rng)
        lex.skip_comma()
    if lex.next_token() != (_Kind.PUNCT, "]"):
        raise CanvasFormatError("cycles: missing closing bracket")
    return ranges


def _pixels(lex: _Lexer, width: int, height: int) -> bytearray:
    if width <= 0 or height <= 0:
        raise CanvasFormatError(
            "pixel block found before defining the image dimensions"
        )
    count = width * height
    pixels = bytearray(count)
    lex.expect(_Kind.PUNCT, "[")

    filled = 0
    while (tok := lex.next_token())[0] is _Kind.NUM:
        # data beyond the declared dimensions is dropped
        if filled < count:
            pixels[filled] = int(tok[1]) & 0xFF
            filled += 1
        lex.skip_comma()

    if tok != (_Kind.PUNCT, "]"):
        raise CanvasFormatError("pixels: missing closing bracket")
    return pixels


def parse_canvas(text: str) -> Image:
    """Parse the first image block found in ``text``."""
    start = text.find("{")
    if start < 0:
        raise CanvasFormatError("invalid image format, no image block found")

    lex = _Lexer(text, start)
    lex.expect(_Kind.PUNCT, "{")

    img = Image(width=-1, height=-1, bpp=8)
    pixels: bytearray | None = None

    while _is_alpha(lex.nextc):
        name = lex.expect(_Kind.NAME)
        lex.expect(_Kind.PUNCT, ":")

        if name == "filename":
            if lex.next_token()[0] is not _Kind.STR:
                raise CanvasFormatError("attribute: filename should be a string")
        elif name in ("width", "height"):
            kind, value = lex.next_token()
            if kind is not _Kind.NUM:
                raise CanvasFormatError(f"attribute: {name} should be a number")
            setattr(img, name, int(value))
        elif name == "colors":
            _palette(lex, img.palette)
        elif name == "cycles":
            img.ranges = _cycles(lex)
        elif name == "pixels":
            pixels = _pixels(lex, img.width, img.height)
        else:
            raise CanvasFormatError(f"unknown attribute: {name}")

        lex.skip_comma()

    if pixels is None:
        raise CanvasFormatError("image block holds no pixel data")
    img.pixels = pixels
    return img


def load_image(path: Union[str, "os.PathLike[str]"]) -> Image:
    """Load a colour cycling image from an LBM file or a canvascycle script."""
    with open(path, "rb") as fp:
        if file_is_lbm(fp):
            return load_image_lbm(fp)
        data = fp.read()
    return parse_canvas(data.decode("latin-1"))