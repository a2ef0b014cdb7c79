"""Fixed 8x12 bitmap font covering the printable ASCII characters."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

FIRST_CHAR = 32
LAST_CHAR = 126
GLYPH_COUNT = LAST_CHAR - FIRST_CHAR + 1
GLYPH_WIDTH = 8
GLYPH_HEIGHT = 12
ADVANCE = 10

PathLike = Union[str, "os.PathLike[str]"]

# Rows are stored bottom row first, most significant bit on the left.
_DEFAULT_GLYPHS = (
    "00 00 00 00 00 00 00 00 00 00 00 00",  # space
    "00 18 18 00 00 18 18 18 18 18 18 18",  # !
    "00 00 00 00 00 00 00 00 36 36 36 36",  # "
    "00 00 00 66 66 ff 66 66 ff 66 66 00",  # #
    "00 18 7e ff 1b 1f 1e f8 d8 ff 7e 18",  # $
    "00 0e 1b db 6e 30 18 0c 76 db d8 70",  # %
    "00 7f c6 cf d8 70 70 d8 cc cc 6c 38",  # &
    "00 00 00 00 00 00 00 00 00 00 00 00",  # '
    "00 0c 18 30 30 30 30 30 30 30 18 0c",  # (
    "00 30 18 0c 0c 0c 0c 0c 0c 0c 18 30",  # )
    "00 00 00 00 99 5a 3c ff 3c 5a 99 00",  # *
    "00 00 00 18 18 18 ff ff 18 18 18 00",  # +
    "00 00 30 18 1c 1c 00 00 00 00 00 00",  # ,
    "00 00 00 00 00 00 ff ff 00 00 00 00",  # -
    "00 00 00 38 38 00 00 00 00 00 00 00",  # .
    "60 60 30 30 18 18 0c 0c 06 06 03 03",  # /
    "00 3c 66 c3 e3 f3 db cf c7 c3 66 3c",  # 0
    "00 7e 18 18 18 18 18 18 18 78 38 18",  # 1
    "00 ff c0 c0 60 30 18 0c 06 03 e7 7e",  # 2
    "00 7e e7 03 03 07 7e 07 03 03 e7 7e",  # 3
    "00 0c 0c 0c 0c 0c ff cc 6c 3c 1c 0c",  # 4
    "00 7e e7 03 03 07 fe c0 c0 c0 c0 ff",  # 5
    "00 7e e7 c3 c3 c7 fe c0 c0 c0 e7 7e",  # 6
    "00 30 30 30 30 18 0c 06 03 03 03 ff",  # 7
    "00 7e e7 c3 c3 e7 7e e7 c3 c3 e7 7e",  # 8
    "00 7e e7 03 03 03 7f e7 c3 c3 e7 7e",  # 9
    "00 00 00 38 38 00 00 38 38 00 00 00",  # :
    "00 00 30 18 1c 1c 00 1c 1c 00 00 00",  # ;
    "00 06 0c 18 30 60 c0 60 30 18 0c 06",  # <
    "00 00 00 00 ff ff 00 ff ff 00 00 00",  # =
    "00 60 30 18 0c 06 03 06 0c 18 30 60",  # >
    "00 18 00 00 18 18 0c 06 03 c3 c3 7e",  # ?
    "00 00 3f 60 cf db d3 dd c3 7e 00 00",  # @
    "00 c3 c3 c3 c3 ff c3 c3 c3 66 3c 18",  # A
    "00 fe c7 c3 c3 c7 fe c7 c3 c3 c7 fe",  # B
    "00 7e e7 c0 c0 c0 c0 c0 c0 c0 e7 7e",  # C
    "00 fc ce c7 c3 c3 c3 c3 c3 c7 ce fc",  # D
    "00 ff c0 c0 c0 c0 fc c0 c0 c0 c0 ff",  # E
    "00 c0 c0 c0 c0 c0 c0 fc c0 c0 c0 ff",  # F
    "00 7e e7 c3 c3 cf c0 c0 c0 c0 e7 7e",  # G
    "00 c3 c3 c3 c3 c3 ff c3 c3 c3 c3 c3",  # H
    "00 7e 18 18 18 18 18 18 18 18 18 7e",  # I
    "00 7c ee c6 06 06 06 06 06 06 06 06",  # J
    "00 c3 c6 cc d8 f0 e0 f0 d8 cc c6 c3",  # K
    "00 ff c0 c0 c0 c0 c0 c0 c0 c0 c0 c0",  # L
    "00 c3 c3 c3 c3 c3 c3 db ff ff e7 c3",  # M
    "00 c7 c7 cf cf df db fb f3 f3 e3 e3",  # N
    "00 7e e7 c3 c3 c3 c3 c3 c3 c3 e7 7e",  # O
    "00 c0 c0 c0 c0 c0 fe c7 c3 c3 c7 fe",  # P
    "00 3f 6e df db c3 c3 c3 c3 c3 66 3c",  # Q
    "00 c3 c6 cc d8 f0 fe c7 c3 c3 c7 fe",  # R
    "00 7e e7 03 03 07 7e e0 c0 c0 e7 7e",  # S
    "00 18 18 18 18 18 18 18 18 18 18 ff",  # T
    "00 7e e7 c3 c3 c3 c3 c3 c3 c3 c3 c3",  # U
    "00 18 3c 3c 66 66 c3 c3 c3 c3 c3 c3",  # V
    "00 c3 e7 ff ff db db c3 c3 c3 c3 c3",  # W
    "00 c3 66 66 3c 3c 18 3c 3c 66 66 c3",  # X
    "00 18 18 18 18 18 18 3c 3c 66 66 c3",  # Y
    "00 ff c0 c0 60 30 7e 0c 06 03 03 ff",  # Z
    "00 3c 30 30 30 30 30 30 30 30 30 3c",  # [
    "03 03 06 06 0c 0c 18 18 30 30 60 60",  # backslash
    "00 3c 0c 0c 0c 0c 0c 0c 0c 0c 0c 3c",  # ]
    "00 00 00 00 00 00 00 00 c3 66 3c 18",  # ^
    "ff ff 00 00 00 00 00 00 00 00 00 00",  # _
    "00 00 00 00 00 00 00 00 18 38 30 70",  # `
    "00 7f c3 c3 7f 03 c3 7e 00 00 00 00",  # a
    "00 fe c3 c3 c3 c3 fe c0 c0 c0 c0 c0",  # b
    "00 7e c3 c0 c0 c0 c3 7e 00 00 00 00",  # c
    "00 7f c3 c3 c3 c3 7f 03 03 03 03 03",  # d
    "00 00 7f c0 c0 fe c3 c3 7e 00 00 00",  # e
    "00 30 30 30 30 30 fc 30 30 30 33 1e",  # f
    "7e c3 03 03 7f c3 c3 c3 7e 00 00 00",  # g
    "00 c3 c3 c3 c3 c3 c3 fe c0 c0 c0 c0",  # h
    "00 00 18 18 18 18 18 18 18 00 00 18",  # i
    "38 6c 0c 0c 0c 0c 0c 0c 0c 00 00 0c",  # j
    "00 c6 cc f8 f0 d8 cc c6 c0 c0 c0 c0",  # k
    "00 7e 18 18 18 18 18 18 18 18 18 78",  # l
    "00 00 db db db db db db fe 00 00 00",  # m
    "00 00 c6 c6 c6 c6 c6 c6 fc 00 00 00",  # n
    "00 00 7c c6 c6 c6 c6 c6 7c 00 00 00",  # o
    "c0 c0 c0 fe c3 c3 c3 c3 fe 00 00 00",  # p
    "03 03 03 7f c3 c3 c3 c3 7f 00 00 00",  # q
    "00 00 c0 c0 c0 c0 c0 e0 fe 00 00 00",  # r
    "00 00 fe 03 03 7e c0 c0 7f 00 00 00",  # s
    "00 00 1c 36 30 30 30 30 fc 30 30 30",  # t
    "00 00 7e c6 c6 c6 c6 c6 c6 00 00 00",  # u
    "00 00 18 3c 3c 66 66 c3 c3 00 00 00",  # v
    "00 00 c3 e7 ff db c3 c3 c3 00 00 00",  # w
    "00 00 c3 66 3c 18 3c 66 c3 00 00 00",  # x
    "c0 60 60 30 18 3c 66 66 c3 00 00 00",  # y
    "00 00 ff 60 30 18 0c 06 ff 00 00 00",  # z
    "00 0f 18 18 18 38 f0 38 18 18 18 0f",  # {
    "18 18 18 18 18 18 18 18 18 18 18 18",  # |
    "00 f0 18 18 18 1c 0f 1c 18 18 18 f0",  # }
    "00 00 00 00 00 00 06 8f f1 60 00 00",  # ~
)


class FontFormatError(ValueError):
    """Raised when font data is malformed or incomplete."""


@dataclass(frozen=True)
class BitmapFont:
    """A font of 95 glyphs, 8 pixels wide and 12 rows high, for ASCII 32..126.

    Each glyph is 12 bytes, bottom row first, leftmost pixel in the high bit.
    """

    glyphs: Tuple[bytes, ...]

    def __post_init__(self) -> None:
        glyphs = tuple(bytes(g) for g in self.glyphs)
        if len(glyphs) != GLYPH_COUNT:
            raise FontFormatError(f"expected {GLYPH_COUNT} glyphs, got {len(glyphs)}")
        for code, glyph in enumerate(glyphs, start=FIRST_CHAR):
            if len(glyph) != GLYPH_HEIGHT:
                raise FontFormatError(
                    f"glyph {code} has {len(glyph)} rows, expected {GLYPH_HEIGHT}"
                )
        object.__setattr__(self, "glyphs", glyphs)

    @classmethod
    def load(cls, path: PathLike) -> "BitmapFont":
        """Read a font file of whitespace-separated hexadecimal byte values."""
        with open(path, "r", encoding="ascii") as handle:
            tokens = handle.read().split()
        needed = GLYPH_COUNT * GLYPH_HEIGHT
        if len(tokens) < needed:
            raise FontFormatError("unexpected end of file in font data")
        values: List[int] = []
        for token in tokens[:needed]:
            try:
                values.append(int(token, 16) & 0xFF)
            except ValueError as exc:
                raise FontFormatError(f"invalid hex value {token!r}") from exc
        glyphs = tuple(
            bytes(values[start:start + GLYPH_HEIGHT])
            for start in range(0, needed, GLYPH_HEIGHT)
        )
        return cls(glyphs)

    def save(self, path: PathLike) -> None:
        """Write the font as one lowercase hex byte per line."""
        with open(path, "w", encoding="ascii", newline="\n") as handle:
            handle.writelines(f"{value:x}\n" for glyph in self.glyphs for value in glyph)

    def glyph(self, char: str) -> bytes:
        """Return the 12 row bytes of ``char``, bottom row first."""
        if len(char) != 1:
            raise ValueError("glyph() takes a single character")
        code = ord(char)
        if not FIRST_CHAR <= code <= LAST_CHAR:
            raise ValueError(f"character {char!r} is not in the font")
        return self.glyphs[code - FIRST_CHAR]

    def render(self, text: str) -> List[List[bool]]:
        """Rasterise ``text`` into rows of pixels, top row first.

        Every drawable character advances the pen by 10 pixels; characters the
        font lacks are skipped without advancing.
        """
        drawable = [c for c in text if FIRST_CHAR <= ord(c) <= LAST_CHAR]
        width = ADVANCE * len(drawable)
        rows = [[False] * width for _ in range(GLYPH_HEIGHT)]
        for position, char in enumerate(drawable):
            left = position * ADVANCE
            for from_bottom, value in enumerate(self.glyph(char)):
                row = rows[GLYPH_HEIGHT - 1 - from_bottom]
                for bit in range(GLYPH_WIDTH):
                    if value & (0x80 >> bit):
                        row[left + bit] = True
        return rows

    def __iter__(self) -> Iterable[bytes]:
        return iter(self.glyphs)


def default_font() -> BitmapFont:
    """Return the built-in font."""
    return BitmapFont(tuple(bytes.fromhex(row) for row in _DEFAULT_GLYPHS))


def number_text(num: int) -> str:
    """Format a score or count as it is drawn on screen.

    Zero is shown as "0"; negative numbers produce no text.
    """
    if num == 0:
        return "0"
    if num < 0:
        return ""
    return str(num)