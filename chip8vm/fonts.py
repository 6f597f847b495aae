"""
Built-in 4x5 hexadecimal font sets.

Every set holds 16 glyphs (0-F) of 5 bytes each, 80 bytes in total. The
CHIP-8 set is the default; the others reproduce the glyphs of other
historical interpreters so ROMs that print digits look the way their
authors saw them.
"""

from enum import Enum
from typing import Dict

from .constants import FONT_GLYPH_SIZE


class FontName(Enum):
    """Selectable system fonts"""
    CHIP8 = "CHIP-8"
    VIP = "VIP"
    DREAM6800 = "DREAM 6800"
    ETI660 = "ETI 660"
    FISHIE = "FISHIE"


# CHIP-8 Font (4x5 pixels, stored as 5 bytes each)
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

VIP_FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x60, 0x20, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0xA0, 0xA0, 0xF0, 0x20, 0x20,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x10, 0x10, 0x10,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xF0, 0x50, 0x70, 0x50, 0xF0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xF0, 0x50, 0x50, 0x50, 0xF0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

DREAM6800_FONTSET = bytes([
    0xE0, 0xA0, 0xA0, 0xA0, 0xE0,  # 0
    0x40, 0x40, 0x40, 0x40, 0x40,  # 1
    0xE0, 0x20, 0xE0, 0x80, 0xE0,  # 2
    0xE0, 0x20, 0xE0, 0x20, 0xE0,  # 3
    0x80, 0xA0, 0xA0, 0xE0, 0x20,  # 4
    0xE0, 0x80, 0xE0, 0x20, 0xE0,  # 5
    0xE0, 0x80, 0xE0, 0xA0, 0xE0,  # 6
    0xE0, 0x20, 0x20, 0x20, 0x20,  # 7
    0xE0, 0xA0, 0xE0, 0xA0, 0xE0,  # 8
    0xE0, 0xA0, 0xE0, 0x20, 0xE0,  # 9
    0xE0, 0xA0, 0xE0, 0xA0, 0xA0,  # A
    0xC0, 0xA0, 0xE0, 0xA0, 0xC0,  # B
    0xE0, 0x80, 0x80, 0x80, 0xE0,  # C
    0xC0, 0xA0, 0xA0, 0xA0, 0xC0,  # D
    0xE0, 0x80, 0xE0, 0x80, 0xE0,  # E
    0xE0, 0x80, 0xC0, 0x80, 0x80,  # F
])

ETI660_FONTSET = bytes([
    0xE0, 0xA0, 0xA0, 0xA0, 0xE0,  # 0
    0x20, 0x20, 0x20, 0x20, 0x20,  # 1
    0xE0, 0x20, 0xE0, 0x80, 0xE0,  # 2
    0xE0, 0x20, 0xE0, 0x20, 0xE0,  # 3
    0xA0, 0xA0, 0xE0, 0x20, 0x20,  # 4
    0xE0, 0x80, 0xE0, 0x20, 0xE0,  # 5
    0xE0, 0x80, 0xE0, 0xA0, 0xE0,  # 6
    0xE0, 0x20, 0x20, 0x20, 0x20,  # 7
    0xE0, 0xA0, 0xE0, 0xA0, 0xE0,  # 8
    0xE0, 0xA0, 0xE0, 0x20, 0xE0,  # 9
    0xE0, 0xA0, 0xE0, 0xA0, 0xA0,  # A
    0x80, 0x80, 0xE0, 0xA0, 0xE0,  # B
    0xE0, 0x80, 0x80, 0x80, 0xE0,  # C
    0x20, 0x20, 0xE0, 0xA0, 0xE0,  # D
    0xE0, 0x80, 0xE0, 0x80, 0xE0,  # E
    0xE0, 0x80, 0xC0, 0x80, 0x80,  # F
])

FISHIE_FONTSET = bytes([
    0x60, 0xA0, 0xA0, 0xA0, 0xC0,  # 0
    0x40, 0xC0, 0x40, 0x40, 0xE0,  # 1
    0xC0, 0x20, 0x40, 0x80, 0xE0,  # 2
    0xC0, 0x20, 0x40, 0x20, 0xC0,  # 3
    0x20, 0xA0, 0xE0, 0x20, 0x20,  # 4
    0xE0, 0x80, 0xC0, 0x20, 0xC0,  # 5
    0x40, 0x80, 0xC0, 0xA0, 0x40,  # 6
    0xE0, 0x20, 0x60, 0x40, 0x40,  # 7
    0x40, 0xA0, 0x40, 0xA0, 0x40,  # 8
    0x40, 0xA0, 0x60, 0x20, 0x40,  # 9
    0x40, 0xA0, 0xE0, 0xA0, 0xA0,  # A
    0xC0, 0xA0, 0xC0, 0xA0, 0xC0,  # B
    0x60, 0x80, 0x80, 0x80, 0x60,  # C
    0xC0, 0xA0, 0xA0, 0xA0, 0xC0,  # D
    0xE0, 0x80, 0xC0, 0x80, 0xE0,  # E
    0xE0, 0x80, 0xC0, 0x80, 0x80,  # F
])

FONTS: Dict[FontName, bytes] = {
    FontName.CHIP8: FONTSET,
    FontName.VIP: VIP_FONTSET,
    FontName.DREAM6800: DREAM6800_FONTSET,
    FontName.ETI660: ETI660_FONTSET,
    FontName.FISHIE: FISHIE_FONTSET,
}


def get_font(name: FontName = FontName.CHIP8) -> bytes:
    """Return the 80-byte glyph table for a font"""
    return FONTS[name]


def glyph_address(offset: int, digit: int) -> int:
    """Address of a digit's glyph when the font is loaded at offset"""
    return offset + (digit & 0xF) * FONT_GLYPH_SIZE
