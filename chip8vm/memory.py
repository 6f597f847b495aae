"""
Flat 4KB CHIP-8 memory.

Every access is bounds-checked: an address outside 0x000-0xFFF raises
``MemoryAccessError`` rather than wrapping, so a runaway program stops
with a fault instead of scribbling over the font area.
"""

import logging
from typing import Iterable

from .constants import MEMORY_SIZE, PROGRAM_START, MAX_ROM_SIZE, FONT_START
from .errors import MemoryAccessError, RomTooLargeError
from .fonts import FontName, get_font

logger = logging.getLogger(__name__)


class Memory:
    """4096 bytes of RAM with font and ROM loaders"""

    def __init__(self, size: int = MEMORY_SIZE):
        self.data = bytearray(size)
        self.font_offset = FONT_START
        self.font = FontName.CHIP8

    def __len__(self) -> int:
        return len(self.data)

    def clear(self):
        """Zero every byte"""
        self.data[:] = bytes(len(self.data))

    def _check(self, address: int, length: int = 1):
        if address < 0 or address + length > len(self.data):
            bad = address if address < 0 or address >= len(self.data) else len(self.data)
            raise MemoryAccessError(bad)

    def read(self, address: int) -> int:
        """Read one byte"""
        self._check(address)
        return self.data[address]

    def write(self, address: int, value: int):
        """Write one byte (value is truncated to 8 bits)"""
        self._check(address)
        self.data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read a big-endian 16-bit word"""
        self._check(address, 2)
        return (self.data[address] << 8) | self.data[address + 1]

    def read_block(self, address: int, length: int) -> bytes:
        """Read length consecutive bytes"""
        self._check(address, length)
        return bytes(self.data[address:address + length])

    def write_block(self, address: int, values: Iterable[int]):
        """Write consecutive bytes starting at address"""
        values = bytes(v & 0xFF for v in values)
        self._check(address, len(values))
        self.data[address:address + len(values)] = values

    def load_font(self, offset: int = FONT_START, font: FontName = FontName.CHIP8):
        """Copy a built-in font set to offset"""
        glyphs = get_font(font)
        if offset < 0 or offset + len(glyphs) > len(self.data):
            raise ValueError(f"Font at ${offset:03X} does not fit in memory")
        self.data[offset:offset + len(glyphs)] = glyphs
        self.font_offset = offset
        self.font = font

    def load_rom(self, data: bytes):
        """Copy ROM bytes to 0x200, rejecting ROMs that overflow memory"""
        limit = min(MAX_ROM_SIZE, len(self.data) - PROGRAM_START)
        if len(data) > limit:
            raise RomTooLargeError(len(data), limit)
        self.data[PROGRAM_START:PROGRAM_START + len(data)] = data
        logger.debug("Copied %d ROM bytes to $%03X", len(data), PROGRAM_START)
