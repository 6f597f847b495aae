"""Exceptions raised by the CHIP-8 machine."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every chip8vm error"""


class RomTooLargeError(Chip8Error):
    """ROM does not fit between 0x200 and the end of memory"""

    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is {size} bytes, at most {limit} fit in memory")
        self.size = size
        self.limit = limit


class MachineFault(Chip8Error):
    """A running program did something the machine cannot carry out.

    The device stops on a fault instead of guessing; ``pc`` is the
    address of the offending instruction when it is known.
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        super().__init__(message)
        self.pc = pc

    def __str__(self) -> str:
        message = super().__str__()
        if self.pc is None:
            return message
        return f"{message} (PC=${self.pc:03X})"


class MemoryAccessError(MachineFault):
    """Read or write outside 0x000-0xFFF"""

    def __init__(self, address: int, pc: Optional[int] = None):
        super().__init__(f"Memory access out of range: ${address:04X}", pc)
        self.address = address


class StackOverflowError(MachineFault):
    """CALL with every stack level in use"""

    def __init__(self, depth: int, pc: Optional[int] = None):
        super().__init__(f"Stack overflow at depth {depth}", pc)
        self.depth = depth
