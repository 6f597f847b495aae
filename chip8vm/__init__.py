"""chip8vm: a CHIP-8 virtual machine.

The core is an interpreter for the baseline CHIP-8 instruction set and its
state; rendering, audio and ROM files are left to the host (see
``chip8vm.frontend`` for a pygame one).

Modules:
    device: Chip8Device, the public entry points a host drives
    cpu: CPUState and the fetch-decode-execute engine
    decode: Opcode to Instruction decoding
    memory, display, keypad: Machine components
    quirks, fonts, config: Compatibility and configuration
"""

__version__ = "0.1.0"

from .config import EmulatorConfig
from .cpu import Chip8CPU, CPUState
from .decode import Instruction, Op, decode
from .device import Chip8Device, DeviceMessage, MessageKind, RunState
from .errors import (
    Chip8Error, MachineFault, MemoryAccessError, RomTooLargeError, StackOverflowError,
)
from .fonts import FontName
from .keypad import Key
from .quirks import Quirks

__all__ = [
    "Chip8Device", "DeviceMessage", "MessageKind", "RunState",
    "Chip8CPU", "CPUState", "Instruction", "Op", "decode",
    "EmulatorConfig", "FontName", "Key", "Quirks",
    "Chip8Error", "MachineFault", "MemoryAccessError", "RomTooLargeError",
    "StackOverflowError",
]
