"""
The CHIP-8 device: the public face of the virtual machine.

A host drives the device one frame at a time:

    device = Chip8Device()
    device.load_rom(rom_bytes)
    device.start()
    while host_running:
        device.set_key_state(key, pressed)   # as input arrives
        device.tick(1 / 60)
        render(device.read_framebuffer())
        beep(device.is_sound_active())

Each ``tick`` runs one timer pass followed by ``cycles_per_frame``
instructions. Machine faults (memory access out of range, stack
overflow) stop the device and are reported; they never propagate out
of ``tick``.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List, Optional, Union

import numpy as np

from .config import EmulatorConfig
from .constants import FONT_START, PROGRAM_START
from .cpu import Chip8CPU
from .decode import Op
from .display import Framebuffer
from .errors import MachineFault, RomTooLargeError
from .fonts import FontName
from .keypad import Key, Keypad, to_key
from .memory import Memory

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Device run states"""
    STOPPED = auto()    # Not started, or halted by a fault
    RUNNING = auto()
    WAITING = auto()    # Suspended on FX0A until a key is pressed


class MessageKind(Enum):
    UNKNOWN_OPCODE = auto()     # detail: the opcode
    WAITING_FOR_KEY = auto()    # detail: register that receives the key
    FAULT = auto()              # detail: the MachineFault


@dataclass(frozen=True)
class DeviceMessage:
    """Something a host may want to surface, produced during a tick"""
    kind: MessageKind
    detail: Any = None


class Chip8Device:
    """Complete CHIP-8 machine with lifecycle control"""

    def __init__(self, config: Optional[EmulatorConfig] = None):
        self.config = config or EmulatorConfig()

        self.memory = Memory()
        self.framebuffer = Framebuffer()
        self.keypad = Keypad()
        self.cpu = Chip8CPU(
            self.memory, self.framebuffer, self.keypad,
            quirks=self.config.quirks,
            stack_size=self.config.stack_size,
            rng=random.Random(self.config.seed),
        )
        self.memory.load_font(self.config.font_offset, self.config.font)

        self.running = False
        self.fault: Optional[MachineFault] = None
        self.rom_size: Optional[int] = None
        self.frame_count = 0
        self.elapsed = 0.0

    # ─── Lifecycle ───

    def start(self):
        """Allow ticks to execute instructions.

        A faulted device stays stopped until ``reset`` or ``load_rom``.
        """
        if self.fault is not None:
            logger.warning("Not starting, device halted by a fault: %s", self.fault)
            return
        if self.rom_size is None:
            logger.warning("Starting without a ROM loaded")
        self.running = True
        logger.info("Device started")

    def stop(self):
        self.running = False

    def is_running(self) -> bool:
        return self.running

    @property
    def run_state(self) -> RunState:
        if not self.running:
            return RunState.STOPPED
        if self.cpu.state.waiting_for_key:
            return RunState.WAITING
        return RunState.RUNNING

    def reset(self):
        """Return to power-on state, keeping font, quirks and config"""
        font, offset = self.memory.font, self.memory.font_offset
        self.memory.clear()
        self.memory.load_font(offset, font)
        self.framebuffer.clear()
        self.keypad.release_all()
        self.cpu.reset()
        self.running = False
        self.fault = None
        self.rom_size = None
        self.frame_count = 0
        self.elapsed = 0.0
        logger.info("Device reset")

    # ─── Loading ───

    def load_rom(self, data: bytes):
        """Reset the machine and copy a ROM to 0x200.

        The device is left stopped; call ``start`` to run it.

        Raises:
            RomTooLargeError: the ROM extends past 0xFFF (memory untouched)
        """
        limit = len(self.memory) - PROGRAM_START
        if len(data) > limit:
            raise RomTooLargeError(len(data), limit)
        self.reset()
        self.memory.load_rom(data)
        self.rom_size = len(data)
        logger.info("Loaded %d byte ROM", len(data))

    def load_font(self, offset: int = FONT_START, font: Optional[FontName] = None):
        """Write a font set at offset; FX29 resolves glyphs relative to it"""
        self.memory.load_font(offset, font or self.memory.font)

    # ─── Input ───

    def set_key_state(self, key_id: Union[Key, int], pressed: bool):
        """Report a key transition; a fresh press ends a pending FX0A wait.

        Re-reporting a key that is already down is not a press, and a
        stopped device records the key without resuming.
        """
        key = to_key(key_id)
        was_pressed = self.keypad.is_pressed(key)
        self.keypad.set_key(key, pressed)
        if pressed and not was_pressed and self.running and self.cpu.state.waiting_for_key:
            self.cpu.resolve_key_wait(key)

    # ─── Execution ───

    def tick(self, frame_delta: float = 0.0) -> List[DeviceMessage]:
        """Advance one frame: one timer pass, then ``cycles_per_frame`` instructions.

        While waiting on FX0A the timers keep counting down but no
        instructions run.
        """
        if not self.running:
            return []

        self.frame_count += 1
        self.elapsed += frame_delta
        self.cpu.update_timers()

        messages: List[DeviceMessage] = []
        for _ in range(self.config.cycles_per_frame):
            if self.cpu.state.waiting_for_key or not self.running:
                break
            messages.extend(self._cycle())

        if self.running and self.cpu.state.waiting_for_key:
            messages.append(DeviceMessage(MessageKind.WAITING_FOR_KEY,
                                          self.cpu.state.key_register))
        return messages

    def step(self) -> List[DeviceMessage]:
        """Execute a single instruction without touching the timers"""
        if not self.running:
            return []
        if self.cpu.state.waiting_for_key:
            return [DeviceMessage(MessageKind.WAITING_FOR_KEY, self.cpu.state.key_register)]
        return self._cycle()

    def _cycle(self) -> List[DeviceMessage]:
        try:
            instruction = self.cpu.step()
        except MachineFault as fault:
            logger.error("Machine fault, stopping: %s", fault)
            self.fault = fault
            self.running = False
            return [DeviceMessage(MessageKind.FAULT, fault)]

        if instruction.op is Op.UNKNOWN:
            return [DeviceMessage(MessageKind.UNKNOWN_OPCODE, instruction.opcode)]
        return []

    # ─── Output ───

    def read_framebuffer(self) -> np.ndarray:
        """(32, 64) read-only copy of the screen"""
        return self.framebuffer.snapshot()

    def is_sound_active(self) -> bool:
        return self.cpu.state.sound_timer > 0
