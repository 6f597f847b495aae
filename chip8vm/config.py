"""Emulator configuration."""

from dataclasses import dataclass, field
from typing import Optional

from .constants import DEFAULT_CYCLES_PER_FRAME, TIMER_HZ, STACK_SIZE, FONT_START
from .fonts import FontName
from .quirks import Quirks


@dataclass
class EmulatorConfig:
    """Emulator configuration settings"""
    # Timing
    cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME  # Instructions per tick
    frame_rate: int = TIMER_HZ                        # Ticks per second

    # Stack
    stack_size: int = STACK_SIZE

    # Font
    font_offset: int = FONT_START
    font: FontName = FontName.CHIP8

    # Compatibility
    quirks: Quirks = field(default_factory=Quirks)

    # CXKK random source; None seeds from the OS
    seed: Optional[int] = None

    def __post_init__(self):
        if self.cycles_per_frame < 0:
            raise ValueError("cycles_per_frame must not be negative")
        if self.frame_rate <= 0:
            raise ValueError("frame_rate must be positive")
        if self.stack_size <= 0:
            raise ValueError("stack_size must be positive")

    @property
    def clock_hz(self) -> int:
        """Effective instruction rate"""
        return self.cycles_per_frame * self.frame_rate
