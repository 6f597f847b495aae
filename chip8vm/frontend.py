#!/usr/bin/env python3
"""
pygame host for the CHIP-8 device.

Owns everything the machine itself does not: reading ROM files, the
window, turning the framebuffer into pixels, keyboard input and the
beeper. It talks to the device only through its public entry points.

Usage:
    chip8vm path/to/game.ch8
    chip8vm game.ch8 --speed 1000 --profile chip8 --color amber
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pygame

from .config import EmulatorConfig
from .constants import DISPLAY_W, DISPLAY_H, DEFAULT_CLOCK_HZ, TIMER_HZ
from .device import Chip8Device, MessageKind
from .errors import RomTooLargeError
from .fonts import FontName
from .keypad import Key
from .quirks import PROFILES, get_profile

logger = logging.getLogger(__name__)

SCALE = 12                              # Display scale factor
BLOOM_STRENGTH = 0.55                   # Glow intensity (0.0-1.0)
BLUR_PASSES = 2                         # Box blur passes

# Colors (RGB)
COLORS: Dict[str, Tuple[int, int, int]] = {
    'green': (0, 255, 128),
    'amber': (255, 176, 0),
    'white': (220, 220, 220),
    'blue': (100, 180, 255),
}
BG_COLOR = (15, 15, 25)

# Keyboard mapping (QWERTY -> CHIP-8 hex keypad)
# CHIP-8 Keypad:    Keyboard:
# 1 2 3 C          1 2 3 4
# 4 5 6 D          Q W E R
# 7 8 9 E          A S D F
# A 0 B F          Z X C V
KEY_MAP = {
    pygame.K_1: Key.K1, pygame.K_2: Key.K2, pygame.K_3: Key.K3, pygame.K_4: Key.C,
    pygame.K_q: Key.K4, pygame.K_w: Key.K5, pygame.K_e: Key.K6, pygame.K_r: Key.D,
    pygame.K_a: Key.K7, pygame.K_s: Key.K8, pygame.K_d: Key.K9, pygame.K_f: Key.E,
    pygame.K_z: Key.A, pygame.K_x: Key.K0, pygame.K_c: Key.B, pygame.K_v: Key.F,
}


# ═══════════════════════════════════════════════════════════════════════════════
# ROM LOADING
# ═══════════════════════════════════════════════════════════════════════════════

def load_rom_file(path: str) -> bytes:
    """Read a ROM image from disk.

    Raises:
        FileNotFoundError: no such file
        ValueError: the file is empty
    """
    rom_path = Path(path)
    if not rom_path.is_file():
        raise FileNotFoundError(f"ROM not found: {path}")
    data = rom_path.read_bytes()
    if not data:
        raise ValueError(f"ROM file is empty: {path}")
    return data


# ═══════════════════════════════════════════════════════════════════════════════
# RENDERING
# ═══════════════════════════════════════════════════════════════════════════════

def box_blur(arr: np.ndarray, passes: int = 1) -> np.ndarray:
    """Fast box blur using rolling averages"""
    a = arr.astype(np.float32)
    for _ in range(passes):
        a = (np.roll(a, 1, axis=1) + a + np.roll(a, -1, axis=1)) / 3.0
        a = (np.roll(a, 1, axis=0) + a + np.roll(a, -1, axis=0)) / 3.0
    return a


def framebuffer_to_rgb(framebuffer: np.ndarray,
                       fg: Tuple[int, int, int] = COLORS['green'],
                       bg: Tuple[int, int, int] = BG_COLOR,
                       bloom: float = 0.0) -> np.ndarray:
    """
    Colorize a 0/1 framebuffer

    Args:
        framebuffer: (height, width) array of pixels
        fg, bg: Lit and unlit colors
        bloom: Strength of the phosphor halo bleeding into unlit pixels

    Returns:
        (width, height, 3) uint8 array, the layout pygame.surfarray expects
    """
    lit = framebuffer.astype(np.float32)
    if bloom > 0:
        glow = np.clip(box_blur(lit, BLUR_PASSES) * bloom, 0.0, 1.0)
        lit = np.maximum(lit, glow)

    fg_arr = np.array(fg, dtype=np.float32)
    bg_arr = np.array(bg, dtype=np.float32)
    rgb = bg_arr + lit[..., None] * (fg_arr - bg_arr)
    return rgb.round().astype(np.uint8).transpose(1, 0, 2)


# ═══════════════════════════════════════════════════════════════════════════════
# AUDIO
# ═══════════════════════════════════════════════════════════════════════════════

class Beeper:
    """Square-wave tone that follows the device's sound flag"""

    def __init__(self, tone_hz: int = 440, sample_rate: int = 44100):
        self.sound: Optional[pygame.mixer.Sound] = None
        self.playing = False
        try:
            pygame.mixer.init(sample_rate, -16, 1, 256)
        except pygame.error as e:
            logger.warning("Audio disabled: %s", e)
            return

        # 100ms of square wave, looped while the sound timer runs
        t = np.arange(sample_rate // 10)
        wave = ((t * tone_hz * 2 // sample_rate) % 2).astype(np.int16) * 2 - 1
        self.sound = pygame.mixer.Sound(buffer=(wave * 8000).astype(np.int16).tobytes())
        self.sound.set_volume(0.2)

    def update(self, active: bool):
        if self.sound is None or active == self.playing:
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = active


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN EMULATOR WINDOW
# ═══════════════════════════════════════════════════════════════════════════════

class Chip8Window:
    """pygame window driving a Chip8Device at the configured frame rate"""

    def __init__(self, device: Chip8Device, rom: bytes, rom_name: str,
                 scale: int = SCALE, fg_color: Tuple[int, int, int] = COLORS['green']):
        pygame.init()
        self.device = device
        self.rom = rom
        self.rom_name = rom_name
        self.scale = max(1, scale)
        self.fg_color = fg_color

        self.screen = pygame.display.set_mode((DISPLAY_W * self.scale, DISPLAY_H * self.scale))
        self.clock = pygame.time.Clock()
        self.beeper = Beeper()

        self.running = True
        self.paused = False
        self._update_caption()

    def _update_caption(self, status: str = ""):
        caption = f"chip8vm - {self.rom_name}"
        if self.paused:
            caption += " [paused]"
        if status:
            caption += f" [{status}]"
        pygame.display.set_caption(caption)

    def _reset(self):
        """Reload the current ROM from scratch"""
        self.device.load_rom(self.rom)
        self.device.start()
        self._update_caption()

    def _toggle_pause(self):
        self.paused = not self.paused
        self._update_caption()

    def handle_events(self):
        """Process input events"""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_p:
                    self._toggle_pause()
                elif event.key == pygame.K_BACKSPACE:
                    self._reset()
                elif event.key in KEY_MAP:
                    self.device.set_key_state(KEY_MAP[event.key], True)

            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    self.device.set_key_state(KEY_MAP[event.key], False)

    def update(self, frame_delta: float):
        """Advance the device one frame"""
        if self.paused:
            self.beeper.update(False)
            return
        for message in self.device.tick(frame_delta):
            if message.kind is MessageKind.FAULT:
                self._update_caption(f"halted: {message.detail}")
            elif message.kind is MessageKind.UNKNOWN_OPCODE:
                logger.debug("Skipped unknown opcode $%04X", message.detail)
        self.beeper.update(self.device.is_sound_active())

    def render(self):
        """Render display"""
        rgb = framebuffer_to_rgb(self.device.read_framebuffer(), self.fg_color,
                                 bloom=BLOOM_STRENGTH)
        surface = pygame.surfarray.make_surface(rgb)
        self.screen.blit(pygame.transform.scale(surface, self.screen.get_size()), (0, 0))
        pygame.display.flip()

    def run(self):
        """Main loop"""
        frame_rate = self.device.config.frame_rate
        while self.running:
            frame_delta = self.clock.tick(frame_rate) / 1000.0
            self.handle_events()
            self.update(frame_delta)
            self.render()

        self.beeper.update(False)
        pygame.quit()


# ═══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8vm",
        description="CHIP-8 virtual machine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
    CHIP-8 Keypad: 1234 / QWER / ASDF / ZXCV
    P = Pause/Resume   Backspace = Reset   ESC = Exit
        """
    )
    parser.add_argument("rom", help="Path to a CHIP-8 ROM (.ch8)")
    parser.add_argument(
        "--speed", "-s", type=int, default=DEFAULT_CLOCK_HZ,
        help=f"Instructions per second. Default: {DEFAULT_CLOCK_HZ}"
    )
    parser.add_argument(
        "--scale", type=int, default=SCALE,
        help=f"Window pixels per CHIP-8 pixel. Default: {SCALE}"
    )
    parser.add_argument(
        "--profile", choices=sorted(PROFILES), default="default",
        help="Compatibility quirk profile. Default: default"
    )
    parser.add_argument(
        "--font", choices=[f.name.lower() for f in FontName], default="chip8",
        help="System font. Default: chip8"
    )
    parser.add_argument(
        "--color", choices=sorted(COLORS), default="green",
        help="Pixel color. Default: green"
    )
    parser.add_argument("--seed", type=int, help="Seed for the random number instruction")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity. Default: WARNING"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> EmulatorConfig:
    """Translate CLI options into an EmulatorConfig"""
    return EmulatorConfig(
        cycles_per_frame=max(1, args.speed // TIMER_HZ),
        frame_rate=TIMER_HZ,
        font=FontName[args.font.upper()],
        quirks=get_profile(args.profile),
        seed=args.seed,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="[%(levelname)s] %(name)s: %(message)s")

    print("chip8vm - CHIP-8 virtual machine")
    print("  CHIP-8 Keypad: 1234 / QWER / ASDF / ZXCV")
    print("  P = Pause/Resume, Backspace = Reset, ESC = Exit")
    print()

    try:
        rom = load_rom_file(args.rom)
        config = config_from_args(args)
        device = Chip8Device(config)
        device.load_rom(rom)
    except (OSError, ValueError, RomTooLargeError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Running {Path(args.rom).name} at {config.clock_hz} Hz, profile: {args.profile}")

    device.start()
    window = Chip8Window(device, rom, Path(args.rom).stem,
                         scale=args.scale, fg_color=COLORS[args.color])
    window.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
