"""64x32 monochrome framebuffer with XOR sprite drawing."""

import numpy as np

from .constants import DISPLAY_W, DISPLAY_H


class Framebuffer:
    """Row-major (height, width) grid of 0/1 pixels"""

    def __init__(self, width: int = DISPLAY_W, height: int = DISPLAY_H):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint8)

    def clear(self):
        """Turn every pixel off"""
        self.pixels.fill(0)

    def get_pixel(self, x: int, y: int) -> int:
        """Read a pixel, wrapping both coordinates"""
        return int(self.pixels[y % self.height, x % self.width])

    def toggle_pixel(self, x: int, y: int) -> int:
        """XOR a pixel on, wrapping both coordinates.

        Python's modulo is non-negative for a positive divisor, so
        coordinates left of or above the screen wrap as well.

        Returns:
            The pixel value after the toggle (0 means it was erased)
        """
        py = y % self.height
        px = x % self.width
        self.pixels[py, px] ^= 1
        return int(self.pixels[py, px])

    def draw_sprite(self, x: int, y: int, rows: bytes, clip: bool = False) -> bool:
        """
        XOR an 8-pixel-wide sprite onto the screen

        Args:
            x, y: Top-left corner; wrapped onto the screen first
            rows: One byte per sprite row, MSB is the leftmost pixel
            clip: Drop pixels past the right/bottom edges instead of wrapping

        Returns:
            True if any set pixel was turned off (collision)
        """
        x %= self.width
        y %= self.height
        collision = False

        for row, sprite_byte in enumerate(rows):
            if clip and y + row >= self.height:
                break

            for col in range(8):
                if not sprite_byte & (0x80 >> col):
                    continue
                if clip and x + col >= self.width:
                    break
                if self.toggle_pixel(x + col, y + row) == 0:
                    collision = True

        return collision

    def snapshot(self) -> np.ndarray:
        """Read-only copy for renderers"""
        frame = self.pixels.copy()
        frame.flags.writeable = False
        return frame
