"""Shared fixtures for the chip8vm test suite."""

import pytest

from chip8vm import Chip8Device, EmulatorConfig


def assemble(*words: int) -> bytes:
    """Pack 16-bit opcode words into big-endian ROM bytes"""
    return b"".join(word.to_bytes(2, "big") for word in words)


@pytest.fixture
def rom():
    return assemble


@pytest.fixture
def device():
    return Chip8Device(EmulatorConfig(seed=1234))


@pytest.fixture
def run_program(device):
    """Load opcode words at 0x200, start, and single-step through them.

    Steps one instruction per word unless ``steps`` says otherwise.
    """
    def _run(*words, steps=None):
        device.load_rom(assemble(*words))
        device.start()
        for _ in range(len(words) if steps is None else steps):
            device.step()
        return device
    return _run
