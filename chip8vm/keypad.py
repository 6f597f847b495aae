"""
Hex keypad state.

    CHIP-8 Keypad:
    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F
"""

from enum import IntEnum
from typing import Dict, Union

from .constants import NUM_KEYS


class Key(IntEnum):
    """The 16 keypad keys, valued by the hex digit they enter"""
    K0 = 0x0
    K1 = 0x1
    K2 = 0x2
    K3 = 0x3
    K4 = 0x4
    K5 = 0x5
    K6 = 0x6
    K7 = 0x7
    K8 = 0x8
    K9 = 0x9
    A = 0xA
    B = 0xB
    C = 0xC
    D = 0xD
    E = 0xE
    F = 0xF

    @property
    def label(self) -> str:
        return f"{self.value:X}"


def to_key(key_id: Union[Key, int]) -> Key:
    """Validate a key id coming from outside the machine"""
    if isinstance(key_id, Key):
        return key_id
    if not 0 <= key_id < NUM_KEYS:
        raise ValueError(f"Invalid key id: {key_id!r}")
    return Key(key_id)


class Keypad:
    """Pressed state per key; a key never touched reads as released"""

    def __init__(self):
        self._keys: Dict[Key, bool] = {}

    def set_key(self, key: Key, pressed: bool):
        self._keys[key] = pressed

    def is_pressed(self, key: Union[Key, int]) -> bool:
        return self._keys.get(Key(key & 0xF), False)

    def release_all(self):
        self._keys.clear()
