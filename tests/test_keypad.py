"""Tests for the keypad."""

import pytest

from chip8vm.keypad import Key, Keypad, to_key


class TestKeypad:

    def test_untouched_key_reads_released(self):
        assert Keypad().is_pressed(Key.A) is False

    def test_press_and_release(self):
        keypad = Keypad()
        keypad.set_key(Key.K1, True)
        assert keypad.is_pressed(Key.K1)
        assert keypad.is_pressed(1)
        keypad.set_key(Key.K1, False)
        assert not keypad.is_pressed(Key.K1)

    def test_lookup_uses_low_nibble(self):
        keypad = Keypad()
        keypad.set_key(Key.F, True)
        assert keypad.is_pressed(0xFF)

    def test_release_all(self):
        keypad = Keypad()
        keypad.set_key(Key.C, True)
        keypad.release_all()
        assert not keypad.is_pressed(Key.C)


class TestToKey:

    def test_accepts_ints_and_keys(self):
        assert to_key(0xB) is Key.B
        assert to_key(Key.K0) is Key.K0

    @pytest.mark.parametrize("bad", [-1, 16, 255])
    def test_rejects_out_of_range(self, bad):
        with pytest.raises(ValueError):
            to_key(bad)

    def test_labels(self):
        assert [k.label for k in Key] == list("0123456789ABCDEF")
