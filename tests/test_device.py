"""Tests for the device: lifecycle, frame timing, key wait and faults."""

import pytest

from chip8vm import (
    Chip8Device, DeviceMessage, EmulatorConfig, FontName, Key, MemoryAccessError, MessageKind,
    RomTooLargeError, RunState, StackOverflowError,
)
from chip8vm.fonts import FONTS, FONTSET


def make_device(**config):
    config.setdefault("seed", 1)
    return Chip8Device(EmulatorConfig(**config))


class TestLifecycle:

    def test_initial_state(self, device):
        assert device.is_running() is False
        assert device.run_state is RunState.STOPPED
        assert device.cpu.state.PC == 0x200
        assert bytes(device.memory.data[:80]) == FONTSET

    def test_load_rom_leaves_device_stopped(self, device, rom):
        device.load_rom(rom(0x6A01))
        assert not device.is_running()
        assert device.tick() == []
        assert device.cpu.state.V[0xA] == 0

    def test_start_then_tick(self, device, rom):
        device.load_rom(rom(0x6A01, 0x1202))
        device.start()
        assert device.run_state is RunState.RUNNING
        device.tick()
        assert device.cpu.state.V[0xA] == 1

    def test_stop(self, device, rom):
        device.load_rom(rom(0x7A01, 0x1200))
        device.start()
        device.tick()
        device.stop()
        before = device.cpu.state.V[0xA]
        device.tick()
        assert device.cpu.state.V[0xA] == before

    def test_rom_bytes_are_big_endian_at_0x200(self, device):
        device.load_rom(b"\x00\xE0\x00\xEE")
        assert device.memory.read_block(0x200, 4) == b"\x00\xE0\x00\xEE"
        assert device.memory.read_word(0x200) == 0x00E0

    def test_oversized_rom_rejected_without_touching_memory(self, device, rom):
        device.load_rom(rom(0x6A01))
        with pytest.raises(RomTooLargeError):
            device.load_rom(bytes(0xE01))
        assert device.memory.read_word(0x200) == 0x6A01

    def test_largest_rom_accepted(self, device):
        device.load_rom(bytes([0x12]) * 0xE00)
        assert device.rom_size == 0xE00

    def test_reset_keeps_font_and_config(self, rom):
        device = make_device(font=FontName.FISHIE, cycles_per_frame=3)
        device.load_rom(rom(0x6A01))
        device.start()
        device.tick()
        device.reset()
        assert not device.is_running()
        assert device.cpu.state.V[0xA] == 0
        assert device.memory.read_word(0x200) == 0
        assert bytes(device.memory.data[:80]) == FONTS[FontName.FISHIE]
        assert device.config.cycles_per_frame == 3

    def test_load_font_at_offset(self, device, rom):
        device.load_font(0x050)
        device.load_rom(rom(0x6A02, 0xFA29))
        device.start()
        device.step()
        device.step()
        assert bytes(device.memory.data[0x50:0xA0]) == FONTSET
        assert device.cpu.state.I == 0x50 + 2 * 5

    def test_instances_are_independent(self, rom):
        a, b = make_device(), make_device()
        a.load_rom(rom(0x6A01, 0xA000, 0xD015))
        a.start()
        a.tick()
        assert a.read_framebuffer().any()
        assert not b.read_framebuffer().any()
        assert b.cpu.state.V[0xA] == 0


class TestFrameTiming:

    def test_tick_runs_cycles_per_frame_instructions(self, rom):
        device = make_device(cycles_per_frame=4)
        device.load_rom(rom(*([0x7001] * 6), 0x120C))
        device.start()
        device.tick()
        assert device.cpu.state.V[0] == 4
        device.tick()
        assert device.cpu.state.V[0] == 6
        assert device.cpu.state.PC == 0x20C

    def test_timers_tick_once_per_frame(self, rom):
        device = make_device(cycles_per_frame=10)
        device.load_rom(rom(0x6A0A, 0xFA15, 0x1204))
        device.start()
        device.tick()
        assert device.cpu.state.delay_timer == 10
        for _ in range(3):
            device.tick()
        assert device.cpu.state.delay_timer == 7

    @pytest.mark.parametrize("passes", range(8))
    def test_delay_timer_never_negative(self, device, passes):
        device.cpu.state.delay_timer = 5
        for _ in range(passes):
            device.cpu.update_timers()
        assert device.cpu.state.delay_timer == max(0, 5 - passes)

    def test_sound_active_follows_sound_timer(self, rom):
        device = make_device(cycles_per_frame=10)
        device.load_rom(rom(0x6A02, 0xFA18, 0x1204))
        device.start()
        device.tick()
        assert device.is_sound_active()
        device.tick()
        assert device.is_sound_active()
        device.tick()
        assert not device.is_sound_active()

    def test_step_does_not_touch_timers(self, device, rom):
        device.load_rom(rom(0x1200))
        device.start()
        device.cpu.state.delay_timer = 3
        device.step()
        assert device.cpu.state.delay_timer == 3

    def test_frame_bookkeeping(self, device, rom):
        device.load_rom(rom(0x1200))
        device.start()
        device.tick(0.5)
        device.tick(0.25)
        assert device.frame_count == 2
        assert device.elapsed == pytest.approx(0.75)


class TestKeyWait:
    """FX0A suspends the device until a key is pressed."""

    PROGRAM = (
        0x6A05,     # 0x200: VA = 5
        0xFA15,     # 0x202: DT = VA
        0xF30A,     # 0x204: V3 = key (wait)
        0x6401,     # 0x206: V4 = 1
        0x1208,     # 0x208: loop
    )

    @pytest.fixture
    def waiting(self, rom):
        device = make_device(cycles_per_frame=10)
        device.load_rom(rom(*self.PROGRAM))
        device.start()
        messages = device.tick()
        assert messages == [DeviceMessage(MessageKind.WAITING_FOR_KEY, 3)]
        return device

    def test_enters_waiting_state(self, waiting):
        assert waiting.run_state is RunState.WAITING
        assert waiting.is_running()
        assert waiting.cpu.state.PC == 0x206

    def test_no_instructions_while_waiting(self, waiting):
        for _ in range(3):
            waiting.tick()
        assert waiting.cpu.state.PC == 0x206
        assert waiting.cpu.state.V[4] == 0

    def test_timers_keep_ticking_while_waiting(self, waiting):
        waiting.tick()
        waiting.tick()
        assert waiting.cpu.state.delay_timer == 3

    def test_key_press_resumes(self, waiting):
        waiting.set_key_state(Key.K7, True)
        assert waiting.run_state is RunState.RUNNING
        assert waiting.cpu.state.V[3] == 7
        assert waiting.tick() == []
        assert waiting.cpu.state.V[4] == 1

    def test_release_does_not_resume(self, waiting):
        waiting.set_key_state(Key.K7, False)
        assert waiting.run_state is RunState.WAITING

    def test_held_key_does_not_satisfy_wait(self, rom):
        device = make_device(cycles_per_frame=10)
        device.load_rom(rom(*self.PROGRAM))
        device.set_key_state(Key.A, True)
        device.start()
        device.tick()
        assert device.run_state is RunState.WAITING
        assert device.cpu.state.V[3] == 0

    def test_rereported_held_key_does_not_satisfy_wait(self, rom):
        device = make_device(cycles_per_frame=10)
        device.load_rom(rom(*self.PROGRAM))
        device.set_key_state(Key.A, True)
        device.start()
        device.tick()
        device.set_key_state(Key.A, True)
        assert device.run_state is RunState.WAITING
        assert device.cpu.state.V[3] == 0
        device.set_key_state(Key.A, False)
        device.set_key_state(Key.A, True)
        assert device.run_state is RunState.RUNNING
        assert device.cpu.state.V[3] == 0xA

    def test_stopped_device_does_not_consume_press(self, waiting):
        waiting.stop()
        waiting.set_key_state(Key.K9, True)
        assert waiting.keypad.is_pressed(Key.K9)
        assert waiting.cpu.state.waiting_for_key
        assert waiting.cpu.state.V[3] == 0
        waiting.start()
        assert waiting.run_state is RunState.WAITING
        waiting.set_key_state(Key.K9, False)
        waiting.set_key_state(Key.K9, True)
        assert waiting.cpu.state.V[3] == 9

    def test_step_reports_waiting(self, waiting):
        messages = waiting.step()
        assert messages[0].kind is MessageKind.WAITING_FOR_KEY
        assert waiting.cpu.state.PC == 0x206

    def test_invalid_key_id(self, device):
        with pytest.raises(ValueError):
            device.set_key_state(16, True)


class TestFaults:

    def test_unknown_opcode_does_not_stop(self, device, rom):
        device.load_rom(rom(0xFFFF, 0x6A01))
        device.start()
        messages = device.step()
        assert messages == [DeviceMessage(MessageKind.UNKNOWN_OPCODE, 0xFFFF)]
        assert device.cpu.state.PC == 0x202
        assert device.is_running()
        device.step()
        assert device.cpu.state.V[0xA] == 1

    def test_store_past_end_of_memory_faults(self, device, rom):
        device.load_rom(rom(0xAFFF, 0xF155))
        device.start()
        device.step()
        messages = device.step()
        assert messages[0].kind is MessageKind.FAULT
        assert isinstance(device.fault, MemoryAccessError)
        assert device.fault.pc == 0x202
        assert device.run_state is RunState.STOPPED
        assert device.memory.read(0xFFF) == 0

    def test_draw_past_end_of_memory_faults(self, device, rom):
        device.load_rom(rom(0xAFFE, 0xD005))
        device.start()
        device.step()
        device.step()
        assert isinstance(device.fault, MemoryAccessError)
        assert not device.read_framebuffer().any()

    def test_pc_running_off_memory_faults(self, rom):
        device = make_device(cycles_per_frame=5)
        device.load_rom(rom(0x1FFE))
        device.start()
        messages = device.tick()
        kinds = [m.kind for m in messages]
        assert kinds == [MessageKind.UNKNOWN_OPCODE, MessageKind.FAULT]
        assert device.fault.pc == 0x1000
        assert not device.is_running()

    def test_stack_overflow_faults(self, rom):
        device = make_device(cycles_per_frame=20)
        device.load_rom(rom(0x2200))
        device.start()
        device.tick()
        assert isinstance(device.fault, StackOverflowError)
        assert len(device.cpu.state.stack) == 16

    def test_start_refused_after_fault(self, device, rom):
        device.load_rom(rom(0xAFFF, 0xF155, 0x6A01))
        device.start()
        device.tick()
        fault = device.fault
        device.start()
        assert not device.is_running()
        assert device.fault is fault
        device.tick()
        assert device.cpu.state.V[0xA] == 0

    def test_reset_clears_fault(self, device, rom):
        device.load_rom(rom(0xAFFF, 0xF155))
        device.start()
        device.tick()
        assert device.fault is not None
        device.load_rom(rom(0x6A01))
        assert device.fault is None
