"""
CHIP-8 CPU core: register file, call stack, timers and the
fetch-decode-execute engine.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    PROGRAM_START, STACK_SIZE, NUM_REGISTERS, FLAG_REGISTER,
)
from .decode import Instruction, Op, decode
from .display import Framebuffer
from .errors import MachineFault, StackOverflowError
from .fonts import glyph_address
from .keypad import Key, Keypad
from .memory import Memory
from .quirks import Quirks

logger = logging.getLogger(__name__)

VF = FLAG_REGISTER


# ═══════════════════════════════════════════════════════════════════════════════
# CPU STATE
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class CPUState:
    """CHIP-8 CPU state container"""
    # Registers
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    I: int = 0              # Index register (12 significant bits)
    PC: int = PROGRAM_START  # Program counter

    # Stack (return addresses, top is last)
    stack: List[int] = field(default_factory=list)

    # Timers (decremented once per frame)
    delay_timer: int = 0
    sound_timer: int = 0

    # Wait for key state (FX0A)
    waiting_for_key: bool = False
    key_register: int = 0


# ═══════════════════════════════════════════════════════════════════════════════
# CHIP-8 CPU CORE
# ═══════════════════════════════════════════════════════════════════════════════

class Chip8CPU:
    """Baseline CHIP-8 interpreter.

    The CPU operates on the memory, framebuffer and keypad it is given;
    all of them belong to the owning device. ``step`` runs exactly one
    fetch-decode-execute cycle and ``update_timers`` one timer pass, the
    device decides how the two interleave.

    FX0A suspends the CPU: it sets ``state.waiting_for_key`` and the
    device stops stepping until ``resolve_key_wait`` delivers a key press.
    """

    def __init__(self, memory: Memory, framebuffer: Framebuffer, keypad: Keypad,
                 quirks: Optional[Quirks] = None, stack_size: int = STACK_SIZE,
                 rng: Optional[random.Random] = None):
        self.memory = memory
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.quirks = quirks or Quirks()
        self.stack_size = stack_size
        self.rng = rng or random.Random()
        self.state = CPUState()

    def reset(self):
        """Reset registers, stack and timers (memory is left alone)"""
        self.state = CPUState()

    # ─── Fetch / decode / execute ───

    def fetch(self) -> int:
        """Fetch next 16-bit opcode and advance PC past it"""
        opcode = self.memory.read_word(self.state.PC)
        self.state.PC += 2
        return opcode

    def step(self) -> Instruction:
        """Execute one CPU cycle.

        Raises:
            MachineFault: the instruction touched memory outside the
                address space or overflowed the stack
        """
        pc = self.state.PC
        try:
            instruction = decode(self.fetch())
            logger.debug("$%03X: %04X %s", pc, instruction.opcode, instruction.op.name)
            self.execute(instruction)
        except MachineFault as fault:
            if fault.pc is None:
                fault.pc = pc
            raise
        return instruction

    def execute(self, ins: Instruction):
        """Run a decoded instruction; PC already points past it"""
        state = self.state
        V = state.V
        op = ins.op
        x, y = ins.x, ins.y

        # ─── 0x0XXX ───
        if op is Op.CLS:
            self.framebuffer.clear()

        elif op is Op.RET:
            if state.stack:
                state.PC = state.stack.pop()
            else:
                logger.warning("RET with empty stack at $%03X ignored", state.PC - 2)

        # ─── Jumps and calls ───
        elif op is Op.JP:
            state.PC = ins.nnn

        elif op is Op.CALL:
            if len(state.stack) >= self.stack_size:
                raise StackOverflowError(len(state.stack))
            state.stack.append(state.PC)
            state.PC = ins.nnn

        elif op is Op.JP_V0:
            if self.quirks.jump_uses_vx:
                state.PC = ins.nnn + V[x]
            else:
                state.PC = ins.nnn + V[0]

        # ─── Conditional skips ───
        elif op is Op.SE_BYTE:
            if V[x] == ins.kk:
                state.PC += 2

        elif op is Op.SNE_BYTE:
            if V[x] != ins.kk:
                state.PC += 2

        elif op is Op.SE_REG:
            if V[x] == V[y]:
                state.PC += 2

        elif op is Op.SNE_REG:
            if V[x] != V[y]:
                state.PC += 2

        elif op is Op.SKP:
            if self.keypad.is_pressed(V[x]):
                state.PC += 2

        elif op is Op.SKNP:
            if not self.keypad.is_pressed(V[x]):
                state.PC += 2

        # ─── Loads and immediate arithmetic ───
        elif op is Op.LD_BYTE:
            V[x] = ins.kk

        elif op is Op.ADD_BYTE:
            V[x] = (V[x] + ins.kk) & 0xFF

        # ─── 8XYZ: ALU operations ───
        elif op is Op.LD_REG:
            V[x] = V[y]

        elif op is Op.OR:
            V[x] |= V[y]
            if self.quirks.vf_reset:
                V[VF] = 0

        elif op is Op.AND:
            V[x] &= V[y]
            if self.quirks.vf_reset:
                V[VF] = 0

        elif op is Op.XOR:
            V[x] ^= V[y]
            if self.quirks.vf_reset:
                V[VF] = 0

        elif op is Op.ADD_REG:
            result = V[x] + V[y]
            V[x] = result & 0xFF
            V[VF] = 1 if result > 0xFF else 0

        elif op is Op.SUB:
            no_borrow = 1 if V[x] >= V[y] else 0
            V[x] = (V[x] - V[y]) & 0xFF
            V[VF] = no_borrow

        elif op is Op.SUBN:
            no_borrow = 1 if V[y] >= V[x] else 0
            V[x] = (V[y] - V[x]) & 0xFF
            V[VF] = no_borrow

        elif op is Op.SHR:
            src = V[y] if self.quirks.shift_uses_vy else V[x]
            V[x] = src >> 1
            V[VF] = src & 0x1

        elif op is Op.SHL:
            src = V[y] if self.quirks.shift_uses_vy else V[x]
            V[x] = (src << 1) & 0xFF
            V[VF] = (src & 0x80) >> 7

        # ─── Index register ───
        elif op is Op.LD_I:
            state.I = ins.nnn

        elif op is Op.ADD_I:
            state.I = (state.I + V[x]) & 0xFFFF

        elif op is Op.LD_F:
            state.I = glyph_address(self.memory.font_offset, V[x])

        # ─── CXKK: RND Vx, byte ───
        elif op is Op.RND:
            V[x] = self.rng.randint(0, 255) & ins.kk

        # ─── DXYN: DRW Vx, Vy, nibble ───
        elif op is Op.DRW:
            self._draw_sprite(V[x], V[y], ins.n)

        # ─── Timers ───
        elif op is Op.LD_VX_DT:
            V[x] = state.delay_timer

        elif op is Op.LD_DT_VX:
            state.delay_timer = V[x]

        elif op is Op.LD_ST_VX:
            state.sound_timer = V[x]

        # ─── FX0A: LD Vx, K (wait for key press) ───
        elif op is Op.LD_VX_K:
            state.waiting_for_key = True
            state.key_register = x

        # ─── Memory transfers ───
        elif op is Op.LD_B:
            value = V[x]
            self.memory.write_block(state.I, (value // 100, (value // 10) % 10, value % 10))

        elif op is Op.LD_MEM_VX:
            self.memory.write_block(state.I, V[:x + 1])
            if self.quirks.load_store_increment:
                state.I = (state.I + x + 1) & 0xFFFF

        elif op is Op.LD_VX_MEM:
            V[:x + 1] = self.memory.read_block(state.I, x + 1)
            if self.quirks.load_store_increment:
                state.I = (state.I + x + 1) & 0xFFFF

        elif op is Op.UNKNOWN:
            logger.warning("Unknown opcode $%04X at $%03X skipped", ins.opcode, state.PC - 2)

        else:
            # Unreachable: every Op member has a branch above
            raise AssertionError(f"Unhandled {op!r}")

    def _draw_sprite(self, x: int, y: int, height: int):
        """Draw sprite at (x, y) with given height, setting VF on collision"""
        V = self.state.V
        rows = self.memory.read_block(self.state.I, height)
        V[VF] = 0  # Reset collision flag
        if self.framebuffer.draw_sprite(x, y, rows, clip=self.quirks.clip_sprites):
            V[VF] = 1  # Collision!

    # ─── Timers and input ───

    def update_timers(self):
        """Decrement timers (call once per frame)"""
        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1

        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1

    def resolve_key_wait(self, key: Key):
        """Complete a pending FX0A with the key that was pressed"""
        if not self.state.waiting_for_key:
            return
        self.state.V[self.state.key_register] = int(key)
        self.state.waiting_for_key = False
        logger.debug("Key %s stored in V%X, resuming", key.label, self.state.key_register)
