"""
Opcode decoding.

A 16-bit opcode is turned into an ``Instruction``: one member of the
closed ``Op`` enum plus the operand fields every instruction draws from.
Anything that is not one of the 34 baseline instructions decodes to
``Op.UNKNOWN`` so the interpreter can skip it.
"""

from dataclasses import dataclass
from enum import Enum, auto


class Op(Enum):
    """Every instruction kind the interpreter executes"""
    CLS = auto()        # 00E0
    RET = auto()        # 00EE
    JP = auto()         # 1NNN
    CALL = auto()       # 2NNN
    SE_BYTE = auto()    # 3XKK
    SNE_BYTE = auto()   # 4XKK
    SE_REG = auto()     # 5XY0
    LD_BYTE = auto()    # 6XKK
    ADD_BYTE = auto()   # 7XKK
    LD_REG = auto()     # 8XY0
    OR = auto()         # 8XY1
    AND = auto()        # 8XY2
    XOR = auto()        # 8XY3
    ADD_REG = auto()    # 8XY4
    SUB = auto()        # 8XY5
    SHR = auto()        # 8XY6
    SUBN = auto()       # 8XY7
    SHL = auto()        # 8XYE
    SNE_REG = auto()    # 9XY0
    LD_I = auto()       # ANNN
    JP_V0 = auto()      # BNNN
    RND = auto()        # CXKK
    DRW = auto()        # DXYN
    SKP = auto()        # EX9E
    SKNP = auto()       # EXA1
    LD_VX_DT = auto()   # FX07
    LD_VX_K = auto()    # FX0A
    LD_DT_VX = auto()   # FX15
    LD_ST_VX = auto()   # FX18
    ADD_I = auto()      # FX1E
    LD_F = auto()       # FX29
    LD_B = auto()       # FX33
    LD_MEM_VX = auto()  # FX55
    LD_VX_MEM = auto()  # FX65
    UNKNOWN = auto()


@dataclass(frozen=True)
class Instruction:
    """A decoded opcode and its operand fields"""
    op: Op
    opcode: int
    x: int      # bits 8-11
    y: int      # bits 4-7
    n: int      # bits 0-3
    kk: int     # bits 0-7
    nnn: int    # bits 0-11


_ALU_OPS = {
    0x0: Op.LD_REG, 0x1: Op.OR, 0x2: Op.AND, 0x3: Op.XOR,
    0x4: Op.ADD_REG, 0x5: Op.SUB, 0x6: Op.SHR, 0x7: Op.SUBN, 0xE: Op.SHL,
}

_KEY_OPS = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC_OPS = {
    0x07: Op.LD_VX_DT, 0x0A: Op.LD_VX_K, 0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX, 0x1E: Op.ADD_I, 0x29: Op.LD_F,
    0x33: Op.LD_B, 0x55: Op.LD_MEM_VX, 0x65: Op.LD_VX_MEM,
}

# Families fully determined by the top nibble
_SIMPLE_OPS = {
    0x1: Op.JP, 0x2: Op.CALL, 0x3: Op.SE_BYTE, 0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE, 0x7: Op.ADD_BYTE, 0xA: Op.LD_I, 0xB: Op.JP_V0,
    0xC: Op.RND, 0xD: Op.DRW,
}


def decode_op(opcode: int) -> Op:
    """Classify an opcode without extracting its operands"""
    family = (opcode >> 12) & 0xF
    n = opcode & 0x000F
    kk = opcode & 0x00FF

    if family == 0x0:
        if opcode == 0x00E0:
            return Op.CLS
        if opcode == 0x00EE:
            return Op.RET
        # 0NNN (call machine code routine) is not supported
        return Op.UNKNOWN
    if family == 0x5:
        return Op.SE_REG if n == 0 else Op.UNKNOWN
    if family == 0x8:
        return _ALU_OPS.get(n, Op.UNKNOWN)
    if family == 0x9:
        return Op.SNE_REG if n == 0 else Op.UNKNOWN
    if family == 0xE:
        return _KEY_OPS.get(kk, Op.UNKNOWN)
    if family == 0xF:
        return _MISC_OPS.get(kk, Op.UNKNOWN)
    return _SIMPLE_OPS[family]


def decode(opcode: int) -> Instruction:
    """Decode a 16-bit opcode into an Instruction"""
    opcode &= 0xFFFF
    return Instruction(
        op=decode_op(opcode),
        opcode=opcode,
        x=(opcode >> 8) & 0x0F,
        y=(opcode >> 4) & 0x0F,
        n=opcode & 0x000F,
        kk=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )
