"""CHIP-8 instruction decoding."""

from enum import IntEnum

from chex import dataclass


class InstructionClass(IntEnum):
    """Instruction classes selected by the top nibble of a 16-bit word."""
    SYSTEM = 0x0
    JUMP = 0x1
    CALL = 0x2
    SKIP_EQ_IMM = 0x3
    SKIP_NE_IMM = 0x4
    SKIP_EQ_REG = 0x5
    SET_IMM = 0x6
    ADD_IMM = 0x7
    ALU = 0x8
    SKIP_NE_REG = 0x9
    SET_INDEX = 0xA
    JUMP_OFFSET = 0xB
    RANDOM = 0xC
    DRAW = 0xD
    KEY = 0xE
    MISC = 0xF


@dataclass(frozen=True)
class DecodedInstruction:
    """Instruction word split into its fixed bit-fields."""
    raw: int
    opcode: int  # bits 12-15
    x: int       # bits 8-11
    y: int       # bits 4-7
    n: int       # bits 0-3, sub-operation or sprite height
    nn: int      # bits 0-7
    nnn: int     # bits 0-11


def combine_bytes(high, low):
    """Join two memory bytes into a big-endian instruction word."""
    return (high << 8) | low


def decode(instruction: int) -> DecodedInstruction:
    """Extract the fields of a 16-bit instruction word.

    Works on Python ints as well as traced JAX scalars, so the same function
    serves the jitted interpreter loop and direct calls from tests.
    """
    word = instruction & 0xFFFF
    return DecodedInstruction(
        raw=word,
        opcode=(word >> 12) & 0xF,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        nn=word & 0xFF,
        nnn=word & 0xFFF,
    )
