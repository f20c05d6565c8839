"""CHIP-8 ALU operations (8xxx).

Every operation maps ``(vx, vy, vf)`` to ``(result, vf)``. The dispatcher writes
the flag before the result, so ``8FYN`` leaves the result in VF.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import FLAG_REGISTER


def _flag(condition) -> jnp.ndarray:
    return jnp.astype(condition, jnp.uint8)


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, VF = carry."""
    total = jnp.astype(vx, jnp.uint16) + jnp.astype(vy, jnp.uint16)
    return jnp.astype(total & 0xFF, jnp.uint8), _flag(total > 0xFF)


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    return vx - vy, _flag(vx > vy)


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right: VX = VY >> 1, VF = bit shifted out."""
    return vy >> 1, _flag(vy & 0x01)


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    return vy - vx, _flag(vy > vx)


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left: VX = VY << 1, VF = bit shifted out."""
    return vy << 1, _flag((vy & 0x80) >> 7)


def alu_undefined(vx, vy, vf):
    """8XY8-8XYD, 8XYF - leave registers untouched."""
    return vx, vf


ALU_OPERATIONS = [
    alu_set, alu_or, alu_and, alu_xor,
    alu_add, alu_sub_xy, alu_shift_right, alu_sub_yx,
    alu_undefined, alu_undefined, alu_undefined, alu_undefined,
    alu_undefined, alu_undefined, alu_shift_left, alu_undefined,
]


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    vf = state.V[FLAG_REGISTER]

    result, flag = jax.lax.switch(instruction.n, ALU_OPERATIONS, vx, vy, vf)

    new_V = state.V.at[FLAG_REGISTER].set(flag)
    new_V = new_V.at[instruction.x].set(result)
    return state.replace(V=new_V)
