"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import FONT_START, FONT_GLYPH_SIZE, ADDRESS_MASK, NUM_REGISTERS
from chipax.instructions.system import no_op


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register. VF is not touched."""
    return state.replace(I=state.I + jnp.astype(state.V[instruction.x], jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With no key down the PC is moved back onto this instruction, so the next
    step runs it again. The lowest pressed key wins.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.arange(3) + state.I) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits))


def _register_block(state: EmulatorState, instruction: DecodedInstruction):
    """Mask of V0..VX and the memory addresses they map to from I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    addresses = (state.I + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    return register_mask, addresses


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I. I is unchanged."""
    register_mask, addresses = _register_block(state, instruction)
    new_values = jnp.where(register_mask, state.V, state.memory[addresses])
    return state.replace(memory=state.memory.at[addresses].set(new_values))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I. I is unchanged."""
    register_mask, addresses = _register_block(state, instruction)
    return state.replace(V=jnp.where(register_mask, state.memory[addresses], state.V))


MISC_OPERATIONS = (
    (0x07, execute_get_delay_timer),
    (0x0A, execute_wait_for_key),
    (0x15, execute_set_delay_timer),
    (0x18, execute_set_sound_timer),
    (0x1E, execute_add_to_index),
    (0x29, execute_font_character),
    (0x33, execute_bcd_conversion),
    (0x55, execute_store_registers),
    (0x65, execute_load_registers),
)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch FXNN on its low byte. Unknown codes fall through to ``no_op``."""
    matches = jnp.array([instruction.nn == code for code, _ in MISC_OPERATIONS])
    switch_index = jnp.where(jnp.any(matches), jnp.argmax(matches), len(MISC_OPERATIONS))

    return jax.lax.switch(
        switch_index,
        [handler for _, handler in MISC_OPERATIONS] + [no_op],
        state, instruction
    )
