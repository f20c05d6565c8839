"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, reset
from chipax.decode import decode, combine_bytes, InstructionClass
from chipax.constants import PROGRAM_START, MAX_ROM_SIZE, ADDRESS_MASK
from chipax.errors import RomTooLarge
from chipax.instructions.system import execute_system_instruction
from chipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipax.instructions.alu import execute_alu_operation
from chipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipax.instructions.display import execute_display
from chipax.instructions.misc import execute_misc_instruction
from chipax.logging import fori_loop_with_progress


DISPATCH_TABLE = {
    InstructionClass.SYSTEM: execute_system_instruction,
    InstructionClass.JUMP: execute_jump,
    InstructionClass.CALL: execute_call,
    InstructionClass.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    InstructionClass.SKIP_NE_IMM: execute_skip_if_not_equal_immediate,
    InstructionClass.SKIP_EQ_REG: execute_skip_if_equal_register,
    InstructionClass.SET_IMM: execute_set,
    InstructionClass.ADD_IMM: execute_add,
    InstructionClass.ALU: execute_alu_operation,
    InstructionClass.SKIP_NE_REG: execute_skip_if_not_equal_register,
    InstructionClass.SET_INDEX: execute_set_index,
    InstructionClass.JUMP_OFFSET: execute_jump_with_offset,
    InstructionClass.RANDOM: execute_random,
    InstructionClass.DRAW: execute_display,
    InstructionClass.KEY: execute_skip_if_key,
    InstructionClass.MISC: execute_misc_instruction,
}


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    ``state.pc`` is expected to already point past ``instruction``, see :func:`fetch`.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [DISPATCH_TABLE[opcode] for opcode in InstructionClass],
        state, decoded_instruction
    )


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Fetch next instruction from memory and advance the PC past it."""
    high = jnp.astype(state.memory[state.pc & ADDRESS_MASK], jnp.uint16)
    low = jnp.astype(state.memory[(state.pc + 1) & ADDRESS_MASK], jnp.uint16)
    return state.replace(pc=state.pc + 2), combine_bytes(high, low)


@jax.jit
def step(state: EmulatorState) -> EmulatorState:
    """Fetch, decode and execute one instruction."""
    state, instruction = fetch(state)
    return execute(state, instruction)


def _run_instruction(state, _):
    return step(state), None


@partial(jax.jit, static_argnums=1)
def run_instructions(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` instructions in a single compiled scan."""
    state, _ = jax.lax.scan(_run_instruction, state, length=n)
    return state


def run_with_progress(state: EmulatorState, n: int, desc: str = None) -> EmulatorState:
    """Run ``n`` instructions inside a jitted loop with a live tqdm bar."""
    @fori_loop_with_progress(n, desc=desc or f"Running {n:,} instructions")
    def body(i, state):
        return step(state)

    return jax.jit(lambda s: jax.lax.fori_loop(0, n, body, s))(state)


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Reset ``state`` and copy ``rom_data`` into memory starting at 0x200.

    Raises:
        RomTooLarge: if the image does not fit below the end of memory.
    """
    state = reset(state)
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLarge(len(rom_data))
    if len(rom_data) == 0:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom_file(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data from a file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_rom(state, rom_data)
