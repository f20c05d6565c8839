"""CHIP-8 interpreter built on JAX."""

from chipax.state import EmulatorState, create_state, reset
from chipax.emulator import execute, fetch, step, run_instructions, load_rom, load_rom_file
from chipax.peripherals import tick_timers, is_sound_active, set_key, consume_dirty_flag
from chipax.decode import DecodedInstruction, InstructionClass, decode
from chipax.errors import ChipaxError, RomTooLarge, StackOverflow, StackUnderflow
from chipax.machine import Machine
from chipax.constants import (
    MEMORY_SIZE, PROGRAM_START, MAX_ROM_SIZE, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
)
from chipax.rendering import chip8_display_to_rgb, create_color_scheme, batch_render

__all__ = [
    "EmulatorState",
    "create_state",
    "reset",
    "fetch",
    "execute",
    "step",
    "run_instructions",
    "load_rom",
    "load_rom_file",
    "tick_timers",
    "is_sound_active",
    "set_key",
    "consume_dirty_flag",
    "DecodedInstruction",
    "InstructionClass",
    "decode",
    "ChipaxError",
    "RomTooLarge",
    "StackOverflow",
    "StackUnderflow",
    "Machine",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "MAX_ROM_SIZE",
    "FONT_START",
    "FONT_DATA",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "batch_render",
]
