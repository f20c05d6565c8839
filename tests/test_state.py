"""Tests for state construction, reset and program loading."""

import jax
import jax.numpy as jnp
import pytest
from chipax import (
    EmulatorState, create_state, reset, load_rom, load_rom_file, execute, step, set_key, RomTooLarge,
    FONT_DATA, FONT_START, MAX_ROM_SIZE, PROGRAM_START,
)
from conftest import assemble


def assert_baseline(state):
    """State matches a fresh construction, the PRNG key aside."""
    baseline = create_state()
    for name in ("memory", "pc", "display", "dirty", "delay_timer", "sound_timer",
                 "keypad", "V", "I", "fault"):
        assert jnp.array_equal(getattr(state, name), getattr(baseline, name)), name
    assert jnp.array_equal(state.stack.data, baseline.stack.data)
    assert state.stack.pointer == baseline.stack.pointer


def test_fresh_state_layout(fresh_state):
    assert fresh_state.pc == PROGRAM_START
    assert fresh_state.I == 0
    assert fresh_state.stack.pointer == 0
    assert fresh_state.display.shape == (32, 64)
    assert list(map(int, fresh_state.memory[FONT_START:FONT_START + 80])) == FONT_DATA
    assert jnp.sum(fresh_state.memory[FONT_START + 80:]) == 0


def test_direct_construction_gets_independent_defaults():
    a = EmulatorState(jax.random.PRNGKey(1))
    b = EmulatorState(jax.random.PRNGKey(2))

    assert a.pc == PROGRAM_START
    assert a.memory.shape == (4096,) and jnp.sum(a.memory) == 0
    assert a.display.shape == (32, 64)
    assert a.stack.data.shape == (16,) and a.stack.pointer == 0
    assert a.fault == 0

    a = a.replace(V=a.V.at[0].set(7))
    assert b.V[0] == 0


def test_load_copies_image(fresh_state):
    state = load_rom(fresh_state, b"\x12\x34\xAB")

    assert [int(b) for b in state.memory[PROGRAM_START:PROGRAM_START + 4]] == [0x12, 0x34, 0xAB, 0]
    assert state.pc == PROGRAM_START


def test_load_largest_image(fresh_state):
    rom = bytes(range(256)) * (MAX_ROM_SIZE // 256)
    state = load_rom(fresh_state, rom)
    assert int(state.memory[-1]) == 0xFF


def test_load_resets_previous_run(fresh_state):
    state = load_rom(fresh_state, assemble(0x60AA, 0xF015, 0x2300))
    state = step(step(step(state)))
    state = set_key(state, 3, True)

    state = load_rom(state, assemble(0x1200))

    assert state.V[0] == 0
    assert state.delay_timer == 0
    assert state.stack.pointer == 0
    assert not state.keypad[3]
    assert state.memory[0x202] == 0


def test_load_then_reset_matches_fresh(fresh_state):
    state = load_rom(fresh_state, assemble(0x6123, 0xA456, 0xD015))
    state = step(step(step(state)))
    state = set_key(state, 0xA, True)

    assert_baseline(reset(state))


def test_reset_keeps_random_stream(fresh_state):
    state = execute(fresh_state, 0xC0FF)
    assert jnp.array_equal(reset(state).rng, state.rng)


def test_oversized_rom_rejected(fresh_state):
    with pytest.raises(RomTooLarge) as excinfo:
        load_rom(fresh_state, bytes(MAX_ROM_SIZE + 1))
    assert excinfo.value.size == MAX_ROM_SIZE + 1


def test_load_rom_file(fresh_state, tmp_path):
    rom_path = tmp_path / "test.ch8"
    rom_path.write_bytes(assemble(0x00E0, 0x1200))

    state = load_rom_file(fresh_state, str(rom_path))

    assert [int(b) for b in state.memory[0x200:0x204]] == [0x00, 0xE0, 0x12, 0x00]


def test_independent_states_do_not_share_memory():
    a = create_state(jax.random.PRNGKey(1))
    b = create_state(jax.random.PRNGKey(2))
    a = load_rom(a, b"\xFF")
    assert b.memory[PROGRAM_START] == 0
