"""Tests for control flow instructions."""

import pytest
from chipax import execute
from conftest import set_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_sets_absolute_address(self, fresh_state):
        """1NNN ignores the current PC."""
        state = fresh_state.replace(pc=fresh_state.pc + 0x100)
        state = execute(state, 0x1ABC)
        assert state.pc == 0xABC


class TestSkipInstructions:
    """Test all skip instruction variants."""

    @pytest.mark.parametrize("value,expected_skip", [(0x42, True), (0x41, False)])
    def test_skip_if_equal_immediate(self, fresh_state, value, expected_skip):
        """3XNN - Skip when VX == NN."""
        state = set_registers(fresh_state, V5=value)
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + (2 if expected_skip else 0)

    @pytest.mark.parametrize("value,expected_skip", [(0x10, True), (0x20, False)])
    def test_skip_if_not_equal_immediate(self, fresh_state, value, expected_skip):
        """4XNN - Skip when VX != NN."""
        state = set_registers(fresh_state, V3=value)
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + (2 if expected_skip else 0)

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x55)
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x44)
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = set_registers(fresh_state, V7=0xAA, V8=0xBB)
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = set_registers(fresh_state, V7=0xCC, V8=0xCC)
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = set_registers(fresh_state, V0=0xFF)
        initial_pc = state.pc

        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == initial_pc + 2


class TestJumpWithOffset:
    """Test BNNN."""

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0, other registers ignored."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260

    def test_jump_with_offset_wraps_to_12_bits(self, fresh_state):
        """BNNN - Target address is masked to 12 bits."""
        state = set_registers(fresh_state, V0=0x20)
        state = execute(state, 0xBFF0)
        assert state.pc == 0x010


class TestKeySkips:
    """Test EX9E / EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        state = set_registers(fresh_state, V0=5)
        state = state.replace(keypad=state.keypad.at[5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 2

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 2  # pressed, so no second skip

    def test_skip_if_key_not_pressed(self, fresh_state):
        state = set_registers(fresh_state, V0=5)
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 2

    def test_unknown_key_instruction_is_noop(self, fresh_state):
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0].set(True))
        state = execute(state, 0xE0FF)
        assert state.pc == fresh_state.pc
