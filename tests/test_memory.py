"""Tests for register load and immediate operations."""

import pytest
from chipax import execute
from conftest import set_registers


class TestBasicMemory:
    """Test basic register operations."""

    def test_set_basic(self, fresh_state):
        """6XNN - Set VX = NN."""
        state = execute(fresh_state, 0x600A)  # V0 = 0xA
        assert state.V[0] == 0xA

    def test_add_basic(self, fresh_state):
        """7XNN - Add NN to VX."""
        state = set_registers(fresh_state, V1=0x10)
        state = execute(state, 0x7105)  # V1 += 5
        assert state.V[1] == 0x15

    def test_add_wraps_without_carry(self, fresh_state):
        """7XNN - Wraps at 8 bits and leaves VF alone."""
        state = set_registers(fresh_state, V1=0xFF, VF=0x07)
        state = execute(state, 0x7102)
        assert state.V[1] == 0x01
        assert state.V[15] == 0x07


class TestIndexRegister:
    """Test I register operations."""

    @pytest.mark.parametrize("value", [0x000, 0x123, 0x200, 0xEA0, 0xFFF])
    def test_set_index(self, fresh_state, value):
        """ANNN - Set I register to NNN."""
        state = execute(fresh_state, 0xA000 | value)
        assert state.I == value

    def test_set_index_multiple_operations(self, fresh_state):
        """ANNN - Test multiple consecutive I register sets."""
        state = execute(fresh_state, 0xA111)
        assert state.I == 0x111

        state = execute(state, 0xA222)
        assert state.I == 0x222


class TestRandom:
    """Test random number generation."""

    def test_random_zero_mask(self, fresh_state):
        """CXNN - Random AND with 0x00 should always be 0."""
        state = execute(fresh_state, 0xC000)
        assert state.V[0] == 0

    @pytest.mark.parametrize("mask", [0x01, 0x0F, 0x80, 0xAA])
    def test_random_respects_mask(self, fresh_state, mask):
        """CXNN - Only bits set in NN can be set in VX."""
        state = fresh_state
        for _ in range(8):
            state = execute(state, 0xC200 | mask)
            assert int(state.V[2]) & ~mask == 0

    def test_random_advances_rng(self, fresh_state):
        """CXNN - Each call consumes the PRNG key."""
        state = execute(fresh_state, 0xC0FF)
        assert not (state.rng == fresh_state.rng).all()

    def test_random_preserves_state(self, fresh_state):
        """CXNN - Verify other state is preserved."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)
        state = execute(state, 0xA300)

        state = execute(state, 0xC0FF)

        assert state.V[1] == 0x42
        assert state.V[2] == 0x99
        assert state.I == 0x300
