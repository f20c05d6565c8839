"""Tests for timers, keypad latch and the dirty flag."""

import pytest
from chipax import tick_timers, is_sound_active, set_key, consume_dirty_flag, execute


def test_tick_decrements_by_one(fresh_state):
    state = fresh_state.replace(delay_timer=fresh_state.delay_timer + 3,
                                sound_timer=fresh_state.sound_timer + 1)

    state = tick_timers(state)

    assert state.delay_timer == 2
    assert state.sound_timer == 0


def test_tick_stops_at_zero(fresh_state):
    state = fresh_state.replace(delay_timer=fresh_state.delay_timer + 2)

    for _ in range(5):
        state = tick_timers(state)

    assert state.delay_timer == 0
    assert state.sound_timer == 0


def test_timers_are_independent(fresh_state):
    state = execute(fresh_state, 0x6005)
    state = execute(state, 0xF015)  # delay = 5
    state = execute(state, 0x6102)
    state = execute(state, 0xF118)  # sound = 2

    state = tick_timers(tick_timers(state))

    assert state.delay_timer == 3
    assert state.sound_timer == 0


def test_sound_active_follows_sound_timer(fresh_state):
    assert not is_sound_active(fresh_state)

    state = execute(fresh_state, 0x6001)
    state = execute(state, 0xF018)
    assert is_sound_active(state)

    assert not is_sound_active(tick_timers(state))


def test_set_key_latest_value_wins(fresh_state):
    state = set_key(fresh_state, 0x7, True)
    assert state.keypad[0x7]

    state = set_key(state, 0x7, False)
    assert not state.keypad[0x7]


@pytest.mark.parametrize("key", [-1, 16])
def test_set_key_rejects_bad_index(fresh_state, key):
    with pytest.raises(ValueError):
        set_key(fresh_state, key, True)


def test_consume_dirty_flag(fresh_state):
    state, dirty = consume_dirty_flag(fresh_state)
    assert not dirty

    state = execute(state, 0x00E0)
    state, dirty = consume_dirty_flag(state)
    assert dirty

    state, dirty = consume_dirty_flag(state)
    assert not dirty


def test_non_display_instructions_leave_dirty_clear(fresh_state):
    state = execute(fresh_state, 0x6001)
    state = execute(state, 0xA123)
    assert not bool(state.dirty)
