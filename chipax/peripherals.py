"""Timer, keypad and display-flag glue between the core and its host."""

import jax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.constants import NUM_KEYS


@jax.jit
def tick_timers(state: EmulatorState) -> EmulatorState:
    """Advance the delay and sound timers by one 60 Hz tick, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def is_sound_active(state: EmulatorState) -> bool:
    """Whether the buzzer should be sounding."""
    return bool(state.sound_timer > 0)


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Latch the state of one hex key. The latest call for a key wins."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in [0, {NUM_KEYS - 1}], got {key}")
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)))


def consume_dirty_flag(state: EmulatorState) -> tuple[EmulatorState, bool]:
    """Return the display dirty flag and a state with it cleared."""
    return state.replace(dirty=jnp.zeros((), dtype=jnp.bool_)), bool(state.dirty)
