"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, ADDRESS_MASK, FLAG_REGISTER

# Pre-computed coordinate grids for display operations, row-major like the display
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Boolean (height, width) mask of the screen cells a DXYN sprite flips.

    The origin wraps, the sprite body is clipped at the right and bottom edges.
    """
    sprite_x = jnp.astype(state.V[instruction.x] % SCREEN_WIDTH, jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y] % SCREEN_HEIGHT, jnp.int32)
    height = jnp.astype(instruction.n, jnp.int32)

    in_sprite = (xx >= sprite_x) & (xx < sprite_x + 8) & (yy >= sprite_y) & (yy < sprite_y + height)

    row_offset = yy - sprite_y
    col_offset = xx - sprite_x
    addresses = (jnp.astype(state.I, jnp.int32) + row_offset) & ADDRESS_MASK
    sprite_bytes = jnp.astype(state.memory[addresses], jnp.int32)
    bits = (sprite_bytes >> jnp.clip(7 - col_offset, 0, 7)) & 1
    return (bits == 1) & in_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite = sprite_mask(state, instruction)
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        dirty=jnp.array(True)
    )
