"""Host-facing CHIP-8 machine.

:class:`Machine` owns a single :class:`~chipax.state.EmulatorState` and exposes the
imperative interface a front-end needs: load, reset, execute, tick timers, set
keys, and read back the framebuffer and sound gate. All state transitions go
through the pure functions in :mod:`chipax.emulator` and :mod:`chipax.peripherals`.
"""

import threading
from typing import Optional

import jax
import numpy as np

from chipax.state import EmulatorState, create_state, reset
from chipax.emulator import step, run_instructions, run_with_progress, load_rom, load_rom_file
from chipax.peripherals import tick_timers, is_sound_active, set_key, consume_dirty_flag
from chipax.constants import (
    INSTRUCTION_FREQUENCY, TIMER_FREQUENCY, FAULT_NONE, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW,
)
from chipax.errors import StackOverflow, StackUnderflow
from chipax.logging import ConsoleLogger


class Machine:
    """A single CHIP-8 interpreter instance.

    Instances never share state, so any number can run side by side. A lock
    guards the state so that instruction execution and timer ticks may come
    from different threads; readers always see a complete snapshot.
    """

    def __init__(
        self,
        seed: int = 0,
        instruction_frequency: int = INSTRUCTION_FREQUENCY,
        timer_frequency: int = TIMER_FREQUENCY,
        logger: Optional[ConsoleLogger] = None,
    ):
        """Create a machine in the reset state.

        Args:
            seed: Seed for the PRNG key behind CXNN
            instruction_frequency: Instructions per second the host aims for
            timer_frequency: Timer tick rate, 60 Hz on real hardware
            logger: Logger for load, reset and fault messages
        """
        if instruction_frequency <= 0 or timer_frequency <= 0:
            raise ValueError("Frequencies must be positive")
        self.instruction_frequency = instruction_frequency
        self.timer_frequency = timer_frequency
        self.logger = logger or ConsoleLogger("Machine")
        self._lock = threading.Lock()
        self._state = create_state(jax.random.PRNGKey(seed))

    @property
    def instructions_per_frame(self) -> int:
        """Number of instructions to execute between two timer ticks."""
        return max(1, self.instruction_frequency // self.timer_frequency)

    @property
    def state(self) -> EmulatorState:
        """Immutable snapshot of the current state."""
        with self._lock:
            return self._state

    def reset(self):
        with self._lock:
            self._state = reset(self._state)
        self.logger.debug("Machine reset")

    def load(self, rom_data: bytes):
        """Reset and load a program image at 0x200.

        Raises:
            RomTooLarge: the image is larger than 3584 bytes. The machine is left reset.
        """
        with self._lock:
            self._state = reset(self._state)
            self._state = load_rom(self._state, rom_data)
        self.logger.info(f"Loaded {len(rom_data)} byte program")

    def load_file(self, filename: str):
        """Reset and load a program image from a ROM file."""
        with self._lock:
            self._state = reset(self._state)
            self._state = load_rom_file(self._state, filename)
        self.logger.info(f"Loaded {filename}")

    def _check_fault(self, state: EmulatorState):
        fault = int(state.fault)
        if fault == FAULT_NONE:
            return
        pc = int(state.pc)
        error = StackOverflow(pc) if fault == FAULT_STACK_OVERFLOW else StackUnderflow(pc)
        self.logger.error(str(error))
        raise error

    def _advance(self, transition):
        with self._lock:
            self._check_fault(self._state)
            self._state = transition(self._state)
            state = self._state
        self._check_fault(state)

    def execute(self):
        """Run one fetch-decode-execute step.

        Raises:
            StackOverflow, StackUnderflow: the call stack was misused. The PC is left
                on the faulting instruction until :meth:`reset` or :meth:`load`.
        """
        self._advance(step)

    def run(self, n: int, progress: bool = False):
        """Run ``n`` instructions in one compiled loop.

        A stack fault inside the batch stops further progress: every later step
        re-executes the faulting instruction, and the fault is raised at the end.
        """
        if n <= 0:
            return
        if progress:
            self._advance(lambda s: run_with_progress(s, n))
        else:
            self._advance(lambda s: run_instructions(s, n))

    def tick_timers(self):
        with self._lock:
            self._state = tick_timers(self._state)

    def set_key(self, key: int, pressed: bool):
        with self._lock:
            self._state = set_key(self._state, key, pressed)

    def get_framebuffer(self) -> np.ndarray:
        """Read-only (32, 64) boolean copy of the display, indexed ``[y, x]``."""
        framebuffer = np.array(self.state.display, dtype=np.bool_)
        framebuffer.flags.writeable = False
        return framebuffer

    def consume_dirty_flag(self) -> bool:
        """Return whether the display changed since the last call, and clear the flag."""
        with self._lock:
            self._state, dirty = consume_dirty_flag(self._state)
        return dirty

    def is_sound_active(self) -> bool:
        return is_sound_active(self.state)
