"""Exceptions raised by the CHIP-8 interpreter."""

from chipax.constants import MAX_ROM_SIZE, STACK_SIZE


class ChipaxError(Exception):
    """Base class for interpreter errors."""


class RomTooLarge(ChipaxError):
    """Program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int):
        self.size = size
        super().__init__(f"ROM is {size} bytes, at most {MAX_ROM_SIZE} bytes fit in memory")


class StackFault(ChipaxError):
    """Call stack was used outside its 16 slots."""

    def __init__(self, pc: int, message: str):
        self.pc = pc
        super().__init__(f"{message} at 0x{pc:03X}")


class StackOverflow(StackFault):
    def __init__(self, pc: int):
        super().__init__(pc, f"Call nested deeper than {STACK_SIZE} levels")


class StackUnderflow(StackFault):
    def __init__(self, pc: int):
        super().__init__(pc, "Return with empty call stack")
