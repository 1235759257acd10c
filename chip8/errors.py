"""Faults reported by the interpreter core.

None of these are retried or swallowed inside the engine; the driver decides
whether a fault halts the run or is skipped.
"""


class Chip8Error(Exception):
    """Base class for every interpreter fault."""

    def __init__(self, message, address=None):
        super().__init__(message)
        self.address = address


class ProgramTooLarge(Chip8Error):
    def __init__(self, size, limit):
        super().__init__(f"Program is {size} bytes, at most {limit} fit in memory")
        self.size = size
        self.limit = limit


class StackOverflow(Chip8Error):
    def __init__(self, address, depth):
        super().__init__(f"Stack overflow on CALL at {address:03X} (depth {depth})", address)
        self.depth = depth


class StackUnderflow(Chip8Error):
    def __init__(self, address):
        super().__init__(f"Stack underflow on RET at {address:03X}", address)


class UnknownOpcode(Chip8Error):
    def __init__(self, word, address=None):
        where = "" if address is None else f" at {address:03X}"
        super().__init__(f"Unknown opcode {word:04X}{where}", address)
        self.word = word
