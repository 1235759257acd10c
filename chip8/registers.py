import numpy as np

from .constants import FLAG_REGISTER, PROGRAM_START, REGISTER_COUNT, STACK_DEPTH
from .errors import StackOverflow, StackUnderflow


class Registers:
    """V0..VF, the I pointer, the program counter and the call stack."""

    def __init__(self):
        self.V = [0] * REGISTER_COUNT   # 16 general-purpose registers
        self.stack = np.zeros(STACK_DEPTH, dtype=np.uint16)
        self.reset()

    def reset(self):
        self.V[:] = [0] * REGISTER_COUNT
        self.I = 0                      # I register (memory pointer)
        self.pc = PROGRAM_START         # program counter starts at 0x200
        self.stack[:] = 0
        self.sp = 0

    @property
    def flag(self):
        return self.V[FLAG_REGISTER]

    @flag.setter
    def flag(self, value):
        self.V[FLAG_REGISTER] = 1 if value else 0

    # call stack
    def push(self, address, origin):
        if self.sp >= STACK_DEPTH:
            raise StackOverflow(origin, self.sp)
        self.stack[self.sp] = address
        self.sp += 1

    def pop(self, origin):
        if self.sp == 0:
            raise StackUnderflow(origin)
        self.sp -= 1
        return int(self.stack[self.sp])

    @property
    def depth(self):
        return self.sp

    def dump(self, last):
        """Values of V0..V{last} inclusive."""
        return bytes(self.V[:last + 1])

    def load(self, values):
        for i, b in enumerate(values):
            self.V[i] = b & 0xFF
