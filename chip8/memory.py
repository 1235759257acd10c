import logging

from .constants import (
    ADDRESS_MASK,
    FONT_ADDRESS,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    fontset,
)
from .errors import ProgramTooLarge

logger = logging.getLogger(__name__)


class Memory:
    """Flat 4K byte store holding the font set, the ROM and working data.

    Every address is wrapped into the 12-bit address space, so nothing can be
    read or written outside the 4096 bytes. Writes below 0x200 are dropped so
    the font set survives whatever the program does.
    """

    def __init__(self):
        self.data = bytearray(MEMORY_SIZE)
        self.reset()

    def reset(self):
        self.data[:] = bytes(MEMORY_SIZE)
        # Load fontset into memory
        self.data[FONT_ADDRESS:FONT_ADDRESS + len(fontset)] = bytes(fontset)

    def load(self, program):
        program = bytes(program)
        if len(program) > MAX_PROGRAM_SIZE:
            raise ProgramTooLarge(len(program), MAX_PROGRAM_SIZE)
        self.reset()
        self.data[PROGRAM_START:PROGRAM_START + len(program)] = program

    def read_byte(self, address):
        return self.data[address & ADDRESS_MASK]

    def write_byte(self, address, value):
        address &= ADDRESS_MASK
        if address < PROGRAM_START:
            # interpreter area (fonts) is read-only to programs
            logger.debug(f"Ignored write of {value:02X} to reserved address {address:03X}")
            return
        self.data[address] = value & 0xFF

    def read_word(self, address):
        # big-endian 16-bit opcode
        return (self.read_byte(address) << 8) | self.read_byte(address + 1)

    def read_bytes(self, address, count):
        return bytes(self.read_byte(address + i) for i in range(count))

    def write_bytes(self, address, values):
        for i, b in enumerate(values):
            self.write_byte(address + i, b)

    def __len__(self):
        return len(self.data)
