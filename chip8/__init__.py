from .cpu import AwaitingKey, Chip8, HALTED, RUNNING
from .errors import Chip8Error, ProgramTooLarge, StackOverflow, StackUnderflow, UnknownOpcode
from .instructions import decode
from .quirks import PRESETS, Quirks

__version__ = "0.1.0"

__all__ = [
    "AwaitingKey",
    "Chip8",
    "Chip8Error",
    "HALTED",
    "PRESETS",
    "ProgramTooLarge",
    "Quirks",
    "RUNNING",
    "StackOverflow",
    "StackUnderflow",
    "UnknownOpcode",
    "decode",
]
