"""Opcode decoding.

Every CHIP-8 word is decoded into one small frozen dataclass per instruction,
carrying its already-extracted operands (X, Y, N, NN, NNN). Anything that does
not match a documented pattern raises ``UnknownOpcode``.
"""
from dataclasses import dataclass

from .errors import UnknownOpcode


# 0nnn / 00E0 / 00EE
@dataclass(frozen=True)
class EndProgram:
    pass


@dataclass(frozen=True)
class ClearScreen:
    pass


@dataclass(frozen=True)
class Return:
    pass


# 1nnn / 2nnn
@dataclass(frozen=True)
class Jump:
    address: int


@dataclass(frozen=True)
class Call:
    address: int


# 3xkk / 4xkk / 5xy0 / 9xy0
@dataclass(frozen=True)
class SkipIfEqual:
    x: int
    value: int


@dataclass(frozen=True)
class SkipIfNotEqual:
    x: int
    value: int


@dataclass(frozen=True)
class SkipIfRegistersEqual:
    x: int
    y: int


@dataclass(frozen=True)
class SkipIfRegistersNotEqual:
    x: int
    y: int


# 6xkk / 7xkk
@dataclass(frozen=True)
class SetRegister:
    x: int
    value: int


@dataclass(frozen=True)
class AddImmediate:
    x: int
    value: int


# 8xy0..8xyE - Math and logic operations between two registers
@dataclass(frozen=True)
class Copy:
    x: int
    y: int


@dataclass(frozen=True)
class Or:
    x: int
    y: int


@dataclass(frozen=True)
class And:
    x: int
    y: int


@dataclass(frozen=True)
class Xor:
    x: int
    y: int


@dataclass(frozen=True)
class Add:
    x: int
    y: int


@dataclass(frozen=True)
class Sub:
    x: int
    y: int


@dataclass(frozen=True)
class ShiftRight:
    x: int
    y: int


@dataclass(frozen=True)
class SubReversed:
    x: int
    y: int


@dataclass(frozen=True)
class ShiftLeft:
    x: int
    y: int


# Annn / Bnnn / Cxkk / Dxyn
@dataclass(frozen=True)
class SetIndex:
    address: int


@dataclass(frozen=True)
class JumpWithOffset:
    address: int


@dataclass(frozen=True)
class Random:
    x: int
    mask: int


@dataclass(frozen=True)
class Draw:
    x: int
    y: int
    rows: int


# Ex9E / ExA1
@dataclass(frozen=True)
class SkipIfKeyPressed:
    x: int


@dataclass(frozen=True)
class SkipIfKeyNotPressed:
    x: int


# Fx07..Fx65 - timers, memory, I, and key input
@dataclass(frozen=True)
class GetDelay:
    x: int


@dataclass(frozen=True)
class WaitForKey:
    x: int


@dataclass(frozen=True)
class SetDelay:
    x: int


@dataclass(frozen=True)
class SetSound:
    x: int


@dataclass(frozen=True)
class AddToIndex:
    x: int


@dataclass(frozen=True)
class FontCharacter:
    x: int


@dataclass(frozen=True)
class StoreBCD:
    x: int


@dataclass(frozen=True)
class StoreRegisters:
    x: int


@dataclass(frozen=True)
class LoadRegisters:
    x: int


ALU = {
    0x0: Copy,
    0x1: Or,
    0x2: And,
    0x3: Xor,
    0x4: Add,
    0x5: Sub,
    0x6: ShiftRight,
    0x7: SubReversed,
    0xE: ShiftLeft,
}

KEYS = {
    0x9E: SkipIfKeyPressed,
    0xA1: SkipIfKeyNotPressed,
}

MISC = {
    0x07: GetDelay,
    0x0A: WaitForKey,
    0x15: SetDelay,
    0x18: SetSound,
    0x1E: AddToIndex,
    0x29: FontCharacter,
    0x33: StoreBCD,
    0x55: StoreRegisters,
    0x65: LoadRegisters,
}


def decode(word, address=None):
    """Turn a 16-bit opcode into its instruction.

    ``address`` is only used to report where an unknown word was fetched from.
    """
    if not 0 <= word <= 0xFFFF:
        raise ValueError(f"Opcode must be a 16-bit word, got {word:#x}")

    prefix = word >> 12
    x = (word >> 8) & 0xF
    y = (word >> 4) & 0xF
    n = word & 0xF
    kk = word & 0xFF
    nnn = word & 0x0FFF

    if prefix == 0x0:
        if word == 0x0000:
            return EndProgram()
        if word == 0x00E0:
            return ClearScreen()
        if word == 0x00EE:
            return Return()
    elif prefix == 0x1:
        return Jump(nnn)
    elif prefix == 0x2:
        return Call(nnn)
    elif prefix == 0x3:
        return SkipIfEqual(x, kk)
    elif prefix == 0x4:
        return SkipIfNotEqual(x, kk)
    elif prefix == 0x5:
        if n == 0:
            return SkipIfRegistersEqual(x, y)
    elif prefix == 0x6:
        return SetRegister(x, kk)
    elif prefix == 0x7:
        return AddImmediate(x, kk)
    elif prefix == 0x8:
        if n in ALU:
            return ALU[n](x, y)
    elif prefix == 0x9:
        if n == 0:
            return SkipIfRegistersNotEqual(x, y)
    elif prefix == 0xA:
        return SetIndex(nnn)
    elif prefix == 0xB:
        return JumpWithOffset(nnn)
    elif prefix == 0xC:
        return Random(x, kk)
    elif prefix == 0xD:
        return Draw(x, y, n)
    elif prefix == 0xE:
        if kk in KEYS:
            return KEYS[kk](x)
    elif prefix == 0xF:
        if kk in MISC:
            return MISC[kk](x)

    raise UnknownOpcode(word, address)
