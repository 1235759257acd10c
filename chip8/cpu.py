# CHIP8 Virtual Machine Steps:
# Input - store key input states and check these per cycle.
# Output - 64x32 display (array of pixels that are either on or off (0 || 1)) & sound timer.
# CPU - Cowgods CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - can hold up to 4096 bytes which includes: the interpreter area, fonts, and inputted ROM.
#----------------------------------------------------------------------------------------------
# The interpreter owns every piece of machine state. The driver loads a ROM, calls step() at
# the CPU rate and tick_timers() at 60Hz, and feeds key changes through set_key_state().
# Timers are never decremented per cycle.

import logging
import random
from dataclasses import dataclass

from . import instructions as ops
from .constants import ADDRESS_MASK, FONT_ADDRESS, FONT_GLYPH_SIZE, PROGRAM_START
from .display import Display
from .instructions import decode
from .keypad import Keypad
from .memory import Memory
from .quirks import Quirks
from .registers import Registers
from .timers import Timers

logger = logging.getLogger(__name__)


class Running:
    def __repr__(self):
        return "RUNNING"


class Halted:
    def __repr__(self):
        return "HALTED"


@dataclass(frozen=True)
class AwaitingKey:
    register: int


RUNNING = Running()
HALTED = Halted()  # 0000 or a jump to itself; only load() leaves this state


class Chip8:

    def __init__(self, quirks=None, rng=None):
        self.quirks = quirks or Quirks()
        self.rng = rng or random

        # CHIP-8 components
        self.memory = Memory()
        self.registers = Registers()
        self.timers = Timers()
        self.keypad = Keypad()
        self.display = Display()
        self.state = RUNNING
        self.cycle_count = 0

        # Prepare opcode function map
        self.setup_funcmap()

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            ops.EndProgram: self.op_END,                            # 0000 - stop execution
            ops.ClearScreen: self.op_CLS,                           # 00E0 - clear the display
            ops.Return: self.op_RET,                                # 00EE - return from subroutine
            ops.Jump: self.op_JP,                                   # 1nnn - jump to address NNN
            ops.Call: self.op_CALL,                                 # 2nnn - call subroutine at NNN
            ops.SkipIfEqual: self.op_SE_Vx_kk,                      # 3xkk
            ops.SkipIfNotEqual: self.op_SNE_Vx_kk,                  # 4xkk
            ops.SkipIfRegistersEqual: self.op_SE_Vx_Vy,             # 5xy0
            ops.SetRegister: self.op_LD_Vx_kk,                      # 6xkk
            ops.AddImmediate: self.op_ADD_Vx_kk,                    # 7xkk
            ops.Copy: self.op_LD_Vx_Vy,                             # 8xy0
            ops.Or: self.op_OR,                                     # 8xy1
            ops.And: self.op_AND,                                   # 8xy2
            ops.Xor: self.op_XOR,                                   # 8xy3
            ops.Add: self.op_ADD,                                   # 8xy4
            ops.Sub: self.op_SUB,                                   # 8xy5
            ops.ShiftRight: self.op_SHR,                            # 8xy6
            ops.SubReversed: self.op_SUBN,                          # 8xy7
            ops.ShiftLeft: self.op_SHL,                             # 8xyE
            ops.SkipIfRegistersNotEqual: self.op_SNE_Vx_Vy,         # 9xy0
            ops.SetIndex: self.op_LD_I,                             # Annn
            ops.JumpWithOffset: self.op_JP_V0,                      # Bnnn
            ops.Random: self.op_RND,                                # Cxkk
            ops.Draw: self.op_DRW,                                  # Dxyn
            ops.SkipIfKeyPressed: self.op_SKP,                      # Ex9E
            ops.SkipIfKeyNotPressed: self.op_SKNP,                  # ExA1
            ops.GetDelay: self.op_LD_Vx_DT,                         # Fx07
            ops.WaitForKey: self.op_WAITKEY,                        # Fx0A
            ops.SetDelay: self.op_LD_DT_Vx,                         # Fx15
            ops.SetSound: self.op_LD_ST_Vx,                         # Fx18
            ops.AddToIndex: self.op_ADD_I_Vx,                       # Fx1E
            ops.FontCharacter: self.op_FONT,                        # Fx29
            ops.StoreBCD: self.op_BCD,                              # Fx33
            ops.StoreRegisters: self.op_STORE,                      # Fx55
            ops.LoadRegisters: self.op_LOAD,                        # Fx65
        }

    # ---- Public contract ----
    def load(self, program):
        """Reset the machine and copy ``program`` to 0x200.

        Raises ProgramTooLarge, leaving the current state untouched, if the
        program does not fit in memory.
        """
        program = bytes(program)
        self.memory.load(program)
        self.registers.reset()
        self.timers.reset()
        self.keypad.reset()
        self.display.clear()
        self.state = RUNNING
        self.cycle_count = 0
        logger.info(f"Loaded {len(program)} byte program at {PROGRAM_START:03X}")

    def step(self):
        """Fetch, decode and execute one instruction.

        Returns the execution state afterwards. While awaiting a key or halted
        nothing is executed. Faults propagate as Chip8Error with PC already
        past the offending instruction.
        """
        if self.state is not RUNNING:
            return self.state

        address = self.registers.pc
        opcode = self.memory.read_word(address)
        self.registers.pc = (address + 2) & ADDRESS_MASK
        self.cycle_count += 1

        instruction = decode(opcode, address)
        logger.debug(f"{address:03X}: {opcode:04X} {instruction}")
        self.funcmap[type(instruction)](instruction, address)
        return self.state

    def tick_timers(self):
        self.timers.tick()

    def set_key_state(self, key, pressed):
        self.keypad.set(key, pressed)
        if pressed and isinstance(self.state, AwaitingKey):
            register = self.state.register
            self.registers.V[register] = key
            self.state = RUNNING
            logger.debug(f"Key {key:X} stored in V{register:X}, resuming")

    # ---- Read-only views for the collaborators ----
    @property
    def pixels(self):
        return self.display.pixels

    @property
    def sound_active(self):
        return self.timers.sound_active

    @property
    def awaiting_key(self):
        return isinstance(self.state, AwaitingKey)

    @property
    def halted(self):
        return self.state is HALTED

    @property
    def V(self):
        return self.registers.V

    @property
    def pc(self):
        return self.registers.pc

    @property
    def I(self):
        return self.registers.I

    # ---- Opcode Handlers ----

    def op_END(self, ins, address):
        self.registers.pc = address
        self.state = HALTED
        logger.info(f"Program ended at {address:03X}")

    def op_CLS(self, ins, address):
        self.display.clear()

    def op_RET(self, ins, address):
        self.registers.pc = self.registers.pop(address)

    def _jump(self, target, address):
        target &= ADDRESS_MASK
        self.registers.pc = target
        if target == address:
            # jump to itself: the program is spinning forever
            self.state = HALTED
            logger.info(f"Idle loop at {address:03X}, halting")

    def op_JP(self, ins, address):
        self._jump(ins.address, address)

    def op_CALL(self, ins, address):
        self.registers.push(self.registers.pc, address)
        self.registers.pc = ins.address

    def _skip_if(self, condition):
        if condition:
            self.registers.pc = (self.registers.pc + 2) & ADDRESS_MASK

    def op_SE_Vx_kk(self, ins, address):
        self._skip_if(self.V[ins.x] == ins.value)

    def op_SNE_Vx_kk(self, ins, address):
        self._skip_if(self.V[ins.x] != ins.value)

    def op_SE_Vx_Vy(self, ins, address):
        self._skip_if(self.V[ins.x] == self.V[ins.y])

    def op_SNE_Vx_Vy(self, ins, address):
        self._skip_if(self.V[ins.x] != self.V[ins.y])

    def op_LD_Vx_kk(self, ins, address):
        self.V[ins.x] = ins.value

    def op_ADD_Vx_kk(self, ins, address):
        self.V[ins.x] = (self.V[ins.x] + ins.value) & 0xFF

    # 8xy0..8xyE
    # VF is written after the result so it keeps the flag even when X is F.
    def op_LD_Vx_Vy(self, ins, address):
        self.V[ins.x] = self.V[ins.y]

    def op_OR(self, ins, address):
        self.V[ins.x] |= self.V[ins.y]

    def op_AND(self, ins, address):
        self.V[ins.x] &= self.V[ins.y]

    def op_XOR(self, ins, address):
        self.V[ins.x] ^= self.V[ins.y]

    def op_ADD(self, ins, address):
        total = self.V[ins.x] + self.V[ins.y]
        self.V[ins.x] = total & 0xFF
        self.registers.flag = total > 0xFF

    def op_SUB(self, ins, address):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vx - vy) & 0xFF
        self.registers.flag = vx >= vy

    def op_SUBN(self, ins, address):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vy - vx) & 0xFF
        self.registers.flag = vy >= vx

    def _shift_source(self, ins):
        return self.V[ins.x] if self.quirks.shift_source else self.V[ins.y]

    def op_SHR(self, ins, address):
        value = self._shift_source(ins)
        self.V[ins.x] = value >> 1
        self.registers.flag = value & 0x01

    def op_SHL(self, ins, address):
        value = self._shift_source(ins)
        self.V[ins.x] = (value << 1) & 0xFF
        self.registers.flag = value & 0x80

    def op_LD_I(self, ins, address):
        self.registers.I = ins.address

    def op_JP_V0(self, ins, address):
        if self.quirks.jump_offset:
            # BXNN: XNN + VX
            offset = self.V[(ins.address >> 8) & 0xF]
        else:
            offset = self.V[0]
        self._jump(ins.address + offset, address)

    def op_RND(self, ins, address):
        self.V[ins.x] = self.rng.getrandbits(8) & ins.mask

    def op_DRW(self, ins, address):
        rows = self.memory.read_bytes(self.registers.I, ins.rows)
        collision = self.display.draw_sprite(
            self.V[ins.x], self.V[ins.y], rows, clip=self.quirks.sprite_clip
        )
        self.registers.flag = collision

    def op_SKP(self, ins, address):
        self._skip_if(self.keypad.is_pressed(self.V[ins.x]))

    def op_SKNP(self, ins, address):
        self._skip_if(not self.keypad.is_pressed(self.V[ins.x]))

    def op_LD_Vx_DT(self, ins, address):
        self.V[ins.x] = self.timers.delay

    def op_WAITKEY(self, ins, address):
        # stall until set_key_state() delivers a press
        self.state = AwaitingKey(ins.x)
        logger.debug(f"Waiting for key press -> V{ins.x:X}")

    def op_LD_DT_Vx(self, ins, address):
        self.timers.delay = self.V[ins.x]

    def op_LD_ST_Vx(self, ins, address):
        self.timers.sound = self.V[ins.x]

    def op_ADD_I_Vx(self, ins, address):
        self.registers.I = (self.registers.I + self.V[ins.x]) & 0xFFFF

    def op_FONT(self, ins, address):
        self.registers.I = FONT_ADDRESS + (self.V[ins.x] & 0xF) * FONT_GLYPH_SIZE

    def op_BCD(self, ins, address):
        val = self.V[ins.x]
        self.memory.write_bytes(self.registers.I, (val // 100, (val // 10) % 10, val % 10))

    def op_STORE(self, ins, address):
        self.memory.write_bytes(self.registers.I, self.registers.dump(ins.x))
        self._advance_index(ins.x)

    def op_LOAD(self, ins, address):
        self.registers.load(self.memory.read_bytes(self.registers.I, ins.x + 1))
        self._advance_index(ins.x)

    def _advance_index(self, last):
        if self.quirks.memory_increment:
            self.registers.I = (self.registers.I + last + 1) & 0xFFFF
