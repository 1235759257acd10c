"""
Unit tests for the machine parts: memory, registers, timers, keypad, display, quirks
"""

import dataclasses
import unittest

from chip8.constants import FONT_ADDRESS, MAX_PROGRAM_SIZE, PROGRAM_START, fontset
from chip8.display import Display
from chip8.errors import ProgramTooLarge, StackOverflow, StackUnderflow
from chip8.keypad import Keypad
from chip8.memory import Memory
from chip8.quirks import PRESETS, Quirks
from chip8.registers import Registers
from chip8.timers import Timers


class TestMemory(unittest.TestCase):

    def setUp(self):
        self.memory = Memory()

    def test_font_loaded(self):
        self.assertEqual(len(self.memory), 4096)
        self.assertEqual(self.memory.read_bytes(FONT_ADDRESS, 80), bytes(fontset))

    def test_load_program(self):
        self.memory.load(b"\x12\x34\x56")
        self.assertEqual(self.memory.read_word(PROGRAM_START), 0x1234)
        self.assertEqual(self.memory.read_byte(PROGRAM_START + 2), 0x56)

    def test_largest_program_fits(self):
        self.memory.load(bytes([0xAA]) * MAX_PROGRAM_SIZE)
        self.assertEqual(self.memory.read_byte(0xFFF), 0xAA)

    def test_program_too_large(self):
        with self.assertRaises(ProgramTooLarge) as ctx:
            self.memory.load(bytes(MAX_PROGRAM_SIZE + 1))
        self.assertEqual(ctx.exception.size, 3585)

    def test_addresses_wrap(self):
        self.memory.write_byte(0x1300, 0x42)
        self.assertEqual(self.memory.read_byte(0x300), 0x42)
        self.memory.write_byte(0xFFF, 0xAB)
        self.assertEqual(self.memory.read_word(0xFFF), (0xAB << 8) | fontset[0])

    def test_reserved_area_is_read_only(self):
        self.memory.write_bytes(0x000, b"\x00\x00\x00")
        self.assertEqual(self.memory.read_bytes(0x000, 3), bytes(fontset[:3]))

    def test_load_clears_previous_program(self):
        self.memory.load(b"\xFF\xFF\xFF\xFF")
        self.memory.load(b"\x01")
        self.assertEqual(self.memory.read_bytes(PROGRAM_START, 4), b"\x01\x00\x00\x00")


class TestRegisters(unittest.TestCase):

    def setUp(self):
        self.regs = Registers()

    def test_initial_state(self):
        self.assertEqual(self.regs.V, [0] * 16)
        self.assertEqual(self.regs.I, 0)
        self.assertEqual(self.regs.pc, 0x200)
        self.assertEqual(self.regs.depth, 0)

    def test_push_pop(self):
        self.regs.push(0x202, 0x200)
        self.regs.push(0x30A, 0x308)
        self.assertEqual(self.regs.pop(0x400), 0x30A)
        self.assertEqual(self.regs.pop(0x30C), 0x202)

    def test_overflow_at_sixteen(self):
        for i in range(16):
            self.regs.push(0x200 + 2 * i, 0x200)
        with self.assertRaises(StackOverflow) as ctx:
            self.regs.push(0x300, 0x2FE)
        self.assertEqual(ctx.exception.address, 0x2FE)
        self.assertEqual(self.regs.depth, 16)

    def test_underflow(self):
        with self.assertRaises(StackUnderflow) as ctx:
            self.regs.pop(0x204)
        self.assertEqual(ctx.exception.address, 0x204)

    def test_flag_is_boolean(self):
        self.regs.flag = 0x80
        self.assertEqual(self.regs.V[0xF], 1)
        self.regs.flag = False
        self.assertEqual(self.regs.V[0xF], 0)

    def test_reset(self):
        self.regs.V[3] = 9
        self.regs.I = 0x123
        self.regs.pc = 0x400
        self.regs.push(0x202, 0x200)
        self.regs.reset()
        self.assertEqual(self.regs.V[3], 0)
        self.assertEqual(self.regs.I, 0)
        self.assertEqual(self.regs.pc, 0x200)
        self.assertEqual(self.regs.depth, 0)


class TestTimers(unittest.TestCase):

    def test_saturates_at_zero(self):
        timers = Timers()
        timers.delay = 2
        timers.sound = 1
        for _ in range(5):
            timers.tick()
        self.assertEqual(timers.delay, 0)
        self.assertEqual(timers.sound, 0)
        self.assertFalse(timers.sound_active)

    def test_each_tick_decrements_once(self):
        timers = Timers()
        timers.delay = 10
        timers.sound = 3
        timers.tick()
        self.assertEqual((timers.delay, timers.sound), (9, 2))
        self.assertTrue(timers.sound_active)


class TestKeypad(unittest.TestCase):

    def test_press_and_release(self):
        keypad = Keypad()
        self.assertTrue(keypad.set(0xA, True))
        self.assertTrue(keypad.is_pressed(0xA))
        self.assertEqual(keypad.pressed(), [0xA])
        self.assertFalse(keypad.set(0xA, True))
        self.assertFalse(keypad.set(0xA, False))
        self.assertFalse(keypad.is_pressed(0xA))

    def test_only_low_nibble_names_a_key(self):
        keypad = Keypad()
        keypad.set(0x3, True)
        self.assertTrue(keypad.is_pressed(0x13))

    def test_invalid_key(self):
        keypad = Keypad()
        for key in (-1, 16):
            with self.assertRaises(ValueError):
                keypad.set(key, True)


class TestDisplay(unittest.TestCase):

    def setUp(self):
        self.display = Display()

    def test_draw_and_collision(self):
        self.assertFalse(self.display.draw_sprite(0, 0, [0xF0]))
        self.assertEqual([self.display.pixel(x, 0) for x in range(5)], [1, 1, 1, 1, 0])
        self.assertTrue(self.display.draw_sprite(0, 0, [0xF0]))
        self.assertEqual(int(self.display.pixels.sum()), 0)

    def test_no_collision_when_turning_pixels_on(self):
        self.display.draw_sprite(0, 0, [0x80])
        self.assertFalse(self.display.draw_sprite(1, 0, [0x80]))

    def test_wraps_horizontally_and_vertically(self):
        self.display.draw_sprite(62, 31, [0xF0, 0xF0])
        for x in (62, 63, 0, 1):
            self.assertEqual(self.display.pixel(x, 31), 1)
            self.assertEqual(self.display.pixel(x, 0), 1)
        self.assertEqual(int(self.display.pixels.sum()), 8)

    def test_origin_wraps(self):
        self.display.draw_sprite(64 + 3, 32 + 2, [0x80])
        self.assertEqual(self.display.pixel(3, 2), 1)

    def test_clip_drops_offscreen_pixels(self):
        self.display.draw_sprite(62, 31, [0xF0, 0xF0], clip=True)
        self.assertEqual(self.display.pixel(62, 31), 1)
        self.assertEqual(self.display.pixel(63, 31), 1)
        self.assertEqual(self.display.pixel(0, 31), 0)
        self.assertEqual(self.display.pixel(62, 0), 0)
        self.assertEqual(int(self.display.pixels.sum()), 2)

    def test_clear(self):
        self.display.draw_sprite(10, 10, [0xFF] * 5)
        self.display.clear()
        self.assertEqual(int(self.display.pixels.sum()), 0)

    def test_pixels_view_is_read_only(self):
        with self.assertRaises(ValueError):
            self.display.pixels[0, 0] = 1
        self.assertEqual(self.display.pixels.shape, (32, 64))


class TestQuirks(unittest.TestCase):

    def test_defaults_all_off(self):
        self.assertEqual(Quirks().enabled(), [])

    def test_immutable(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            Quirks().shift_source = True

    def test_from_flag(self):
        self.assertEqual(Quirks.from_flag(True), Quirks(shift_source=True))
        self.assertEqual(Quirks.from_flag(False), Quirks(memory_increment=True))

    def test_presets(self):
        self.assertIs(Quirks.preset("vip"), PRESETS["vip"])
        self.assertTrue(Quirks.preset("chip48").jump_offset)
        with self.assertRaises(ValueError):
            Quirks.preset("xo-chip")


if __name__ == "__main__":
    unittest.main()
