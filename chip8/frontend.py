# We're subclassing pyglet (that'll handle graphics, sound output, and keyboard handling)
# and overriding whatever def we need from there. The interpreter itself knows nothing
# about windows: this module only feeds it keys and clock ticks and renders its pixels.

import logging
import random

import numpy as np
import pyglet
from pyglet.media import synthesis
from pyglet.window import key

from .constants import height, width
from .cpu import Chip8
from .errors import Chip8Error, UnknownOpcode

logger = logging.getLogger(__name__)

# map binding keys
keymap = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}


class Chip8Window(pyglet.window.Window):

    def __init__(self, settings, program):
        self.settings = settings
        self.chip8 = Chip8(quirks=settings.quirks)
        self.chip8.load(program)

        self.window_width = width * settings.scale
        self.window_height = height * settings.scale
        super().__init__(
            width=self.window_width,
            height=self.window_height,
            caption="CHIP-8 Emulator",
            vsync=False
        )
        self.has_exit = False
        self.sound_playing = False
        self._cycle_budget = 0.0

        # Pre-allocated small framebuffer (64x32 RGBA). We upscale on CPU using numpy.repeat
        self._small_framebuf = np.zeros((height, width, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self._palette = np.array([settings.pixel_off, settings.pixel_on], dtype=np.uint8)

        # creating ImageData once (initialized empty)
        self.image = pyglet.image.ImageData(
            self.window_width,
            self.window_height,
            'RGBA',
            bytes(self.window_width * self.window_height * 4)
        )

        # Performance tracking counters
        self._fps_counter = 0
        self._cps_counter = 0
        self.fps_label = self._label("FPS: 0", 15)
        self.cps_label = self._label("Cycles/s: 0", 30)

        # Schedule the loops
        pyglet.clock.schedule_interval(self._cpu_tick, 1 / settings.timer_hz)     # CPU cycles, batched per frame
        pyglet.clock.schedule_interval(self._timer_tick, 1 / settings.timer_hz)   # delay/sound at 60Hz
        pyglet.clock.schedule_interval(self._update_bench, 1.0)                 # FPS/CPS every second

    def _label(self, text, offset):
        return pyglet.text.Label(
            text,
            font_size=12,
            x=5,
            y=self.window_height - offset,
            anchor_x='left',
            anchor_y='center',
            color=(255, 0, 0, 255)
        )

    # ---- CPU ----
    def _cpu_tick(self, dt):
        if self.has_exit:
            return
        self._cycle_budget += dt * self.settings.cpu_hz
        cycles = int(self._cycle_budget)
        self._cycle_budget -= cycles

        for _ in range(cycles):
            try:
                self.chip8.step()
            except UnknownOpcode as e:
                if not self.settings.skip_unknown:
                    self._halt(e)
                    return
                logger.warning(f"{e}, skipped")
            except Chip8Error as e:
                self._halt(e)
                return
            self._cps_counter += 1
            if self.chip8.awaiting_key or self.chip8.halted:
                break

    def _halt(self, error):
        logger.error(f"Emulation error: {error}")
        self.has_exit = True
        self.close()

    # ---- timers ----
    def _timer_tick(self, dt):
        self.chip8.tick_timers()
        if self.chip8.sound_active:
            # Play beep only if it hasn't started yet
            if not self.sound_playing:
                self._play_beep()
        else:
            self.sound_playing = False

    # ---- sound ----
    def _play_beep(self, pitch_variation=15):
        freq = self.settings.beep_frequency + random.randint(-pitch_variation, pitch_variation)
        wave = synthesis.Sine(duration=self.settings.beep_duration, frequency=freq, sample_rate=44100)
        player = pyglet.media.Player()
        player.queue(wave)
        player.play()
        self.sound_playing = True

        # Ensure the sound stops after the requested duration
        def on_eos():
            self.sound_playing = False
            player.delete()

        player.on_eos = on_eos

    # ---- FPS / CPS ----
    def _update_bench(self, dt):
        self.fps_label.text = f"FPS: {self._fps_counter / dt:.1f}"
        self.cps_label.text = f"Cycles/s: {self._cps_counter / dt:.0f}"
        self._fps_counter = 0
        self._cps_counter = 0

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        display = self.chip8.display
        if display.should_draw:
            # pyglet's origin is bottom-left, CHIP-8's is top-left
            self._small_framebuf[..., :3] = self._palette[np.flipud(display.pixels)]
            scale = self.settings.scale
            if scale != 1:
                scaled = np.repeat(np.repeat(self._small_framebuf, scale, axis=0), scale, axis=1)
            else:
                scaled = self._small_framebuf
            # updates existing image without creating new object
            self.image.set_data('RGBA', self.window_width * 4, scaled.tobytes())
            display.should_draw = False
        self.image.blit(0, 0)

        if self.settings.show_stats:
            self.fps_label.draw()
            self.cps_label.draw()
        self._fps_counter += 1

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.close()
        elif symbol == key.F1:
            # toggle opcode tracing
            root = logging.getLogger()
            root.setLevel(logging.INFO if root.level == logging.DEBUG else logging.DEBUG)
            logger.info(f"Debug logging: {root.level == logging.DEBUG}")
        elif symbol in keymap:
            self.chip8.set_key_state(keymap[symbol], True)

    def on_key_release(self, symbol, modifiers):
        if symbol in keymap:
            self.chip8.set_key_state(keymap[symbol], False)


def run(settings, program):
    window = Chip8Window(settings, program)
    pyglet.app.run()
    return window
