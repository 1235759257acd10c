import numpy as np

from .constants import height, width


class Display:
    """64x32 monochrome framebuffer.

    Only the interpreter mutates it (clear and sprite draws); renderers read
    ``pixels``, a read-only view indexed ``[y, x]``.
    """

    def __init__(self):
        self.vram = np.zeros((height, width), dtype=np.uint8)
        self.should_draw = True  # so that we only update the display when needed

    def clear(self):
        self.vram[:] = 0
        self.should_draw = True

    @property
    def pixels(self):
        view = self.vram.view()
        view.flags.writeable = False
        return view

    def pixel(self, x, y):
        return int(self.vram[y % height, x % width])

    def draw_sprite(self, x, y, rows, clip=False):
        """XOR ``rows`` (one byte per row, MSB leftmost) onto the screen at (x, y).

        The origin always wraps. Pixels running past the edge wrap around too,
        unless ``clip`` is set, in which case they are dropped. Returns True if
        any pixel was switched from on to off.
        """
        x %= width
        y %= height
        collision = False
        for row, sprite in enumerate(rows):
            if sprite == 0:
                continue
            py = y + row
            if py >= height:
                if clip:
                    break
                py %= height
            for bit in range(8):
                if not sprite & (0x80 >> bit):
                    continue
                px = x + bit
                if px >= width:
                    if clip:
                        break
                    px %= width
                if self.vram[py, px]:
                    collision = True
                self.vram[py, px] ^= 1
        self.should_draw = True
        return collision
