import numpy as np

from .constants import KEY_COUNT


class Keypad:
    """State of the 16-key hex keypad.

    #  1 2 3 C
    #  4 5 6 D
    #  7 8 9 E
    #  A 0 B F
    """

    def __init__(self):
        self.keys = np.zeros(KEY_COUNT, dtype=np.uint8)

    def reset(self):
        self.keys[:] = 0

    @staticmethod
    def check(key):
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key must be in 0..{KEY_COUNT - 1}, got {key}")

    def set(self, key, pressed):
        """Store the new state; returns True when the key went from up to down."""
        self.check(key)
        was_pressed = bool(self.keys[key])
        self.keys[key] = 1 if pressed else 0
        return pressed and not was_pressed

    def is_pressed(self, key):
        # only the low nibble names a key
        return bool(self.keys[key & 0xF])

    def pressed(self):
        return [k for k in range(KEY_COUNT) if self.keys[k]]
