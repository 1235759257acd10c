from dataclasses import dataclass


@dataclass(frozen=True)
class Quirks:
    """Behavioral variants of a handful of opcodes.

    shift_source:     8XY6/8XYE shift VX in place instead of reading VY
    jump_offset:      BNNN jumps to XNN + VX instead of NNN + V0
    memory_increment: FX55/FX65 leave I pointing past the last register
    sprite_clip:      DXYN clips at the screen edges instead of wrapping
    """

    shift_source: bool = False
    jump_offset: bool = False
    memory_increment: bool = False
    sprite_clip: bool = False

    @classmethod
    def from_flag(cls, active):
        # the single "quirks mode" switch: CHIP-48 shifts, static I
        if active:
            return cls(shift_source=True)
        return cls(memory_increment=True)

    @classmethod
    def preset(cls, name):
        try:
            return PRESETS[name]
        except KeyError:
            raise ValueError(f"Unknown quirks preset {name!r}, expected one of {sorted(PRESETS)}") from None

    def enabled(self):
        return [name for name, value in vars(self).items() if value]


PRESETS = {
    "none": Quirks(),
    # Original COSMAC VIP interpreter
    "vip": Quirks(memory_increment=True, sprite_clip=True),
    # CHIP-48 / HP48 interpreters
    "chip48": Quirks(shift_source=True, jump_offset=True, sprite_clip=True),
}
