from dataclasses import dataclass, field

from .quirks import Quirks

# ---- Configuration ----
scale = 10
CPU_HZ = 600
timer_HZ = 60


@dataclass
class FrontendConfig:
    """Settings for the pyglet driver, filled in from the command line."""

    rom: str
    quirks: Quirks = field(default_factory=Quirks)
    scale: int = scale
    cpu_hz: int = CPU_HZ
    timer_hz: int = timer_HZ
    beep_frequency: int = 440
    beep_duration: float = 0.2
    pixel_on: tuple = (255, 255, 255)
    pixel_off: tuple = (0, 0, 0)
    # halt on every fault, or keep going past unknown opcodes
    skip_unknown: bool = False
    show_stats: bool = True
