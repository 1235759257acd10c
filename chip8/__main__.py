import argparse
import logging
import sys
from pathlib import Path

from .config import CPU_HZ, FrontendConfig, scale
from .errors import ProgramTooLarge
from .quirks import PRESETS, Quirks

logger = logging.getLogger("chip8")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 interpreter")
    parser.add_argument("rom", help="Path to a file containing CHIP-8 bytecode")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="none",
                        help="Start from a named quirks profile")
    parser.add_argument("-q", "--quirks", action="store_true",
                        help="Classic quirks mode: shift VX in place, leave I after FX55/FX65")
    parser.add_argument("--shift-source", action="store_true", help="8XY6/8XYE shift VX in place")
    parser.add_argument("--jump-offset", action="store_true", help="BNNN jumps to XNN + VX")
    parser.add_argument("--memory-increment", action="store_true", help="FX55/FX65 advance I")
    parser.add_argument("--sprite-clip", action="store_true", help="Clip sprites at the screen edges")
    parser.add_argument("--cpu-hz", type=int, default=CPU_HZ, help="Instructions per second")
    parser.add_argument("--scale", type=int, default=scale, help="Window pixels per CHIP-8 pixel")
    parser.add_argument("--skip-unknown", action="store_true",
                        help="Skip unknown opcodes instead of halting")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging")
    return parser.parse_args(argv)


def build_quirks(args):
    quirks = Quirks.from_flag(True) if args.quirks else Quirks.preset(args.preset)
    overrides = {
        name: True
        for name in ("shift_source", "jump_offset", "memory_increment", "sprite_clip")
        if getattr(args, name)
    }
    if overrides:
        quirks = Quirks(**{**vars(quirks), **overrides})
    return quirks


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(levelname)s]: %(message)s",
        stream=sys.stdout,
    )

    config = FrontendConfig(
        rom=args.rom,
        quirks=build_quirks(args),
        scale=args.scale,
        cpu_hz=args.cpu_hz,
        skip_unknown=args.skip_unknown,
    )

    logger.info(f"Loading ROM: {config.rom}")
    try:
        program = Path(config.rom).read_bytes()
    except OSError as e:
        logger.error(f"Unable to read ROM: {e}")
        return 1
    logger.info(f"Quirks: {', '.join(config.quirks.enabled()) or 'none'}")

    # imported here so the core runs without a display
    from .frontend import run
    try:
        run(config, program)
    except ProgramTooLarge as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
