#!/usr/bin/env python3
"""
Flipdot command line entry point.

Fills a panel with a test pattern and sends, queues or dumps the frame:

    python -m flipdot --port /dev/ttyUSB0 --baud 57600 --width 28 --height 7 --pattern border
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from .config import PanelConfig, SerialConfig, default_config, load_from_toml, parse_address
from .errors import FlipdotError
from .panel import Panel

logger = logging.getLogger(__name__)

PATTERNS = ("clear", "solid", "checkerboard", "border")


def create_test_pattern(width: int, height: int, pattern: str) -> np.ndarray:
    """
    Create a test pattern as a (height, width) boolean array.

    Raises:
        ValueError: If pattern type is unknown
    """
    canvas = np.zeros((height, width), dtype=bool)

    if pattern == "checkerboard":
        ys, xs = np.indices((height, width))
        canvas = (xs + ys) % 2 == 0
    elif pattern == "border":
        canvas[0, :] = True
        canvas[-1, :] = True
        canvas[:, 0] = True
        canvas[:, -1] = True
    elif pattern == "solid":
        canvas[:, :] = True
    elif pattern == "clear":
        pass
    else:
        raise ValueError(f"Unknown test pattern: {pattern}")

    return canvas


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flipdot", description="Flip-dot panel driver")
    parser.add_argument("--config", help="Path to a TOML configuration file")
    parser.add_argument("--port", help="Serial device; omit for debug mode")
    parser.add_argument("--baud", type=int, help="Serial baudrate; 0 for debug mode")
    parser.add_argument("--width", type=int, help="Panel width in dots")
    parser.add_argument("--height", type=int, help="Panel height in dots")
    parser.add_argument(
        "--address",
        type=lambda s: int(s, 0),
        action="append",
        help="Panel address byte (repeatable); omit to broadcast",
    )
    parser.add_argument("--pattern", choices=PATTERNS, default="checkerboard")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--queue", action="store_true", help="Queue the frame without showing it"
    )
    mode.add_argument(
        "--refresh", action="store_true", help="Broadcast a refresh of queued frames"
    )
    mode.add_argument(
        "--dump", action="store_true", help="Print the frame as hex without sending"
    )
    parser.add_argument("--preview", help="Also save the pattern as a PNG to this path")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def resolve_config(args: argparse.Namespace) -> PanelConfig:
    """Merge the config file (or defaults) with command line overrides."""
    base = load_from_toml(args.config) if args.config else default_config()
    serial = SerialConfig(
        port=base.serial.port if args.port is None else args.port,
        baudrate=base.serial.baudrate if args.baud is None else args.baud,
        timeout=base.serial.timeout,
    )
    return PanelConfig(
        width=base.width if args.width is None else args.width,
        height=base.height if args.height is None else args.height,
        address=base.address if args.address is None else parse_address(args.address),
        strict=base.strict,
        serial=serial,
    )


def run(args: argparse.Namespace) -> None:
    cfg = resolve_config(args)
    with Panel.from_config(cfg) as panel:
        panel.set_data(create_test_pattern(cfg.width, cfg.height, args.pattern))

        if args.preview:
            panel.bitmap.to_image(scale=8).save(args.preview)
            logger.info("Saved preview to %s", args.preview)

        if args.dump:
            print(panel.get_frame(True).hex())
            return

        if args.queue:
            if not panel.queue():
                raise FlipdotError("queueing the frame failed")
        elif args.refresh:
            panel.refresh()
        else:
            panel.send()
        panel.serial_port.flush()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        run(args)
    except FlipdotError as e:
        logger.error("flipdot error: %s", e)
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
