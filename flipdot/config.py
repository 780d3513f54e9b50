# flipdot/config.py
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SerialConfig:
    """Serial link settings. An empty port or a zero baudrate means debug mode."""

    port: str = ""
    baudrate: int = 0
    timeout: float = 1.0

    def __post_init__(self) -> None:
        if self.baudrate < 0:
            raise ConfigError("Serial baudrate must be >= 0")
        if self.timeout <= 0:
            raise ConfigError("Serial timeout must be > 0")

    @property
    def debug(self) -> bool:
        return not self.port or self.baudrate == 0


@dataclass(frozen=True)
class PanelConfig:
    width: int = 28
    height: int = 7
    address: Optional[bytes] = None
    strict: bool = False
    serial: SerialConfig = field(default_factory=SerialConfig)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(
                f"Panel size must be positive, got ({self.width}x{self.height})"
            )
        if self.address is not None and not isinstance(self.address, bytes):
            raise ConfigError(
                f"Panel address must be bytes or None, got {type(self.address).__name__}"
            )


def parse_address(value) -> Optional[bytes]:
    """
    Convert a configured address into bytes.

    Accepts None (broadcast), a single int or a list of ints, each 0-255.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"Invalid panel address {value!r}")
    values = [value] if isinstance(value, int) else list(value)
    for v in values:
        if isinstance(v, bool) or not isinstance(v, int) or not (0 <= v <= 0xFF):
            raise ConfigError(f"Panel address bytes must be 0-255, got {v!r}")
    return bytes(values) or None


def load_from_toml(config_path: str | Path) -> PanelConfig:
    """
    Load a PanelConfig from a TOML file.

    Expected TOML structure:

    [panel]
    width = 28
    height = 7
    address = 1        # int, list of ints, or omit for broadcast
    strict = false

    [serial]
    port = "/dev/ttyUSB0"   # empty for debug mode
    baudrate = 57600        # 0 for debug mode
    timeout = 1.0
    """
    p = Path(config_path)
    if not p.exists():
        raise FileNotFoundError(f"Configuration file not found: {p}")

    with p.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {p}: {e}") from e

    panel = data.get("panel", {})
    serial = data.get("serial", {})
    for name, table in (("panel", panel), ("serial", serial)):
        if not isinstance(table, dict):
            raise ConfigError(f"[{name}] in {p} must be a table, got {table!r}")

    try:
        cfg = PanelConfig(
            width=int(panel.get("width", 28)),
            height=int(panel.get("height", 7)),
            address=parse_address(panel.get("address")),
            strict=bool(panel.get("strict", False)),
            serial=SerialConfig(
                port=str(serial.get("port", "")),
                baudrate=int(serial.get("baudrate", 0)),
                timeout=float(serial.get("timeout", 1.0)),
            ),
        )
    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration in {p}: {e}") from e

    logger.info(
        "Loaded PanelConfig: %dx%d, address=%s, serial=%s@%d (debug=%s)",
        cfg.width,
        cfg.height,
        cfg.address.hex() if cfg.address else "broadcast",
        cfg.serial.port or "-",
        cfg.serial.baudrate,
        cfg.serial.debug,
    )
    return cfg


def default_config() -> PanelConfig:
    """A single 28x7 broadcast panel with no serial connection."""
    return PanelConfig(width=28, height=7, address=None, serial=SerialConfig())
