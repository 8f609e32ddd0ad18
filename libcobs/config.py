"""libcobs configuration with defaults, loadable from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path

log = logging.getLogger(__name__)


class ShortReadPolicy(str, Enum):
    """What the receiver does when a source returns fewer bytes than asked."""

    RETRY = "retry"  # keep reading until the block is complete or the source ends
    STRICT = "strict"  # any short read aborts the frame


@dataclass
class DecoderConfig:
    short_read_policy: ShortReadPolicy = ShortReadPolicy.RETRY


@dataclass
class SerialConfig:
    port: str = "/dev/ttyUSB0"
    baudrate: int = 115200
    timeout_s: float = 1.0  # per-read blocking timeout
    write_timeout_s: float = 1.0


@dataclass
class FuzzConfig:
    iterations: int = 1000
    max_len: int = 1024
    seed: int | None = None


@dataclass
class CobsConfig:
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    serial: SerialConfig = field(default_factory=SerialConfig)
    fuzz: FuzzConfig = field(default_factory=FuzzConfig)


_SECTIONS = ("decoder", "serial", "fuzz")


def load_config(path: str | Path | None = None) -> CobsConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        return CobsConfig()

    path = Path(path)
    if not path.exists():
        log.warning("config file not found: %s, using defaults", path)
        return CobsConfig()

    import yaml  # type: ignore[import-untyped]

    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        cfg = _from_dict(raw)
    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        log.warning("config load error: %s, using defaults", e)
        return CobsConfig()

    log.info("config loaded from %s", path)
    return cfg


def _from_dict(raw: dict) -> CobsConfig:
    if not isinstance(raw, dict):
        raise TypeError(f"top-level config must be a mapping, got {type(raw).__name__}")

    cfg = CobsConfig()
    for name, values in raw.items():
        if name not in _SECTIONS:
            log.warning("config: ignoring unknown section %r", name)
            continue
        if values is None:
            continue
        if not isinstance(values, dict):
            raise TypeError(
                f"config section {name!r} must be a mapping, got {type(values).__name__}"
            )
        section = getattr(cfg, name)
        known = {f.name for f in fields(section)}
        for k, v in values.items():
            if k not in known:
                log.warning("config: ignoring unknown key %s.%s", name, k)
                continue
            setattr(section, k, v)

    cfg.decoder.short_read_policy = ShortReadPolicy(cfg.decoder.short_read_policy)
    return cfg
