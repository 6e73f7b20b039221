# microdiff/core/config.py
"""
Engine configuration.

A single active `EngineConfig` is consulted by the engine. It can be swapped
for the duration of a block with `configure(...)`, mirroring how `use_tape()`
swaps the active tape.
"""

from __future__ import annotations
import os
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class EngineConfig:
    """
    Attributes
    ----------
    check_cycles : bool
        Track in-progress values during the topological sort and raise
        GraphCycleError on a back edge. When False, cyclic graphs are
        undefined behaviour.
    log_graph_size : bool
        Emit a DEBUG record with the number of sorted values on every
        backward pass.
    """
    check_cycles: bool = True
    log_graph_size: bool = False


_active = EngineConfig(check_cycles=_env_flag("MICRODIFF_CHECK_CYCLES", True))


def get_config() -> EngineConfig:
    return _active


def set_config(cfg: EngineConfig) -> None:
    global _active
    if not isinstance(cfg, EngineConfig):
        raise TypeError(f"expected EngineConfig, got {type(cfg)}")
    _active = cfg


@contextmanager
def configure(**overrides):
    """
    Temporarily override config fields:
        with configure(check_cycles=False):
            y.backward()
    """
    known = {f.name for f in fields(EngineConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"unknown config option(s): {sorted(unknown)}")
    prev = get_config()
    set_config(replace(prev, **overrides))
    try:
        yield get_config()
    finally:
        set_config(prev)
