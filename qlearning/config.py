from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

import yaml

from sokoban_core.parser import DEFAULT_STATE_BITS
from .trainer import TrainParams


@dataclass(frozen=True)
class RunConfig:
    """Options of one training run. Passed explicitly into the driver."""
    train: TrainParams = field(default_factory=TrainParams)
    sleep_ms: int = 100 # pause between displayed steps
    quiet: int = 0 # steps trained before anything is displayed
    seed: Optional[int] = None
    random_device: bool = False # seed from os.urandom instead of the clock
    print_q_success: bool = False
    print_q_failure: bool = False
    print_q_exit: bool = False
    emoji: bool = False
    state_bits: int = DEFAULT_STATE_BITS
    dtype: str = "float64"

    def normalized(self) -> "RunConfig":
        """Negative sleep/quiet are treated as 0."""
        return replace(self, sleep_ms=max(0, self.sleep_ms), quiet=max(0, self.quiet))


_RUN_KEYS = {f.name for f in fields(RunConfig)} - {"train"}


def _as_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if v in (0, 1):
        return bool(v)
    raise ValueError(f"expected true/false, got {v!r}")


def _as_int(v: Any) -> int:
    if isinstance(v, bool) or isinstance(v, float) and not v.is_integer():
        raise ValueError(f"expected an integer, got {v!r}")
    return int(v)


_RUN_TYPES = {
    "sleep_ms": _as_int,
    "quiet": _as_int,
    "seed": lambda v: None if v is None else _as_int(v),
    "random_device": _as_bool,
    "print_q_success": _as_bool,
    "print_q_failure": _as_bool,
    "print_q_exit": _as_bool,
    "emoji": _as_bool,
    "state_bits": _as_int,
    "dtype": str,
}


def _coerce_run(run_cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for k, v in run_cfg.items():
        try:
            out[k] = _RUN_TYPES[k](v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"run.{k}: {e}") from e
    return out


def config_from_dict(cfg: Dict[str, Any]) -> RunConfig:
    """Builds a RunConfig from {'train': {...}, 'run': {...}}; unknown keys are errors."""
    cfg = cfg or {}
    unknown = set(cfg) - {"train", "run"}
    if unknown:
        raise ValueError(f"unknown config sections: {sorted(unknown)}")

    train_cfg = cfg.get("train") or {}
    bad = set(train_cfg) - set(TrainParams.field_names())
    if bad:
        raise ValueError(f"unknown train keys: {sorted(bad)}")
    train = TrainParams(**{k: float(v) for k, v in train_cfg.items()})

    run_cfg = cfg.get("run") or {}
    bad = set(run_cfg) - _RUN_KEYS
    if bad:
        raise ValueError(f"unknown run keys: {sorted(bad)}")
    return RunConfig(train=train, **_coerce_run(run_cfg))


def load_config(path: Optional[str]) -> RunConfig:
    if path is None:
        return RunConfig()
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if cfg is not None and not isinstance(cfg, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    return config_from_dict(cfg or {})


def with_overrides(cfg: RunConfig, train: Optional[Dict[str, Any]] = None, **run: Any) -> RunConfig:
    """Returns cfg with the given non-None values replaced (command-line flags win)."""
    train = {k: v for k, v in (train or {}).items() if v is not None}
    run = {k: v for k, v in run.items() if v is not None}
    new_train = replace(cfg.train, **train) if train else cfg.train
    return replace(cfg, train=new_train, **run)
