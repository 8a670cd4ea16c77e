from pathlib import Path

import pytest

from qlearning.config import RunConfig, config_from_dict, load_config, with_overrides
from qlearning.trainer import TrainParams

ROOT = Path(__file__).resolve().parent.parent


def test_default_config_file_matches_defaults():
    cfg = load_config(str(ROOT / "configs" / "qlearning.yaml"))
    assert cfg == RunConfig()


def test_no_config_file():
    assert load_config(None) == RunConfig()


def test_partial_yaml(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text("train:\n  alpha: 0.25\nrun:\n  quiet: 500\n  seed: 7\n", encoding="utf-8")
    cfg = load_config(str(p))
    assert cfg.train.alpha == 0.25
    assert cfg.train.gamma == TrainParams().gamma
    assert cfg.quiet == 500 and cfg.seed == 7


def test_unknown_keys_rejected():
    with pytest.raises(ValueError):
        config_from_dict({"train": {"lambda": 0.9}})
    with pytest.raises(ValueError):
        config_from_dict({"run": {"verbose": True}})
    with pytest.raises(ValueError):
        config_from_dict({"model": {}})


def test_overrides_skip_none():
    cfg = with_overrides(RunConfig(), train={"epsilon": 0.2, "alpha": None}, quiet=10, seed=None)
    assert cfg.train.epsilon == 0.2
    assert cfg.train.alpha == TrainParams().alpha
    assert cfg.quiet == 10
    assert cfg.seed is None


def test_negative_counts_clamped():
    cfg = RunConfig(sleep_ms=-5, quiet=-1).normalized()
    assert cfg.sleep_ms == 0 and cfg.quiet == 0


def test_run_values_are_coerced_to_field_types(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text('run:\n  quiet: "10"\n  state_bits: "32"\n  seed: null\n  emoji: 1\n', encoding="utf-8")
    cfg = load_config(str(p))
    assert cfg.quiet == 10 and cfg.state_bits == 32
    assert cfg.seed is None and cfg.emoji is True
    assert cfg.normalized().quiet == 10


def test_run_values_of_wrong_type_rejected():
    with pytest.raises(ValueError, match="run.quiet"):
        config_from_dict({"run": {"quiet": "ten"}})
    with pytest.raises(ValueError, match="run.emoji"):
        config_from_dict({"run": {"emoji": "yes"}})
    with pytest.raises(ValueError, match="run.sleep_ms"):
        config_from_dict({"run": {"sleep_ms": 2.5}})
