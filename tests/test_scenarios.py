# tests/test_scenarios.py
import dataclasses
import math
from pathlib import Path

import pytest

from scenarios import DEFAULT_YAML, get_scenario, load_paths, load_scenarios
from utils.cftp_params import CFTPParams
from utils.exceptions import UnknownScenarioError


def test_defaults_match_original_model():
    p = CFTPParams()
    assert p.exit_threshold == 0.35
    assert (p.alpha_incumbent, p.beta_incumbent) == (5.0, 1.0)
    assert (p.alpha_entrant, p.beta_entrant) == (5.0, 1.0)
    assert (p.t_start, p.t_increment, p.max_depth) == (100, 50, 5000)


@pytest.mark.parametrize("kwargs", [
    {"exit_threshold": -0.1},
    {"exit_threshold": math.nan},
    {"alpha_incumbent": 0.0},
    {"beta_entrant": -1.0},
    {"t_start": 0},
    {"t_increment": 0},
    {"t_start": 100, "max_depth": 99},
])
def test_invalid_params_rejected(kwargs):
    with pytest.raises(ValueError):
        CFTPParams(**kwargs)


def test_params_are_frozen():
    p = CFTPParams()
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.exit_threshold = 0.5


def test_shipped_yaml_loads():
    scns = {s.id: s for s in load_scenarios(DEFAULT_YAML)}
    assert {"baseline", "shallow", "no_exit", "all_exit"} <= set(scns)
    assert scns["baseline"].params == CFTPParams()
    assert scns["baseline"].draws == 200000
    assert scns["baseline"].seed is None
    assert scns["shallow"].params.max_depth == 40
    assert scns["no_exit"].params.exit_threshold == 0.0
    assert scns["all_exit"].params.exit_threshold == 1.5


def test_rows_override_defaults(tmp_path: Path):
    cfg = tmp_path / "s.yaml"
    cfg.write_text(
        "defaults:\n"
        "  draws: 5\n"
        "  seed: 3\n"
        "  cftp: {exit_threshold: 0.4, t_start: 20}\n"
        "scenarios:\n"
        "  - id: a\n"
        "  - id: b\n"
        "    seed: 9\n"
        "    cftp: {t_start: 30}\n"
    )
    a = get_scenario("a", cfg)
    b = get_scenario("b", cfg)
    assert a.params.exit_threshold == b.params.exit_threshold == 0.4
    assert (a.params.t_start, b.params.t_start) == (20, 30)
    assert (a.seed, b.seed) == (3, 9)
    assert a.draws == 5


def test_unknown_cftp_key_rejected(tmp_path: Path):
    cfg = tmp_path / "s.yaml"
    cfg.write_text("scenarios:\n  - id: a\n    cftp: {threshold: 0.3}\n")
    with pytest.raises(ValueError, match="unknown cftp keys"):
        load_scenarios(cfg)


def test_missing_scenario():
    with pytest.raises(UnknownScenarioError):
        get_scenario("does-not-exist")


def test_paths_resolve_next_to_yaml(tmp_path: Path):
    cfg = tmp_path / "s.yaml"
    cfg.write_text("defaults:\n  paths: {draws_out: out/d.parquet}\n"
                   "scenarios:\n  - id: a\n")
    assert load_paths(cfg)["draws_out"] == (tmp_path / "out" / "d.parquet").resolve()
