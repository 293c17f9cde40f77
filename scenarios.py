# scenarios.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from utils.cftp_params import CFTPParams
from utils.exceptions import UnknownScenarioError

_ROOT = Path(__file__).resolve().parent
DEFAULT_YAML = _ROOT / "scenarios.yaml"

# data-class consumed by sim_runner
@dataclass(frozen=True, slots=True)
class ScenarioCFTP:
    id:          str
    params:      CFTPParams
    draws:       int
    seed:        Optional[int] = None
    description: str = ""


# public API
def load_scenarios(yaml_path: str | Path = DEFAULT_YAML) -> List[ScenarioCFTP]:
    """
    Parse `scenarios.yaml` and return a fully-typed list of ScenarioCFTP.
    Each row's `cftp:` block is merged over `defaults.cftp`; unknown keys
    are rejected rather than silently ignored.
    """
    raw: Dict[str, Any] = yaml.safe_load(Path(yaml_path).read_text()) or {}
    defaults = raw.get("defaults", {})
    rows = raw.get("scenarios") or []
    if not rows:
        raise ValueError(f"{yaml_path}: no scenarios defined")
    return [_build_scenario(row, defaults) for row in rows]


def get_scenario(
    scenario_id: str,
    yaml_path: str | Path = DEFAULT_YAML,
) -> ScenarioCFTP:
    for scn in load_scenarios(yaml_path):
        if scn.id == scenario_id:
            return scn
    raise UnknownScenarioError(f"scenario '{scenario_id}' not found in {yaml_path}")


def load_paths(yaml_path: str | Path = DEFAULT_YAML) -> Dict[str, Path]:
    """`defaults.paths` block, resolved against the YAML file's directory."""
    yaml_path = Path(yaml_path)
    raw = yaml.safe_load(yaml_path.read_text()) or {}
    paths = raw.get("defaults", {}).get("paths", {}) or {}
    return {key: (yaml_path.parent / val).resolve() for key, val in paths.items()}


# ── internal helpers ─────────────────────────────────────────────────
def _build_scenario(row: Dict[str, Any], defaults: Dict[str, Any]) -> ScenarioCFTP:
    if "id" not in row:
        raise ValueError("every scenario needs an 'id'")

    cfg = {**defaults.get("cftp", {}), **(row.get("cftp") or {})}
    unknown = set(cfg) - CFTPParams.field_names()
    if unknown:
        raise ValueError(f"scenario '{row['id']}': unknown cftp keys {sorted(unknown)}")

    draws = int(row.get("draws", defaults.get("draws", 1)))
    if draws < 1:
        raise ValueError(f"scenario '{row['id']}': draws must be ≥ 1")
    seed = row.get("seed", defaults.get("seed"))

    return ScenarioCFTP(
        id=str(row["id"]),
        params=CFTPParams(**cfg),
        draws=draws,
        seed=None if seed is None else int(seed),
        description=row.get("description", ""),
    )
