# curation.py
"""
minimal helpers used by sim_runner and table_exporter.

"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

import pandas as pd

import validator
from utils.cftp_params import CFTPParams, FAIL_VALUE

_LOG = logging.getLogger(__name__)

_EXPECTED_ORDER: Final = [
    "draw", "seed",
    "value",
    "depth", "sigma", "rounds", "coalesced",
]

_DTYPES: Final = {
    "draw": "int64",
    "seed": "int64",
    "value": "float64",
    "depth": "int64",
    "sigma": "int64",
    "rounds": "int64",
    "coalesced": "bool",
}


def tidy_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """
    * Re-orders columns so parquet is predictable.
    * Casts bookkeeping columns to fixed dtypes.
    * NO validation here; `curate` enforces the schema.
    """
    cols = [c for c in _EXPECTED_ORDER if c in df.columns] + \
           [c for c in df.columns if c not in _EXPECTED_ORDER]
    df = df[cols].copy()
    for col, dtype in _DTYPES.items():
        if col in df.columns:
            df[col] = df[col].astype(dtype)
    return df


def _add_flags(df: pd.DataFrame, threshold: float) -> pd.DataFrame:
    """
    • failed           – depth bound hit, value is the sentinel
    • below_threshold  – a successful draw of a firm that exits next period
    """
    df["failed"] = df["value"] == FAIL_VALUE
    df["below_threshold"] = (~df["failed"]) & (df["value"] < threshold)
    return df


def curate(df: pd.DataFrame, params: CFTPParams | None = None) -> pd.DataFrame:
    """Tidy, flag and schema-validate one batch of draws."""
    params = params if params is not None else CFTPParams()
    df = tidy_dataframe(df)
    df = _add_flags(df, params.exit_threshold)
    df = validator.SCHEMA.validate(df, lazy=True)

    n_fail = int(df["failed"].sum())
    if n_fail:
        _LOG.warning("curate: %d / %d draws hit the depth bound", n_fail, len(df))
    return df


def curate_file(
    src: str | Path,
    dst: str | Path | None = None,
    params: CFTPParams | None = None,
) -> Path:
    """Parquet → parquet wrapper around `curate`."""
    src = Path(src)
    dst = Path(dst) if dst is not None else src.with_name(f"{src.stem}_curated.parquet")
    df = curate(pd.read_parquet(src), params)
    dst.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(dst, index=False)
    _LOG.info("curation ▸ wrote %s  (%d rows)", dst.as_posix(), len(df))
    return dst
