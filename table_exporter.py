# table_exporter.py
"""
helper to produce sanity tables from a curated batch of draws.

• CSV written to tables/summary_metrics.csv
• LaTeX (booktabs) written to tables/summary_metrics.tex
"""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd
import tabulate

_LOG = logging.getLogger(__name__)

_CUR  = Path(__file__).parent
_TDIR = _CUR / "tables"


def summarise(df: pd.DataFrame) -> pd.DataFrame:
    """
    One-row table of batch diagnostics.  Expects the flags added by
    `curation.curate`.  Moments are taken over successful draws only.
    """
    ok = df.loc[~df["failed"], "value"]
    n = len(df)
    n_fail = int(df["failed"].sum())
    return pd.DataFrame([{
        "n_draws": n,
        "n_failed": n_fail,
        "fail_rate": n_fail / n if n else np.nan,
        "frac_below_threshold": (float(df.loc[~df["failed"], "below_threshold"].mean())
                                 if len(ok) else np.nan),
        "mean_value": float(ok.mean()) if len(ok) else np.nan,
        "median_value": float(ok.median()) if len(ok) else np.nan,
        "mean_depth": float(df["depth"].mean()),
        "mean_rounds": float(df["rounds"].mean()),
        "max_depth_seen": int(df["depth"].max()),
    }])


def batch_fractions(df: pd.DataFrame, n_batches: int = 10) -> pd.Series:
    """
    Below-threshold share within each of ``n_batches`` contiguous blocks of
    successful draws.  Stable values across blocks are the qualitative
    stationarity check; no distribution is fitted.
    """
    if n_batches < 1:
        raise ValueError("n_batches must be ≥ 1")
    ok = df.loc[~df["failed"]].sort_values("draw")
    if len(ok) < n_batches:
        raise ValueError(f"need at least {n_batches} successful draws, got {len(ok)}")
    block = np.arange(len(ok)) * n_batches // len(ok)
    return (ok["below_threshold"].groupby(block).mean()
              .rename("frac_below_threshold")
              .rename_axis("batch"))


def export(df: pd.DataFrame, out_dir: str | Path = _TDIR, *, n_batches: int = 10) -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    summary = summarise(df)

    csv_path = out_dir / "summary_metrics.csv"
    summary.to_csv(csv_path, index=False)
    latex = tabulate.tabulate(summary, headers="keys", tablefmt="latex_booktabs",
                              floatfmt=".4f", showindex=False)
    (out_dir / "summary_metrics.tex").write_text(latex)

    n_ok = int((~df["failed"]).sum())
    if n_ok >= n_batches:
        batch_fractions(df, n_batches).to_csv(out_dir / "batch_fractions.csv")

    _LOG.info("table_exporter ▸ wrote tables to %s", out_dir.as_posix())
    return csv_path


if __name__ == "__main__":
    import argparse

    import curation
    from scenarios import DEFAULT_YAML, get_scenario

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    p = argparse.ArgumentParser(description="Summarise a batch of draws.")
    p.add_argument("draws", help="Parquet written by sim_runner --out")
    p.add_argument("--config", default=str(DEFAULT_YAML))
    p.add_argument("--scenario", default="baseline",
                   help="Scenario the draws came from (sets the exit threshold)")
    p.add_argument("--out-dir", default=str(_TDIR))
    args = p.parse_args()
    scn = get_scenario(args.scenario, args.config)
    export(curation.curate(pd.read_parquet(args.draws), scn.params), args.out_dir)
