from __future__ import annotations

import pandera.pandas as pa
from pandera.pandas import Column, Check

from utils.cftp_params import FAIL_VALUE

# DataFrameSchema

SCHEMA = pa.DataFrameSchema(
    {
        # identifiers
        "draw":      Column(int, Check.ge(0)),
        "seed":      Column(int, Check.ge(0)),

        # the sample itself: a productivity level, or the fail sentinel
        "value":     Column(float, Check(lambda s: (s >= 0) | (s == FAIL_VALUE),
                                         element_wise=False,
                                         error="value must be ≥ 0 or the fail sentinel")),

        # sampler bookkeeping
        "depth":     Column(int, Check.ge(1)),
        "sigma":     Column(int, Check.ge(-1)),
        "rounds":    Column(int, Check.ge(1)),
        "coalesced": Column(bool),

        # added by curation
        "failed":          Column(bool, required=False),
        "below_threshold": Column(bool, required=False),
    },
    checks=[
        Check(lambda df: (df["value"] == FAIL_VALUE) != df["coalesced"],
              error="coalesced draws carry a value, failed draws the sentinel"),
    ],
    coerce=True,
    strict=False,              # allow future diagnostic columns
    index=pa.Index(int),
)
