"""Parquet schema definitions for simulation artifacts.

The Arrow schema used for persisting settle logs is centralised here so the
engine, the persistence helpers and the tests share one column contract.
"""

from __future__ import annotations

import pyarrow as pa

SETTLE_LOG_SCHEMA_VERSION = 1

SETTLE_LOG_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("iteration", pa.int64()),
        ("shape_index", pa.int64()),
        ("column", pa.int64()),
        ("row", pa.int64()),
        ("push_phase", pa.int64()),
        ("height", pa.int64()),
    ]
)
