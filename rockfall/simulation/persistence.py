"""Parquet persistence helpers for the settle log stream."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from rockfall.io.schemas import SETTLE_LOG_SCHEMA


def new_settle_columns() -> dict[str, list[int | str]]:
    """Return empty in-memory column buffers matching ``SETTLE_LOG_SCHEMA``."""
    return {name: [] for name in SETTLE_LOG_SCHEMA.names}


def flush_settle_columns(
    settle_columns: dict[str, list[int | str]],
    settle_log_path: Path,
    settle_writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated settle rows to Parquet and clear in-memory buffers."""
    if not settle_columns["run_id"]:
        return settle_writer
    settle_table = pa.Table.from_pydict(settle_columns, schema=SETTLE_LOG_SCHEMA)
    if settle_writer is None:
        settle_writer = pq.ParquetWriter(settle_log_path, SETTLE_LOG_SCHEMA)
    settle_writer.write_table(settle_table)
    for values in settle_columns.values():
        values.clear()
    return settle_writer
