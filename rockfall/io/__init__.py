"""Input/output layer: Parquet schemas and output paths."""
