"""CLI entrypoint for drop simulations.

This module owns CLI argument parsing, config-file resolution and the JSON
summary. All domain logic lives in the extracted modules:

- ``rockfall.config``            – constants and configuration dataclasses
- ``rockfall.domain``            – field, shapes, generators, cycle detector
- ``rockfall.simulation.engine`` – ``run_reference_counts`` engine
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from rockfall.config.constants import (
    CONFIRMATION_THRESHOLD,
    FIELD_WIDTH,
    REFERENCE_COUNTS,
)
from rockfall.config.types import DropConfig
from rockfall.errors import ConfigurationError
from rockfall.simulation.engine import run_reference_counts

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _coerce_bool(raw: object, key: str) -> bool:
    if isinstance(raw, bool):
        return raw
    raise ConfigurationError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats.

    Floats are accepted so a JSON config may write ``1e12``.
    """
    if isinstance(raw, bool):
        raise ConfigurationError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ConfigurationError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, int):
        return raw
    raise ConfigurationError(f"{key} must be an integer value, got {raw!r}")


def _coerce_str(raw: object, key: str) -> str:
    if isinstance(raw, str):
        return raw
    raise ConfigurationError(f"{key} must be a string value, got {raw!r}")


def _coerce_path(raw: object, key: str) -> Path:
    if isinstance(raw, Path):
        return raw
    return Path(_coerce_str(raw, key))


def _parse_counts(raw: object) -> tuple[int, ...]:
    """Parse a list of positive shape counts."""
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ConfigurationError("counts must be a non-empty list of integers")
    counts = tuple(_coerce_int(value, "counts") for value in raw)
    if any(count < 1 for count in counts):
        raise ConfigurationError("counts values must be >= 1")
    return counts


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_bool(cli_val: bool | None, key: str, file_cfg: dict[str, object], default: bool) -> bool:
    """CLI > file > default resolution for boolean flags."""
    return _coerce_bool(_get_val(cli_val, key, file_cfg, default), key)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    """CLI > file > default resolution for integer values."""
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    """CLI > file > default resolution for string values."""
    return _coerce_str(_get_val(cli_val, key, file_cfg, default), key)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Drop shapes under a push pattern and report the field height"
    )
    parser.add_argument("pattern_file", type=Path, help="Text file holding the < / > pattern")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument(
        "--count",
        type=int,
        action="append",
        default=None,
        help="Number of shapes to settle (repeatable; default 2022 and 10^12)",
    )
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--confirmation-threshold", type=int, default=None)
    parser.add_argument(
        "--cycle-detection",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Extrapolate from a confirmed period instead of simulating every shape",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Write logs/settle_log.parquet under this directory",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
    )
    return parser


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for drop simulations.

    Supports ``--config path/to/config.json`` for reproducibility. CLI
    arguments override config-file values; config-file values override
    built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")
        if not isinstance(file_cfg, dict):
            parser.error(f"Config file must hold a JSON object: {args.config}")

    try:
        log_level = _get_str(args.log_level, "log_level", file_cfg, "WARNING")
        logging.basicConfig(level=log_level.upper())
        counts = _parse_counts(_get_val(args.count, "counts", file_cfg, list(REFERENCE_COUNTS)))
        config = DropConfig(
            width=_get_int(args.width, "width", file_cfg, FIELD_WIDTH),
            cycle_detection=_get_bool(args.cycle_detection, "cycle_detection", file_cfg, True),
            confirmation_threshold=_get_int(
                args.confirmation_threshold,
                "confirmation_threshold",
                file_cfg,
                CONFIRMATION_THRESHOLD,
            ),
        )
        out_dir_raw = _get_val(args.out_dir, "out_dir", file_cfg, None)
        out_dir = None if out_dir_raw is None else _coerce_path(out_dir_raw, "out_dir")
    except ValueError as exc:
        parser.error(str(exc))

    try:
        pattern = Path(args.pattern_file).read_text()
    except FileNotFoundError:
        parser.error(f"Pattern file not found: {args.pattern_file}")

    try:
        results = run_reference_counts(pattern, counts=counts, config=config, out_dir=out_dir)
    except ConfigurationError as exc:
        parser.error(str(exc))

    summary = {
        "width": config.width,
        "cycle_detection": config.cycle_detection,
        "results": [result.to_dict() for result in results],
    }
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
