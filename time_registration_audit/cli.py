"""Command line entry points for the time registration toolkit."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any

from time_registration_audit.exports import (
    dataset_to_serialisable,
    export_dataset_json,
    export_registrations_tsv,
    filter_registrations_by_date,
    load_pattern_cache,
    save_pattern_cache,
)
from time_registration_audit.review import build_review_scenario, render_review_prompt
from time_registration_audit.synthetic import (
    AnomalyConfig,
    AnomalyType,
    DatasetConfig,
    NumericalMetricSpec,
    WorkPatternConfig,
    generate_dataset,
    validate_dataset_config,
)
from time_registration_audit.synthetic.calendar import parse_iso_date
from time_registration_audit.synthetic.scenarios import BASELINE_SCENARIO

logger = logging.getLogger(__name__)


MAX_CONFIG_BYTES = 1024 * 1024  # 1 MiB; config files are small


def _pair(value: str) -> tuple[float, float]:
    parts = value.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected MIN,MAX but got {value!r}")
    try:
        return (float(parts[0]), float(parts[1]))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected numbers in {value!r}") from e


def _labels(value: str) -> tuple[str, ...]:
    labels = tuple(v.strip() for v in value.split(",") if v.strip())
    if not labels:
        raise argparse.ArgumentTypeError("expected at least one label")
    return labels


def _load_config_file(path: Path) -> dict[str, Any]:
    resolved = path.resolve()
    size = resolved.stat().st_size
    if size > MAX_CONFIG_BYTES:
        raise ValueError(
            f"Config file {resolved} is {size} bytes; exceeds limit of {MAX_CONFIG_BYTES} bytes"
        )
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object in the config file")
    return payload


def config_from_mapping(data: dict[str, Any], base: DatasetConfig) -> DatasetConfig:
    """Overlay a JSON-style mapping onto ``base``.

    Keys follow :class:`DatasetConfig` field names; ``anomaly_config``,
    ``work_pattern_config`` and ``numerical_metrics`` take nested objects.
    """

    changes: dict[str, Any] = {}
    try:
        for key, value in data.items():
            changes[key] = _config_value(key, value)
    except (TypeError, KeyError, AttributeError) as e:
        raise ValueError(f"Malformed config value: {e}") from e
    return replace(base, **changes)


def _config_value(key: str, value: Any) -> Any:
    if key in ("start_date", "end_date"):
        return parse_iso_date(value)
    if key in ("projects", "work_categories", "departments"):
        return tuple(str(v) for v in value)
    if key in ("work_start_range", "work_end_range", "break_duration_range"):
        return tuple(float(v) for v in value)
    if key in ("num_employees", "num_registrations_per_employee"):
        return int(value)
    if key in ("skip_weekends", "randomize_assignments"):
        if not isinstance(value, bool):
            raise ValueError(f"{key} must be true or false, got {value!r}")
        return value
    if key == "anomaly_config":
        return AnomalyConfig(
            type=AnomalyType(value.get("type", "none")),
            probability=float(value.get("probability", 0.33)),
        )
    if key == "work_pattern_config":
        return WorkPatternConfig(**{k: int(v) for k, v in value.items()})
    if key == "numerical_metrics":
        return tuple(NumericalMetricSpec(**m) for m in value)
    raise ValueError(f"Unknown config key: {key}")


def _build_config(args: argparse.Namespace) -> DatasetConfig:
    config = BASELINE_SCENARIO
    if args.config:
        config = config_from_mapping(_load_config_file(args.config), config)

    changes: dict[str, Any] = {}
    for attr in (
        "start_date",
        "end_date",
        "num_employees",
        "num_registrations_per_employee",
        "projects",
        "work_categories",
        "departments",
        "work_start_range",
        "work_end_range",
        "break_duration_range",
    ):
        value = getattr(args, attr)
        if value is not None:
            changes[attr] = value
    if args.include_weekends:
        changes["skip_weekends"] = False
    if args.fixed_assignments:
        changes["randomize_assignments"] = False
    if args.anomaly_type is not None or args.anomaly_probability is not None:
        changes["anomaly_config"] = AnomalyConfig(
            type=AnomalyType(args.anomaly_type or config.anomaly_config.type.value),
            probability=(
                args.anomaly_probability
                if args.anomaly_probability is not None
                else config.anomaly_config.probability
            ),
        )
    if args.min_weekend_workers is not None:
        changes["work_pattern_config"] = replace(
            config.work_pattern_config, min_weekend_workers=args.min_weekend_workers
        )
    return replace(config, **changes)


def generate_dataset_cli(argv: list[str] | None = None) -> int:
    """Generate a synthetic time registration dataset.

    Writes JSON (registrations and patterns) and/or the tab-separated export.
    Without ``--output`` or ``--tsv`` the JSON payload goes to stdout. A
    pattern cache file keeps employees consistent across runs: it is read
    when present and rewritten with the merged cache afterwards.

    Returns:
        Exit code (0 for success, 1 for an invalid configuration)
    """
    parser = argparse.ArgumentParser(
        description="Generate synthetic time registrations with labelled anomalies"
    )
    parser.add_argument("--config", type=Path, help="JSON file with DatasetConfig fields")
    parser.add_argument("--start-date", dest="start_date", type=date.fromisoformat)
    parser.add_argument("--end-date", dest="end_date", type=date.fromisoformat)
    parser.add_argument("--employees", dest="num_employees", type=int)
    parser.add_argument(
        "--registrations",
        dest="num_registrations_per_employee",
        type=int,
        help="Registrations per employee (fewer when not enough eligible days)",
    )
    parser.add_argument("--projects", type=_labels, help="Comma-separated project ids")
    parser.add_argument("--categories", dest="work_categories", type=_labels)
    parser.add_argument("--departments", type=_labels)
    parser.add_argument("--start-range", dest="work_start_range", type=_pair)
    parser.add_argument("--end-range", dest="work_end_range", type=_pair)
    parser.add_argument("--break-range", dest="break_duration_range", type=_pair)
    parser.add_argument(
        "--include-weekends",
        action="store_true",
        help="Schedule every employee on weekends too",
    )
    parser.add_argument(
        "--fixed-assignments",
        action="store_true",
        help="Assign projects round-robin by employee instead of at random",
    )
    parser.add_argument(
        "--anomaly-type", choices=[t.value for t in AnomalyType], default=None
    )
    parser.add_argument("--anomaly-probability", type=float, default=None)
    parser.add_argument("--min-weekend-workers", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--patterns",
        type=Path,
        help="Pattern cache JSON; reused if it exists, updated after generation",
    )
    parser.add_argument("--output", type=Path, help="Path for the JSON dataset")
    parser.add_argument("--tsv", type=Path, help="Path for the tab-separated export")
    parser.add_argument(
        "--tsv-from", type=date.fromisoformat, help="Only export TSV rows from this date"
    )
    parser.add_argument(
        "--tsv-to", type=date.fromisoformat, help="Only export TSV rows up to this date"
    )

    args = parser.parse_args(argv)

    existing = {}
    try:
        config = _build_config(args)
        validate_dataset_config(config)
        if args.patterns and args.patterns.exists():
            existing = load_pattern_cache(args.patterns)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    dataset = generate_dataset(config, existing_patterns=existing, seed=args.seed)

    if args.patterns:
        save_pattern_cache(dataset.pattern_cache, args.patterns)
    if args.output:
        export_dataset_json(dataset, args.output)
    if args.tsv:
        rows = filter_registrations_by_date(
            dataset.registrations, args.tsv_from, args.tsv_to
        )
        export_registrations_tsv(rows, args.tsv)
        logger.info(f"Wrote {len(rows)} TSV rows to {args.tsv}")
    if not args.output and not args.tsv:  # stdout fallback
        json.dump(dataset_to_serialisable(dataset), fp=sys.stdout, indent=2)
        print()

    return 0


def review_prompt_cli(argv: list[str] | None = None) -> int:
    """Print an approval-task prompt: one clean month plus one anomalous week."""
    parser = argparse.ArgumentParser(description=review_prompt_cli.__doc__)
    parser.add_argument("--config", type=Path, help="JSON file with DatasetConfig fields")
    parser.add_argument(
        "--monday",
        type=date.fromisoformat,
        help="Start of the history month (defaults to this week's Monday)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--output", type=Path, help="Write the prompt here instead of stdout")

    args = parser.parse_args(argv)
    config = BASELINE_SCENARIO
    try:
        if args.config:
            config = config_from_mapping(_load_config_file(args.config), config)
        validate_dataset_config(config)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    scenario = build_review_scenario(config, reference_monday=args.monday, seed=args.seed)
    prompt = render_review_prompt(scenario)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(prompt, encoding="utf-8")
        logger.info(f"Review prompt written to {args.output}")
    else:
        print(prompt)
    return 0


def _configure_logging() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def main() -> None:
    _configure_logging()
    raise SystemExit(generate_dataset_cli())


def review_main() -> None:
    _configure_logging()
    raise SystemExit(review_prompt_cli())


if __name__ == "__main__":  # pragma: no cover
    main()
