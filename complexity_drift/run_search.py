"""CLI entrypoint for rearrangement runs.

This module owns CLI argument parsing and mode dispatch. All domain logic
lives in the extracted modules:

- ``complexity_drift.config``             – configuration dataclasses
- ``complexity_drift.simulation.engine``  – single-universe driver
- ``complexity_drift.experiments``        – multi-tile embedding experiment
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from complexity_drift.config.constants import (
    EMBEDDING_GRID_SIZE,
    EMBEDDING_STEPS,
    EMBEDDING_TILES,
    FRAME_DELAY_CS,
    FRAME_SCALE,
    GAUSSIAN_STDDEV,
    GRID_SIZE,
    NEIGHBORHOOD_RADIUS,
    NOISE_CELLS,
    NUM_ACTIVE,
    NUM_STEPS,
)
from complexity_drift.config.types import (
    AggregateScope,
    EmbeddingConfig,
    EstimatorKind,
    PolicyKind,
    SearchConfig,
    UniverseConfig,
)
from complexity_drift.experiments.embedding import run_embedding
from complexity_drift.simulation.engine import run_universe
from complexity_drift.viz.theme import get_theme

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _parse_enum(enum_cls: type, raw: str, label: str):  # type: ignore[no-untyped-def]
    """Parse *raw* into a member of *enum_cls* by value."""
    try:
        return enum_cls(raw)
    except ValueError as exc:
        valid = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"{label} must be one of {valid}") from exc


def _coerce_bool(raw: object, key: str) -> bool:
    """Coerce raw value to bool with strict string-check."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"{key} must be an integer value") from exc
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Coerce raw value to float; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        try:
            return float(raw)
        except ValueError as exc:
            raise ValueError(f"{key} must be a float value") from exc
    raise ValueError(f"{key} must be a float value")


def _coerce_str(raw: object, key: str) -> str:
    """Coerce raw value to str; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_bool(cli_val: bool | None, key: str, file_cfg: dict[str, object], default: bool) -> bool:
    return _coerce_bool(_get_val(cli_val, key, file_cfg, default), key)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_optional_int(cli_val: int | None, key: str, file_cfg: dict[str, object]) -> int | None:
    raw = _get_val(cli_val, key, file_cfg, None)
    return None if raw is None else _coerce_int(raw, key)


def _get_float(
    cli_val: float | None, key: str, file_cfg: dict[str, object], default: float
) -> float:
    return _coerce_float(_get_val(cli_val, key, file_cfg, default), key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    return _coerce_str(_get_val(cli_val, key, file_cfg, default), key)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Rearrange grid cells toward lower compression-length complexity"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("--universe", action=argparse.BooleanOptionalAction, default=None)
    mode_group.add_argument("--embedding", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument(
        "--policy", type=str, choices=[kind.value for kind in PolicyKind], default=None
    )
    parser.add_argument(
        "--estimator", type=str, choices=[kind.value for kind in EstimatorKind], default=None
    )
    parser.add_argument(
        "--aggregate-scope",
        type=str,
        choices=[scope.value for scope in AggregateScope],
        default=None,
    )
    parser.add_argument("--size", type=int, default=None)
    parser.add_argument("--n-active", type=int, default=None)
    parser.add_argument("--radius", type=int, default=None)
    parser.add_argument("--steps", type=int, default=None)
    parser.add_argument("--attempt-budget", type=int, default=None)
    parser.add_argument("--stddev", type=float, default=None)
    parser.add_argument("--noise-cells", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument("--scale", type=int, default=None)
    parser.add_argument("--frame-delay", type=int, default=None, help="centiseconds per frame")
    parser.add_argument("--theme", type=str, default=None)
    parser.add_argument("--render", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--dataset", type=Path, default=None, help="labeled CSV for --embedding")
    parser.add_argument("--grid-size", type=int, default=None)
    parser.add_argument("--tiles", type=int, default=None)
    parser.add_argument("--workers", type=int, default=None)
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
    """CLI entrypoint.

    Supports ``--config path/to/config.json`` for experiment reproducibility.
    CLI arguments override config-file values; config-file values override
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

    logging.basicConfig(
        level=_get_str(args.log_level, "log_level", file_cfg, "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    is_universe = _get_bool(args.universe, "universe", file_cfg, False)
    is_embedding = _get_bool(args.embedding, "embedding", file_cfg, False)
    if is_universe and is_embedding:
        parser.error(
            "--universe and --embedding cannot both be enabled; "
            "disable one via CLI (--no-universe / --no-embedding) "
            "or in the config file"
        )

    try:
        policy = _parse_enum(
            PolicyKind,
            _get_str(args.policy, "policy", file_cfg, PolicyKind.PAIRWISE.value),
            "policy",
        )
        estimator = _parse_enum(
            EstimatorKind,
            _get_str(args.estimator, "estimator", file_cfg, EstimatorKind.ZLIB.value),
            "estimator",
        )
        scope = _parse_enum(
            AggregateScope,
            _get_str(
                args.aggregate_scope, "aggregate_scope", file_cfg, AggregateScope.ACTIVE.value
            ),
            "aggregate-scope",
        )
        theme = get_theme(_get_str(args.theme, "theme", file_cfg, "default"))
        default_steps = EMBEDDING_STEPS if is_embedding else NUM_STEPS
        search = SearchConfig(
            policy=policy,
            estimator=estimator,
            radius=_get_int(args.radius, "radius", file_cfg, NEIGHBORHOOD_RADIUS),
            steps=_get_int(args.steps, "steps", file_cfg, default_steps),
            attempt_budget=_get_optional_int(args.attempt_budget, "attempt_budget", file_cfg),
            aggregate_scope=scope,
            stddev=_get_float(args.stddev, "stddev", file_cfg, GAUSSIAN_STDDEV),
            noise_cells=_get_int(args.noise_cells, "noise_cells", file_cfg, NOISE_CELLS),
        )
        seed = _get_int(args.seed, "seed", file_cfg, 1)
        out_dir = Path(_get_str(args.out_dir, "out_dir", file_cfg, "data"))

        if is_embedding:
            dataset_raw = _get_val(args.dataset, "dataset", file_cfg, None)
            if dataset_raw is None:
                parser.error("--embedding requires --dataset")
            embedding_config = EmbeddingConfig(
                dataset_path=Path(_coerce_str(dataset_raw, "dataset")),
                out_dir=out_dir,
                grid_size=_get_int(args.grid_size, "grid_size", file_cfg, EMBEDDING_GRID_SIZE),
                tiles=_get_int(args.tiles, "tiles", file_cfg, EMBEDDING_TILES),
                workers=_get_int(args.workers, "workers", file_cfg, 1),
                seed=seed,
                search=search,
            )
        else:
            universe_config = UniverseConfig(
                size=_get_int(args.size, "size", file_cfg, GRID_SIZE),
                n_active=_get_int(args.n_active, "n_active", file_cfg, NUM_ACTIVE),
                seed=seed,
                search=search,
                scale=_get_int(args.scale, "scale", file_cfg, FRAME_SCALE),
                frame_delay_cs=_get_int(args.frame_delay, "frame_delay", file_cfg, FRAME_DELAY_CS),
            )
        render = _get_bool(args.render, "render", file_cfg, True)
    except ValueError as exc:
        parser.error(str(exc))

    if is_embedding:
        tiles = run_embedding(embedding_config, theme=theme)
        summary: dict[str, object] = {
            "mode": "embedding",
            "policy": policy.value,
            "tiles": [
                {
                    "tile": t.tile,
                    "seed": t.seed,
                    "initial_complexity": t.initial_complexity,
                    "final_complexity": t.final_complexity,
                    "best_complexity": t.best_complexity,
                }
                for t in tiles
            ],
        }
    else:
        result = run_universe(universe_config, out_dir, render=render, theme=theme)
        summary = {
            "mode": "universe",
            "policy": policy.value,
            "run_id": result.run_id,
            "initial_complexity": result.initial_complexity,
            "final_complexity": result.final_complexity,
            "best_complexity": result.best_complexity,
            "outcomes": result.outcomes,
            "animation": None if result.animation is None else str(result.animation),
        }
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
