"""Command line interface for Mama Brain."""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import typer

from .angles import derive_angle_candidates, select_primary_angle
from .bias import AggregateStat, calculate_angle_bias, derive_aggregate_seed
from .brain import compose_depth_response
from .classifiers import derive_anonymized_signals
from .config import HEARTBEAT_DELAYS, MamaBrainConfig, load_config
from .keyboard import correct_persian_keyboard
from .knowledge import InMemoryFaqStore, import_faq_entries, load_faq_file
from .logging import configure_logging, get_logger
from .pipeline import PipelineStep, run_mama_pipeline
from .utils import load_yaml_or_json, normalize_persian_text, sanitize_user_prompt

LOGGER = get_logger(__name__)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to a YAML or JSON configuration file.",
)
FAQ_OPTION = typer.Option(
    None,
    "--faq",
    help="FAQ file (JSON list or JSONL of question/answer records).",
)
LAST_KEY_OPTION = typer.Option(
    None,
    "--last-key",
    help="Template key used on the previous turn of the conversation.",
)
SEED_OPTION = typer.Option(
    None,
    "--seed",
    help="Aggregate seed; derived from --stats when omitted.",
)
STATS_OPTION = typer.Option(
    None,
    "--stats",
    help="Aggregate stats file: list of [category, average_score, count] rows.",
)
STEPS_OPTION = typer.Option(
    False,
    "--steps",
    help="Print every pipeline step transition.",
)
HEARTBEAT_OPTION = typer.Option(
    False,
    "--heartbeat",
    help="Pause between steps the way the chat client animates them.",
)

app = typer.Typer(help="Deterministic Persian response engine for the Mama chat.")


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _load_settings(config_path: Optional[Path]) -> MamaBrainConfig:
    config = load_config(config_path)
    configure_logging(config.logging.level)
    return config


def _load_stats(path: Optional[Path]) -> list[AggregateStat]:
    if path is None:
        return []
    rows = load_yaml_or_json(Path(path)) or []
    if not isinstance(rows, list):
        raise typer.BadParameter("Expected a list of [category, average_score, count] rows", param_hint="--stats")
    return [(str(category), float(score), int(count)) for category, score, count in rows]


def _resolve_seed(seed: Optional[int], stats: list[AggregateStat]) -> Optional[int]:
    return seed if seed is not None else derive_aggregate_seed(stats)


def _print_steps(steps: list[PipelineStep]) -> None:
    current = next((step for step in reversed(steps) if step.status.value != "pending"), None)
    if current is not None:
        typer.echo(f"[{current.id}/{len(steps)}] {current.name}: {current.status.value}", err=True)


@app.command()
def respond(
    message: str = typer.Argument(..., help="User message to answer."),
    faq_path: Optional[Path] = FAQ_OPTION,
    last_key: Optional[str] = LAST_KEY_OPTION,
    seed: Optional[int] = SEED_OPTION,
    stats_path: Optional[Path] = STATS_OPTION,
    show_steps: bool = STEPS_OPTION,
    heartbeat: bool = HEARTBEAT_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Run the full seven-step pipeline and print the response with feedback."""

    config = _load_settings(config_path)
    LOGGER.debug("Responding to %r", sanitize_user_prompt(message, config.privacy.prompt_excerpt_length))
    store = InMemoryFaqStore(load_faq_file(faq_path) if faq_path else ())
    pipeline_config = config.pipeline
    if heartbeat:
        pipeline_config.step_delays = dict(HEARTBEAT_DELAYS)
    result = asyncio.run(
        run_mama_pipeline(
            message,
            store.find_match,
            _print_steps if show_steps else None,
            last_key,
            _resolve_seed(seed, _load_stats(stats_path)),
            config=pipeline_config,
        )
    )
    _echo_json(result.to_dict())


@app.command()
def correct(text: str = typer.Argument(..., help="Text to check for a wrong keyboard layout.")) -> None:
    """Remap Latin-layout typing to Persian when it looks mistyped."""

    _echo_json(asdict(correct_persian_keyboard(text)))


@app.command()
def signals(text: str = typer.Argument(..., help="Message to anonymise.")) -> None:
    """Print the anonymised category signals for a message."""

    _echo_json([asdict(signal) for signal in derive_anonymized_signals(normalize_persian_text(text))])


@app.command()
def angles(
    text: str = typer.Argument(..., help="Message to derive angles for."),
    last_key: Optional[str] = LAST_KEY_OPTION,
    seed: Optional[int] = SEED_OPTION,
) -> None:
    """List ranked angle candidates and the primary choice."""

    candidates = derive_angle_candidates(normalize_persian_text(text), seed)
    selection = select_primary_angle(candidates, last_key, seed)
    _echo_json(
        {
            "candidates": [
                {"type": c.type.value, "key": c.key, "priority": c.priority} for c in candidates
            ],
            "primary": selection.angle.key,
            "anti_repetition_triggered": selection.anti_repetition_triggered,
        }
    )


@app.command()
def deep(
    text: str = typer.Argument(..., help="Message to answer with a depth template."),
    last_key: Optional[str] = LAST_KEY_OPTION,
    seed: Optional[int] = SEED_OPTION,
    stats_path: Optional[Path] = STATS_OPTION,
) -> None:
    """Compose a structured, angle-based response."""

    stats = _load_stats(stats_path)
    response = compose_depth_response(text, last_key, _resolve_seed(seed, stats), stats)
    _echo_json(
        {
            "content": response.content,
            "angle": response.angle.type.value,
            "template_key": response.template_key,
            "depth_key": response.depth_key,
            "anti_repetition_triggered": response.anti_repetition_triggered,
        }
    )


@app.command()
def bias(
    stats_path: Path = typer.Argument(..., help="Aggregate stats file."),
    seed: Optional[int] = SEED_OPTION,
) -> None:
    """Print bias weights computed from aggregate category statistics."""

    stats = _load_stats(stats_path)
    _echo_json([asdict(signal) for signal in calculate_angle_bias(stats, seed)])


@app.command("import-faq")
def import_faq(
    faq_path: Path = typer.Argument(..., help="FAQ file to import."),
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Validate and batch-import an FAQ file into an in-memory store."""

    config = _load_settings(config_path)
    entries = load_faq_file(faq_path)
    store = InMemoryFaqStore()
    report = asyncio.run(
        import_faq_entries(
            entries,
            store.add_entry,
            batch_size=config.faq_import.batch_size,
            batch_delay=config.faq_import.batch_delay,
        )
    )
    LOGGER.info("FAQ store now holds %d questions", len(store))
    _echo_json({"success": report.success, "failed": report.failed, "stored": len(store)})
    if report.failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
