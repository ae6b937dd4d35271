"""cadence CLI: developer tooling around the scheduling core."""

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Annotated

import typer

from cadence.application.config import AppConfig, resolve_config
from cadence.application.factory import get_deck_configs, get_memory_model, get_review_session
from cadence.application.learning_steps import to_whole_ms
from cadence.application.session import SessionStepRegistry
from cadence.application.state_machine import ReviewStateMachine
from cadence.application.utils.text import format_due, format_interval
from cadence.domain.exceptions import ConfigurationError
from cadence.domain.models import Card, CardState, MemorySnapshot, Rating, utc_now
from cadence.infrastructure.adapters.memory_store import InMemoryCardStore

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cadence: spaced-repetition scheduling core.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cadence configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_LOG_LEVELS = {0: logging.ERROR, 1: logging.WARNING, 2: logging.INFO}


def _apply_verbosity(verbose: int) -> None:
    logging.getLogger("cadence").setLevel(_LOG_LEVELS.get(verbose, logging.DEBUG))


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for cadence."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_rating(value: str) -> Rating:
    try:
        return Rating[value.strip().upper()]
    except KeyError:
        if value.isdigit() and 1 <= int(value) <= 4:
            return Rating(int(value))
        raise typer.BadParameter(f"Unknown rating '{value}'. Use again, hard, good or easy.")


def _verbosity(ctx: typer.Context) -> int | None:
    # -v given on the command line overrides the configured level
    bonus = (ctx.obj or {}).get("verbose_bonus", 0)
    return bonus + 1 if bonus else None


@contextmanager
def _config_errors() -> Iterator[None]:
    """Turn a ConfigurationError (settings or deck file) into exit code 2."""
    try:
        yield
    except ConfigurationError as e:
        typer.secho(f"Configuration error: {e}", fg="red", err=True)
        raise typer.Exit(code=2)


def _load_config(
    ctx: typer.Context,
    learning_steps: list[float] | None,
    relearning_steps: list[float] | None,
    graduating_interval: float | None,
    easy_interval: float | None,
) -> AppConfig:
    with _config_errors():
        config = resolve_config(
            {
                "learning_steps": learning_steps or None,
                "relearning_steps": relearning_steps or None,
                "graduating_interval_days": graduating_interval,
                "easy_interval_days": easy_interval,
                "verbose": _verbosity(ctx),
            }
        )
    _apply_verbosity(config.verbose)
    return config


LearningStepsOpt = Annotated[
    list[float] | None,
    typer.Option("--steps", help="Learning step in minutes. Repeat for each rung."),
]
RelearningStepsOpt = Annotated[
    list[float] | None,
    typer.Option("--relearning-steps", help="Relearning step in minutes. Repeat for each rung."),
]
GraduatingOpt = Annotated[
    float | None, typer.Option("--graduating-interval", help="Graduating interval (days).")
]
EasyOpt = Annotated[float | None, typer.Option("--easy-interval", help="Easy interval (days).")]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def preview(
    ctx: typer.Context,
    state: Annotated[
        str, typer.Option(help="Card state: new, learning, review, relearning.")
    ] = "new",
    step_index: Annotated[int, typer.Option(help="Current step index in this session.")] = 0,
    stability: Annotated[float, typer.Option(help="Stability (days) for non-new cards.")] = 5.0,
    difficulty: Annotated[float, typer.Option(help="Difficulty (1-10) for non-new cards.")] = 5.0,
    elapsed_days: Annotated[
        float, typer.Option(help="Days since the last review for non-new cards.")
    ] = 1.0,
    learning_steps: LearningStepsOpt = None,
    relearning_steps: RelearningStepsOpt = None,
    graduating_interval: GraduatingOpt = None,
    easy_interval: EasyOpt = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")] = False,
):
    """Show the next interval each rating would give a card."""
    try:
        card_state = CardState[state.strip().upper()]
    except KeyError:
        raise typer.BadParameter(f"Unknown state '{state}'.", param_hint="--state")

    config = _load_config(
        ctx, learning_steps, relearning_steps, graduating_interval, easy_interval
    )
    now = to_whole_ms(utc_now())

    if card_state == CardState.NEW:
        memory = MemorySnapshot.new(now)
    else:
        memory = MemorySnapshot(
            due=now,
            stability=stability,
            difficulty=difficulty,
            reps=1,
            state=card_state,
            last_review=now - timedelta(days=elapsed_days),
        )
    card = Card(card_id="preview", deck="Default", memory=memory)

    registry = SessionStepRegistry()
    session_id = registry.open_session()
    registry.set_step(session_id, card.card_id, step_index)

    with _config_errors():
        ladder = get_deck_configs(config).resolve(card.deck)

    machine = ReviewStateMachine(get_memory_model(config))
    outcomes = machine.preview(
        card,
        ladder,
        registry.step_state(session_id, card.card_id),
        now,
    )
    registry.close_session(session_id)

    if as_json:
        payload = {
            rating.name.lower(): {
                "state": outcome.state.name.lower(),
                "due": outcome.due.isoformat(),
                "scheduled_days": outcome.scheduled_days,
                "label": format_due(outcome.due, now),
            }
            for rating, outcome in outcomes.items()
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    for rating, outcome in outcomes.items():
        typer.echo(
            f"{rating.name:<6} {format_due(outcome.due, now):>7}  {outcome.state.name.lower()}"
        )


@app.command()
def simulate(
    ctx: typer.Context,
    ratings: Annotated[list[str], typer.Argument(help="Ratings to apply, e.g. good good again.")],
    minutes_between: Annotated[
        float, typer.Option(help="Minutes of wall-clock time between ratings.")
    ] = 0.0,
    learning_steps: LearningStepsOpt = None,
    relearning_steps: RelearningStepsOpt = None,
    graduating_interval: GraduatingOpt = None,
    easy_interval: EasyOpt = None,
):
    """Replay a sequence of ratings on a new card and print each step."""
    parsed = [_parse_rating(r) for r in ratings]
    config = _load_config(
        ctx, learning_steps, relearning_steps, graduating_interval, easy_interval
    )

    store = InMemoryCardStore()
    with _config_errors():
        session = get_review_session(config, store)
    now: datetime = to_whole_ms(utc_now())
    card = Card.new("simulated", now=now)

    for n, rating in enumerate(parsed, start=1):
        card = session.rate(card, rating, card_index=n - 1, now=now)
        step = session.registry.peek_step(session.session_id, card.card_id)
        typer.echo(
            f"{n:>3}. {rating.name:<6} -> {card.memory.state.name.lower():<10} "
            f"step={step} interval={format_interval(card.memory.scheduled_days)} "
            f"reps={card.memory.reps} lapses={card.memory.lapses}"
        )
        now = now + timedelta(minutes=minutes_between)

    stats = session.end()
    typer.echo(f"Reviewed {stats.cards_reviewed}, correct {stats.correct_answers}")


@config_app.command("show")
def config_show():
    """Print the resolved configuration as JSON."""
    with _config_errors():
        config = resolve_config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))


@app.command()
def logs():
    """Create the log directory if needed and print its path."""
    with _config_errors():
        config = resolve_config()
    if not config.log_dir.exists():
        config.log_dir.mkdir(parents=True, exist_ok=True)
    typer.echo(str(config.log_dir))


if __name__ == "__main__":
    app()
