"""CLI entrypoint for prompt-arena — typer app with `run` and `report` commands."""

import asyncio
import logging
import sys
import tempfile
import time
from datetime import datetime
from pathlib import Path

import structlog
import typer

from prompt_arena.arena.application.prompts import build_follow_up_message
from prompt_arena.arena.application.runner import ArenaRunner
from prompt_arena.arena.domain.observer import ArenaObserver
from prompt_arena.arena.domain.run import ArenaRun
from prompt_arena.arena.infrastructure.composite_observer import CompositeArenaObserver
from prompt_arena.arena.infrastructure.filesystem import FileSystemArtifactStore
from prompt_arena.arena.infrastructure.observer import StructlogArenaObserver
from prompt_arena.arena.infrastructure.progress_observer import ProgressArenaObserver
from prompt_arena.cli.output.report import load_run_report, write_run_report
from prompt_arena.config.domain.config import ArenaConfig, build_output_dir
from prompt_arena.config.domain.judge import JudgeConfig
from prompt_arena.config.domain.runner import RunnerConfig
from prompt_arena.config.domain.settings import ArenaSettings
from prompt_arena.config.infrastructure.observer import StructlogConfigObserver
from prompt_arena.config.infrastructure.yaml_loader import YamlSettingsLoader
from prompt_arena.core.errors import ArenaError
from prompt_arena.judge.domain.observer import JudgeObserver
from prompt_arena.judge.infrastructure.claude_sdk import ClaudeAgentSDKJudgeSession
from prompt_arena.judge.infrastructure.composite_observer import CompositeJudgeObserver
from prompt_arena.judge.infrastructure.console_observer import ConsoleJudgeObserver
from prompt_arena.judge.infrastructure.follow_up import run_follow_up
from prompt_arena.judge.infrastructure.observer import StructlogJudgeObserver
from prompt_arena.prompt.infrastructure.loader import PromptLoader
from prompt_arena.prompt.infrastructure.local_reader import LocalFileReader
from prompt_arena.variation.infrastructure.claude_cli import ClaudeCliVariationRunner
from prompt_arena.variation.infrastructure.observer import StructlogVariationObserver

app = typer.Typer(add_completion=False)

# Prompt evaluated in user mode when no prompt argument is given.
USER_MEMORY_FILE = "~/.claude/CLAUDE.md"


def _configure_structlog(log_format: str, verbose: bool) -> None:
    """Configure structlog based on the requested format.

    Logs go to stderr so they never interleave with the judge's streamed output.
    """
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if verbose else logging.WARNING
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_settings(config_path: Path | None) -> ArenaSettings:
    if config_path is None:
        return ArenaSettings()
    loader = YamlSettingsLoader(observer=StructlogConfigObserver())
    return loader.load(path=config_path)


def _build_config(
    settings: ArenaSettings,
    system_prompt: str,
    task: str | None,
    model: str | None,
    test_model: str | None,
    variations: int | None,
    user_mode: bool | None,
    max_concurrent: int | None,
    output_root: Path | None,
) -> ArenaConfig:
    """Merge CLI flags over the settings file and fix the output directory."""
    root = output_root or settings.output_root or Path(tempfile.gettempdir())
    runner_overrides: dict[str, object] = {}
    if test_model is not None:
        runner_overrides["model"] = test_model
    if max_concurrent is not None:
        runner_overrides["max_concurrent"] = max_concurrent

    return ArenaConfig(
        system_prompt=system_prompt,
        task=task,
        variations=variations if variations is not None else settings.variations,
        user_mode=user_mode if user_mode is not None else settings.user_mode,
        output_dir=build_output_dir(root=root, started_at=datetime.now()),
        judge=JudgeConfig(model=model) if model is not None else settings.judge,
        runner=RunnerConfig.model_validate(
            {**settings.runner.model_dump(), **runner_overrides}
        ),
    )


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_WHITE = "\033[97m"


def _rule(width: int = 72, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _one_line(text: str, max_len: int = 60) -> str:
    flat = " ".join(text.split())
    if len(flat) <= max_len:
        return flat
    return flat[: max_len - 1] + "…"


def _format_elapsed(elapsed_seconds: float) -> str:
    """Format elapsed seconds as '1m 23.4s' or '5.2s'."""
    minutes, seconds = divmod(elapsed_seconds, 60)
    if minutes >= 1:
        return f"{int(minutes)}m {seconds:.1f}s"
    return f"{elapsed_seconds:.1f}s"


def _print_banner(config: ArenaConfig) -> None:
    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(f"{_CYAN}{_BOLD}  prompt-arena  ·  System Prompt Effectiveness{_RESET}")
    _rule(color=_CYAN)
    rows: list[tuple[str, str]] = [
        ("Prompt", _one_line(config.system_prompt)),
        ("Task", _one_line(config.task) if config.task else "designed by judge"),
        ("Judge", config.judge.model),
        ("Runner", config.runner.model),
        ("Variations", str(config.variations)),
        ("User mode", "yes" if config.user_mode else "no"),
        ("Output", str(config.output_dir)),
    ]
    label_w = max(len(label) for label, _ in rows)
    for label, value in rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")
    typer.echo("")


def _print_summary(
    run: ArenaRun,
    elapsed_seconds: float | None,
    json_path: Path | None = None,
    md_path: Path | None = None,
) -> None:
    """Print a colorized per-variation summary to stdout."""
    typer.echo("")
    _rule(color=_CYAN)
    status = f"{_GREEN}Run Complete" if run.success else f"{_RED}Evaluation Failed"
    typer.echo(f"{_CYAN}{_BOLD}  prompt-arena  ·  {status}{_RESET}")
    _rule(color=_CYAN)

    meta_rows: list[tuple[str, str]] = [
        ("Judge session", run.judge_session_id),
        ("Task", _one_line(run.task)),
        ("Succeeded", str(run.succeeded_count)),
        ("Failed", str(run.failed_count)),
        ("Output", str(run.output_dir)),
    ]
    if elapsed_seconds is not None:
        meta_rows.append(("Elapsed", _format_elapsed(elapsed_seconds=elapsed_seconds)))
    if json_path is not None:
        meta_rows.append(("Run report", str(json_path)))
    if md_path is not None:
        meta_rows.append(("Evaluation", str(md_path)))
    label_w = max(len(label) for label, _ in meta_rows)
    for label, value in meta_rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")

    typer.echo("")
    strategies = {info.number: info for info in run.variation_info}
    for result in run.results:
        info = strategies.get(result.variation_number)
        strategy = info.strategy if info is not None else "?"
        mark = f"{_GREEN}✓" if result.succeeded else f"{_YELLOW}⚠"
        typer.echo(
            f"  {mark}{_RESET} [{result.variation_number}] {strategy:<12}"
            f"  {_DIM}exit {result.exit_code}{_RESET}"
        )
    ran = {result.variation_number for result in run.results}
    for number in sorted(set(strategies) - ran):
        typer.echo(f"  {_DIM}-  [{number}] {strategies[number].strategy:<12}  skipped{_RESET}")

    typer.echo("")
    _rule(color=_CYAN)
    typer.echo("")


@app.command()
def run(
    prompt: str | None = typer.Argument(
        None,
        help="System prompt text, or path to a markdown file (@imports are resolved)",
    ),
    task: str | None = typer.Option(
        None, "--task", "-t", help="Literal task to test against (judge designs one otherwise)"
    ),
    model: str | None = typer.Option(None, "--model", "-m", help="Judge model"),
    test_model: str | None = typer.Option(
        None, "--test-model", help="Model used for every variation run"
    ),
    variations: int | None = typer.Option(
        None, "--variations", "-n", min=0, help="Number of variations to generate"
    ),
    user_mode: bool | None = typer.Option(
        None,
        "--user-mode/--no-user-mode",
        help=f"Evaluate your own {USER_MEMORY_FILE}; the baseline inherits your settings",
    ),
    max_concurrent: int | None = typer.Option(
        None, "--max-concurrent", min=1, help="Cap on simultaneous variation processes"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a YAML settings file"
    ),
    output_root: Path | None = typer.Option(
        None, "--output-root", "-o", help="Directory under which the run directory is created"
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log info-level events"),
    follow_up: bool = typer.Option(
        False, "--follow-up", help="Continue the judge session interactively afterwards"
    ),
) -> None:
    """Evaluate a system prompt against judge-designed variations."""
    progress: ProgressArenaObserver | None = None
    try:
        _configure_structlog(log_format=log_format, verbose=verbose)
        settings = _load_settings(config_path=config_path)

        effective_user_mode = user_mode if user_mode is not None else settings.user_mode
        prompt_argument = prompt
        if prompt_argument is None:
            if not effective_user_mode:
                typer.echo("Please provide a system prompt to evaluate (text or .md file).")
                raise typer.Exit(code=1)
            prompt_argument = USER_MEMORY_FILE
        system_prompt = PromptLoader(reader=LocalFileReader()).load(prompt_argument)

        config = _build_config(
            settings=settings,
            system_prompt=system_prompt,
            task=task,
            model=model,
            test_model=test_model,
            variations=variations,
            user_mode=effective_user_mode,
            max_concurrent=max_concurrent,
            output_root=output_root,
        )
        interactive = log_format != "json"
        if interactive:
            _print_banner(config=config)

        judge_observers: list[JudgeObserver] = [StructlogJudgeObserver()]
        if interactive:
            judge_observers.append(ConsoleJudgeObserver())
        judge = ClaudeAgentSDKJudgeSession(
            workspace=config.output_dir,
            observer=CompositeJudgeObserver(observers=judge_observers),
        )
        variation_runner = ClaudeCliVariationRunner(
            config=config.runner, observer=StructlogVariationObserver()
        )
        arena_observers: list[ArenaObserver] = [StructlogArenaObserver()]
        if interactive:
            progress = ProgressArenaObserver()
            arena_observers.append(progress)

        arena_runner = ArenaRunner(
            config=config,
            judge=judge,
            variation_runner=variation_runner,
            store=FileSystemArtifactStore(),
            observer=CompositeArenaObserver(observers=arena_observers),
        )

        started_at = time.monotonic()
        arena_run: ArenaRun = asyncio.run(arena_runner.run())
        elapsed_seconds = time.monotonic() - started_at

        json_path, md_path = write_run_report(
            run=arena_run,
            judge_model=config.judge.model,
            runner_model=config.runner.model,
            elapsed_seconds=elapsed_seconds,
        )
        _print_summary(
            run=arena_run,
            elapsed_seconds=elapsed_seconds,
            json_path=json_path,
            md_path=md_path,
        )

        if follow_up and arena_run.success:
            run_follow_up(
                binary=config.runner.binary,
                model=config.judge.model,
                session_id=arena_run.judge_session_id,
                message=build_follow_up_message(user_mode=config.user_mode),
            )

    except KeyboardInterrupt:
        typer.echo("Arena run interrupted.")
        sys.exit(1)
    except ArenaError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except typer.Exit:
        raise
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)
    finally:
        if progress is not None:
            progress.stop()

    sys.exit(0 if arena_run.success else 1)


@app.command()
def report(
    path: Path = typer.Argument(
        ..., help="Run directory or its arena-run.json report"
    ),
    show_evaluation: bool = typer.Option(
        False, "--evaluation", "-e", help="Also print the judge's full evaluation"
    ),
) -> None:
    """Re-print the summary of a saved arena run."""
    try:
        saved_run, metadata = load_run_report(path=path)
    except ArenaError as exc:
        typer.echo(str(exc))
        sys.exit(1)

    elapsed = metadata.get("elapsed_seconds")
    _print_summary(
        run=saved_run,
        elapsed_seconds=float(elapsed) if isinstance(elapsed, int | float) else None,
    )
    if show_evaluation:
        typer.echo(saved_run.evaluation_output)


if __name__ == "__main__":
    app()
