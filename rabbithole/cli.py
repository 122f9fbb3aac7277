"""Click-based CLI for the scoring pipeline."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError

from rabbithole.enforcement.config import EnforcementConfig
from rabbithole.enforcement.engine import EnforcementEngine, build_response
from rabbithole.errors import InvalidInput
from rabbithole.models import Session
from rabbithole.patterns.breakthrough import BREAKTHROUGH_THRESHOLDS, analyze_breakthrough_potential
from rabbithole.patterns.detector import GlobalPatternDetector
from rabbithole.scoring.quality_judge import HeuristicQualityJudge
from rabbithole.settings import get_settings
from rabbithole.trajectory.analyzer import analyze_trajectory
from rabbithole.trajectory.coherence_tracking import track_coherence

logger = logging.getLogger(__name__)


def read_text_input(text: Optional[str], file: Optional[Path]) -> str:
    """Return the text argument or the contents of ``file``.

    Raises:
        click.UsageError: If neither or both are given.
    """
    if (text is None) == (file is None):
        raise click.UsageError("Provide exactly one of TEXT or --file")
    if file is not None:
        return file.read_text()
    return text


def emit(data: Any, output: Optional[Path]) -> None:
    """Write ``data`` as JSON to ``output`` or stdout."""
    payload = json.dumps(data, indent=2, default=str)
    if output is not None:
        logger.info(f"Writing result to {output}")
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload)
        click.echo(f"Result written to {output}")
    else:
        click.echo(payload)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
def cli(verbose: bool) -> None:
    """Rabbit-hole session scoring CLI.

    Gate candidate steps, judge responses and analyse recorded sessions.
    """
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug("CLI initialized")


@cli.command()
@click.argument("text", required=False)
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the candidate text from a file",
)
@click.option(
    "--no-auto-kill",
    is_flag=True,
    help="Run every phase even when the ethics or speculation gate trips",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file for the JSON verdict (default: stdout)",
)
def enforce(text: Optional[str], file: Optional[Path], no_auto_kill: bool, output: Optional[Path]) -> None:
    """Run the enforcement gate over one candidate step.

    Exits with status 1 when the candidate is not accepted.

    Examples:

        rabbithole enforce "Studies (Smith 2020) show a 12% increase."

        rabbithole enforce --file candidate.txt -o verdict.json
    """
    candidate = read_text_input(text, file)
    config = EnforcementConfig.from_settings()
    if no_auto_kill:
        config.auto_kill_enabled = False

    try:
        verdict = EnforcementEngine(config).evaluate(candidate)
    except InvalidInput as e:
        raise click.ClickException(f"Enforcement failed: {e}")

    emit(build_response(verdict), output)
    if not verdict.accept:
        raise SystemExit(1)


@cli.command()
@click.argument("text", required=False)
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the response text from a file",
)
@click.option("--question", "-q", default="", help="Question the response answers")
@click.option(
    "--sensitivity",
    type=click.Choice(sorted(BREAKTHROUGH_THRESHOLDS)),
    default="balanced",
    help="Breakthrough detection sensitivity",
)
def judge(text: Optional[str], file: Optional[Path], question: str, sensitivity: str) -> None:
    """Score a response with the heuristic quality judge.

    Examples:

        rabbithole judge "What if memory is a river?" -q "What is memory?"
    """
    response = read_text_input(text, file)
    judgment = HeuristicQualityJudge().judge(response, question)
    breakthrough = analyze_breakthrough_potential(response, sensitivity)

    emit(
        {
            "judgment": asdict(judgment),
            "judgeScores": judgment.to_judge_scores().model_dump(exclude_none=True),
            "breakthrough": {**asdict(breakthrough), "is_breakthrough": breakthrough.is_breakthrough},
        },
        None,
    )


@cli.command()
@click.argument(
    "session_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file for the JSON report (default: stdout)",
)
def analyze(session_file: Path, output: Optional[Path]) -> None:
    """Analyse a recorded session.

    SESSION_FILE is a JSON session with a ``steps`` list; each step needs
    ``sequence_number`` and ``text`` and may carry ``judge_scores``,
    ``embedding`` and ``coordinates``.

    Examples:

        rabbithole analyze session.json -o report.json
    """
    logger.info(f"Analyzing session file: {session_file}")
    try:
        session = Session.model_validate_json(session_file.read_text())
    except ValidationError as e:
        logger.error(f"Invalid session file: {e.error_count()} errors")
        raise click.ClickException(f"Invalid session file: {e}")

    steps = session.steps
    report = {
        "session_id": session.id,
        "step_count": len(steps),
        "trajectory": analyze_trajectory(steps).to_dict(),
        "coherence": asdict(track_coherence(steps)),
        "patterns": GlobalPatternDetector().analyze(steps).to_dict(),
    }
    emit(report, output)
    logger.info("Analysis completed successfully")


if __name__ == "__main__":
    cli()
