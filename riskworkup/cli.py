"""
cli.py
------
Command-line interface for the riskworkup SDK.

Entry point: ``riskworkup``

Commands
--------
* ``validate``    — statically validate a scoring configuration.
* ``score``       — compute a risk bundle for one set of answers.
* ``score-batch`` — score every row of an answers CSV.
* ``workup``      — run the data sufficiency check on an evidence pack.

All commands accept ``--output pretty|json`` and exit with status 1 when the
configuration is invalid, scoring fails, or evidence is insufficient.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Mapping, Optional

import click

from riskworkup import __version__
from riskworkup.core.config_hashing import compute_config_hash
from riskworkup.core.errors import ScoringError
from riskworkup.core.result_schema import DataSufficiencyResult, RiskBundleResult, RiskLevel
from riskworkup.scoring.batch import AnswersCSVConnector, score_frame
from riskworkup.scoring.calculator import RiskBundleInput, compute_risk_bundle
from riskworkup.scoring.loader import answers_from_dict, load_config, load_document
from riskworkup.scoring.rules import RiskCalculationConfig, validate_risk_calculation_config
from riskworkup.workup import EvidencePack, perform_workup_check


# ---------------------------------------------------------------------------
# Helpers: rendering
# ---------------------------------------------------------------------------

_LEVEL_COLOURS = {
    RiskLevel.LOW.value: "green",
    RiskLevel.MODERATE.value: "cyan",
    RiskLevel.HIGH.value: "yellow",
    RiskLevel.CRITICAL.value: "red",
}


def _level_style(level: str) -> str:
    return click.style(level, fg=_LEVEL_COLOURS.get(level, "white"), bold=True)


def _score_bar(score: float, width: int = 30) -> str:
    """Render a simple ASCII progress bar for a 0–100 score."""
    clamped = max(0.0, min(100.0, float(score)))
    filled = int(round((clamped / 100) * width))
    bar = "█" * filled + "░" * (width - filled)
    return f"[{bar}] {float(score):.1f}/100"


def _divider() -> str:
    return click.style("─" * 60, fg="bright_black")


def _header(title: str) -> None:
    divider = _divider()
    click.echo(f"\n{divider}")
    click.echo(click.style(f"  {title}", bold=True, fg="bright_white"))
    click.echo(divider)


def _load_config_or_exit(config_path: str) -> RiskCalculationConfig:
    try:
        return load_config(config_path)
    except (ScoringError, FileNotFoundError) as exc:
        click.echo(click.style(f"\n✗  Config error: {exc}", fg="red"), err=True)
        sys.exit(1)


def _output_option(fn):
    return click.option(
        "--output", "output_format",
        type=click.Choice(["pretty", "json"], case_sensitive=False),
        default="pretty", show_default=True,
        help="Output format: pretty (default) or json.",
    )(fn)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__, prog_name="riskworkup", message="%(prog)s %(version)s")
def cli():
    """riskworkup — deterministic risk scoring and workup toolkit."""


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@_output_option
def validate(config_path: str, output_format: str):
    """
    Validate a scoring configuration without evaluating anything.

    \b
    CONFIG_PATH  YAML or JSON scoring configuration.
    """
    config = _load_config_or_exit(config_path)
    outcome = validate_risk_calculation_config(config)
    config_hash = compute_config_hash(config)

    if output_format == "json":
        click.echo(json.dumps({
            "version": config.version,
            "valid": outcome.valid,
            "errors": list(outcome.errors),
            "config_hash": config_hash,
        }, indent=2))
    else:
        _header("SCORING CONFIG VALIDATION")
        click.echo(f"  Version     : {config.version}")
        click.echo(f"  Factor rules: {len(config.factor_rules)}")
        click.echo(f"  Config hash : {config_hash[:32]}…")
        if outcome.valid:
            click.echo(click.style("\n  ✓  Configuration is valid.", fg="green"))
        else:
            click.echo(click.style(f"\n  ✗  {len(outcome.errors)} issue(s):", fg="red", bold=True))
            for error in outcome.errors:
                click.echo(f"      - {error}")
        click.echo(f"\n{_divider()}\n")

    if not outcome.valid:
        sys.exit(1)


# ---------------------------------------------------------------------------
# score
# ---------------------------------------------------------------------------

def _bundle_input_from_document(
    doc: Any,
    assessment_id: Optional[str],
    algorithm_version: Optional[str],
    default_version: str,
) -> RiskBundleInput:
    """
    Accept either a bare answers mapping or a full input document with
    ``assessmentId`` / ``answers`` / ``algorithmVersion`` keys.
    """
    if isinstance(doc, Mapping) and isinstance(doc.get("answers"), Mapping):
        answers = answers_from_dict(doc["answers"])
        assessment_id = assessment_id or doc.get("assessmentId") or doc.get("assessment_id")
        algorithm_version = (
            algorithm_version or doc.get("algorithmVersion") or doc.get("algorithm_version")
        )
    else:
        answers = answers_from_dict(doc)
    return RiskBundleInput(
        assessment_id=str(assessment_id or "cli"),
        answers=answers,
        algorithm_version=str(algorithm_version or default_version),
    )


@cli.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("answers_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--assessment-id", type=str, default=None, help="Assessment identifier to stamp on the bundle.")
@click.option(
    "--algorithm-version", type=str, default=None,
    help="Algorithm version to stamp on the bundle (defaults to the config version).",
)
@_output_option
def score(
    config_path: str,
    answers_path: str,
    assessment_id: Optional[str],
    algorithm_version: Optional[str],
    output_format: str,
):
    """
    Compute a risk bundle for a single set of answers.

    \b
    CONFIG_PATH   YAML or JSON scoring configuration.
    ANSWERS_PATH  YAML or JSON answers (bare mapping or full input document).
    """
    config = _load_config_or_exit(config_path)
    try:
        bundle_input = _bundle_input_from_document(
            load_document(answers_path), assessment_id, algorithm_version, config.version
        )
    except ScoringError as exc:
        click.echo(click.style(f"\n✗  Answers error: {exc}", fg="red"), err=True)
        sys.exit(1)

    result: RiskBundleResult = compute_risk_bundle(bundle_input, config)

    if output_format == "json":
        click.echo(result.to_json())
    else:
        _print_bundle(result)

    if not result.success:
        sys.exit(1)


def _print_bundle(result: RiskBundleResult) -> None:
    _header("RISK BUNDLE")
    if not result.success:
        error = result.error
        click.echo(click.style(f"  ✗  {error.code}: {error.message}", fg="red", bold=True))
        for reason in error.details.get("errors", []):
            click.echo(f"      - {reason}")
        click.echo(f"\n{_divider()}\n")
        return

    bundle = result.data
    risk = bundle.risk_score
    click.echo(f"  Assessment : {bundle.assessment_id}")
    click.echo(f"  Algorithm  : {bundle.algorithm_version}")
    click.echo(f"\n  {_score_bar(risk.overall)}  {_level_style(risk.risk_level.value)}")

    _header("FACTORS")
    for factor in risk.factors:
        click.echo(
            f"  {factor.key:<20} {float(factor.score):>8.2f}  {_level_style(factor.risk_level.value)}"
        )
    click.echo(f"\n{_divider()}\n")


# ---------------------------------------------------------------------------
# score-batch
# ---------------------------------------------------------------------------

@cli.command("score-batch")
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--id-column", default="assessment_id", show_default=True, help="Assessment id column.")
@click.option("--delimiter", default=",", show_default=True, help="CSV column delimiter.")
@click.option(
    "--algorithm-version", type=str, default=None,
    help="Version stamped on every bundle (defaults to an algorithm_version column, then the config version).",
)
@_output_option
def score_batch(
    config_path: str,
    csv_path: str,
    id_column: str,
    delimiter: str,
    algorithm_version: Optional[str],
    output_format: str,
):
    """
    Score every assessment row in an answers CSV.

    \b
    CONFIG_PATH  YAML or JSON scoring configuration.
    CSV_PATH     One row per assessment; one numeric column per question.
    """
    config = _load_config_or_exit(config_path)
    connector = AnswersCSVConnector(csv_path, delimiter=delimiter, id_column=id_column)
    try:
        connector.connect()
        df = connector.fetch()
    except (OSError, ValueError) as exc:
        click.echo(click.style(f"\n✗  Could not load file: {exc}", fg="red"), err=True)
        sys.exit(1)

    frame = score_frame(df, config, algorithm_version=algorithm_version, id_column=id_column)
    failed = int((~frame["success"]).sum()) if len(frame) else 0

    if output_format == "json":
        click.echo(frame.to_json(orient="records", indent=2))
    else:
        _header(f"BATCH SCORING ({len(frame)} assessments)")
        for record in frame.to_dict(orient="records"):
            if record["success"]:
                click.echo(
                    f"  {record['assessment_id']:<24} {float(record['overall']):>8.2f}  "
                    f"{_level_style(record['risk_level'])}"
                )
            else:
                click.echo(
                    f"  {record['assessment_id']:<24} "
                    + click.style(f"✗ {record['error_code']}: {record['error']}", fg="red")
                )
        click.echo(f"\n  Scored: {len(frame) - failed}   Failed: {failed}")
        click.echo(f"\n{_divider()}\n")

    if failed:
        sys.exit(1)


# ---------------------------------------------------------------------------
# workup
# ---------------------------------------------------------------------------

def _evidence_flag(doc: Mapping, camel: str, snake: str) -> bool:
    value = doc.get(camel, doc.get(snake, False))
    if value is None:
        return False
    if not isinstance(value, bool):
        raise click.UsageError(f"Evidence '{camel}' must be true or false, got {value!r}.")
    return value


def _evidence_from_document(doc: Any) -> EvidencePack:
    if not isinstance(doc, Mapping):
        raise click.UsageError("Evidence file must contain a mapping.")
    assessment_id = doc.get("assessmentId", doc.get("assessment_id"))
    funnel_slug = doc.get("funnelSlug", doc.get("funnel_slug"))
    if not assessment_id or not funnel_slug:
        raise click.UsageError("Evidence file requires 'assessmentId' and 'funnelSlug'.")
    answers = doc.get("answers") or {}
    if not isinstance(answers, Mapping):
        raise click.UsageError("Evidence 'answers' must be a mapping.")
    return EvidencePack(
        assessment_id=str(assessment_id),
        funnel_slug=str(funnel_slug),
        answers=dict(answers),
        has_uploaded_documents=_evidence_flag(doc, "hasUploadedDocuments", "has_uploaded_documents"),
        has_wearable_data=_evidence_flag(doc, "hasWearableData", "has_wearable_data"),
    )


@cli.command()
@click.argument("evidence_path", type=click.Path(exists=True, dir_okay=False))
@_output_option
def workup(evidence_path: str, output_format: str):
    """
    Check whether an evidence pack holds enough data for review.

    \b
    EVIDENCE_PATH  YAML or JSON evidence pack.
    """
    try:
        doc = load_document(evidence_path)
    except ScoringError as exc:
        click.echo(click.style(f"\n✗  Evidence error: {exc}", fg="red"), err=True)
        sys.exit(1)

    evidence_pack = _evidence_from_document(doc)
    try:
        result = perform_workup_check(evidence_pack)
    except (TypeError, ValueError) as exc:
        # answer values with no canonical form, e.g. YAML dates or .nan
        click.echo(click.style(f"\n✗  Evidence error: {exc}", fg="red"), err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(result.to_json())
    else:
        _print_workup(result)

    if not result.is_sufficient:
        sys.exit(1)


def _print_workup(result: DataSufficiencyResult) -> None:
    _header("WORKUP CHECK")
    status = "ready_for_review" if result.is_sufficient else "needs_more_data"
    colour = "green" if result.is_sufficient else "yellow"
    click.echo(f"  Status  : {click.style(status, fg=colour, bold=True)}")
    click.echo(f"  Ruleset : {result.ruleset_version or 'none'}")
    click.echo(f"  Evidence: {result.evidence_pack_hash[:32]}…")

    if result.follow_up_questions:
        _header("FOLLOW-UP QUESTIONS")
        for question in result.follow_up_questions:
            click.echo(
                click.style(f"  [{question.priority:>2}] {question.field_key}", fg="yellow", bold=True)
                + f"  {question.question_text}"
            )
    click.echo(f"\n{_divider()}\n")
