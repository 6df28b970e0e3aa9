# ABOUTME: Provides the CLI for inspecting academic histories, report cards, and class summaries.
# ABOUTME: Reads exported score/enrollment tables and renders engine outputs with rich tables.

from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from src.common.config import EngineConfig, load_config
from src.common.data_loading import (
    frame_to_assessment_scores,
    frame_to_enrollments,
    load_assessment_scores,
    load_enrollments,
)
from src.common.rounding import format_average
from src.common.schemas import AcademicYearRecord
from src.common.status import Classification, rich_status
from src.grading.frames import compute_period_frame
from src.grading.scores import compute_period_averages
from src.progression.history import build_history, group_by_year, history_frame
from src.progression.report_card import build_report_card
from src.progression.statistics import approval_summary, classify_cohort, subject_statistics

console = Console()
app = typer.Typer(help="Compute academic averages, classifications, and multi-year histories.")


def _engine_config(config_path: Optional[Path], rounding: Optional[str]) -> EngineConfig:
    try:
        config = load_config(config_path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    if rounding is None:
        return config
    try:
        return config.with_rounding(rounding)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--rounding") from exc


def _raw_score(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.1f}"


def _load_tables(scores_path: Path, enrollments_path: Optional[Path] = None):
    try:
        scores_df = load_assessment_scores(scores_path)
        enrollments_df = load_enrollments(enrollments_path) if enrollments_path is not None else None
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    return scores_df, enrollments_df


def student_history(
    scores_df: pd.DataFrame,
    enrollments_df: pd.DataFrame,
    student_id: str,
    active_year_id: Optional[str],
    config: EngineConfig,
) -> List[AcademicYearRecord]:
    enrollments = frame_to_enrollments(enrollments_df[enrollments_df["student_id"] == student_id])
    scores = frame_to_assessment_scores(scores_df[scores_df["student_id"] == student_id])
    by_year = group_by_year(compute_period_averages(scores))
    return build_history(enrollments, by_year, active_year_id, config)


@app.command()
def history(
    scores: Path = typer.Option(..., "--scores", exists=True, dir_okay=False, help="Assessment scores table (.csv/.parquet)."),
    enrollments: Path = typer.Option(..., "--enrollments", exists=True, dir_okay=False, help="Enrollment table (.csv/.parquet)."),
    student_id: str = typer.Option(..., "--student-id", help="Student identifier."),
    active_year: Optional[str] = typer.Option(None, "--active-year", help="Academic year currently in progress."),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML."),
    rounding: Optional[str] = typer.Option(None, "--rounding", help="none | ceiling | one_decimal (overrides config)."),
) -> None:
    """Show a student's year-by-year academic record."""
    engine_config = _engine_config(config, rounding)
    scores_df, enrollments_df = _load_tables(scores, enrollments)

    typer.echo(f"[history] Building academic record for student='{student_id}'")
    records = student_history(scores_df, enrollments_df, student_id, active_year, engine_config)
    if not records:
        console.print(f"[yellow]No enrollments found for {student_id}[/yellow]")
        raise typer.Exit(code=1)

    console.rule(f"[bold blue]Academic Record: {student_id}[/bold blue]")
    table = Table(show_header=True, header_style="bold magenta")
    for column in ("Year", "Grade", "Class", "Subjects", "Grades", "Average", "Status", "Next"):
        table.add_column(column)
    for record in records:
        table.add_row(
            record.academic_year_id,
            str(record.grade_level),
            record.class_label,
            str(record.subject_count),
            str(record.grade_record_count),
            format_average(record.overall_average, engine_config.rounding),
            rich_status(record.classification),
            "-" if record.progressed_to_grade_level is None else str(record.progressed_to_grade_level),
        )
    console.print(table)


@app.command("report-card")
def report_card(
    scores: Path = typer.Option(..., "--scores", exists=True, dir_okay=False, help="Assessment scores table (.csv/.parquet)."),
    student_id: str = typer.Option(..., "--student-id", help="Student identifier."),
    year_id: str = typer.Option(..., "--year-id", help="Academic year identifier."),
    grade_level: int = typer.Option(..., "--grade-level", min=1, help="Grade level the student is enrolled in."),
    active: bool = typer.Option(False, "--active", help="Mark the academic year as still in progress."),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML."),
    rounding: Optional[str] = typer.Option(None, "--rounding", help="none | ceiling | one_decimal (overrides config)."),
) -> None:
    """Print the per-period report card of one student for one year."""
    engine_config = _engine_config(config, rounding)
    scores_df, _ = _load_tables(scores)
    selected = scores_df[(scores_df["student_id"] == student_id) & (scores_df["academic_year_id"] == year_id)]

    card = build_report_card(
        student_id,
        year_id,
        frame_to_assessment_scores(selected),
        grade_level,
        year_active=active,
        config=engine_config,
    )
    policy = card.rounding

    console.rule(f"[bold blue]Report Card: {student_id} ({year_id})[/bold blue]")
    for period, mean in card.period_means.items():
        table = Table(title=f"Period {period}", show_header=True, header_style="bold magenta")
        for column in ("Subject", "AS1", "AS2", "AS3", "MAS", "AT", "MT"):
            table.add_column(column)
        for row in card.rows:
            if row.period != period:
                continue
            table.add_row(
                row.subject_id,
                _raw_score(row.as1),
                _raw_score(row.as2),
                _raw_score(row.as3),
                format_average(row.sub_period_average, policy),
                _raw_score(row.at),
                format_average(row.period_average, policy),
            )
        table.add_row("Period mean", "", "", "", "", "", format_average(mean, policy), style="bold")
        console.print(table)

    console.print(f"[bold]Annual average:[/] {format_average(card.overall_average, policy)}")
    console.print(f"[bold]Status:[/] {rich_status(card.classification)}")


@app.command("class-summary")
def class_summary(
    scores: Path = typer.Option(..., "--scores", exists=True, dir_okay=False, help="Assessment scores table (.csv/.parquet)."),
    enrollments: Path = typer.Option(..., "--enrollments", exists=True, dir_okay=False, help="Enrollment table (.csv/.parquet)."),
    year_id: str = typer.Option(..., "--year-id", help="Academic year identifier."),
    active_year: Optional[str] = typer.Option(None, "--active-year", help="Academic year currently in progress."),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML."),
) -> None:
    """Count classifications and summarize subject results for one year."""
    engine_config = _engine_config(config, None)
    scores_df, enrollments_df = _load_tables(scores, enrollments)

    period_df = compute_period_frame(scores_df)
    cohort = classify_cohort(period_df, enrollments_df, year_id, active_year, engine_config)
    typer.echo(f"[summary] Classified {len(cohort)} enrolled students for year='{year_id}'")

    counts = approval_summary(cohort["classification"])
    status_table = Table(title="Classifications", show_header=True, header_style="bold magenta")
    status_table.add_column("Status")
    status_table.add_column("Students")
    for classification in Classification:
        status_table.add_row(rich_status(classification), str(counts[classification]))
    console.print(status_table)

    year_periods = period_df[period_df["academic_year_id"] == year_id] if not period_df.empty else period_df
    stats = subject_statistics(year_periods)
    stats_table = Table(title="Subjects", show_header=True, header_style="bold magenta")
    for column in ("Subject", "Evaluated", "Positive", "% Positive", "0-9", "10-13", "14-20", "Mean"):
        stats_table.add_column(column)
    for row in stats.itertuples(index=False):
        stats_table.add_row(
            str(row.subject_id),
            str(row.evaluated),
            str(row.positive),
            f"{row.positive_pct:.1f}",
            str(row.band_0_9),
            str(row.band_10_13),
            str(row.band_14_20),
            "-" if pd.isna(row.mean) else f"{row.mean:.1f}",
        )
    console.print(stats_table)


@app.command()
def export(
    scores: Path = typer.Option(..., "--scores", exists=True, dir_okay=False, help="Assessment scores table (.csv/.parquet)."),
    enrollments: Path = typer.Option(..., "--enrollments", exists=True, dir_okay=False, help="Enrollment table (.csv/.parquet)."),
    output_dir: Path = typer.Option(Path("reports"), "--output-dir", help="Directory to write exports."),
    active_year: Optional[str] = typer.Option(None, "--active-year", help="Academic year currently in progress."),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML."),
    rounding: Optional[str] = typer.Option(None, "--rounding", help="none | ceiling | one_decimal (overrides config)."),
) -> None:
    """Export every enrolled student's academic history as parquet and JSON."""
    engine_config = _engine_config(config, rounding)
    scores_df, enrollments_df = _load_tables(scores, enrollments)

    frames = []
    for student_id in sorted(enrollments_df["student_id"].dropna().unique()):
        records = student_history(scores_df, enrollments_df, student_id, active_year, engine_config)
        frames.append(history_frame(student_id, records, engine_config.rounding))
    combined = pd.concat(frames, ignore_index=True) if frames else history_frame("", [])

    output_dir.mkdir(parents=True, exist_ok=True)
    parquet_path = output_dir / "academic_history.parquet"
    json_path = output_dir / "academic_history.json"
    combined.to_parquet(parquet_path, index=False)
    json_path.write_text(combined.to_json(orient="records", indent=2), encoding="utf-8")
    typer.echo(f"[export] Wrote {len(combined)} academic-year rows to {parquet_path} and {json_path}")


def main():
    app()


if __name__ == "__main__":
    main()
