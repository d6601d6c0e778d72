"""CLI commands for GrowthPath.

Commands:
- serve: Run the Web API with uvicorn
- overview: Overview stats and cards for the bundled sample roster
- roster: Filtered instructor roster from the backend
- export: Write the filtered roster as CSV
- insights: Generate AI insights for one student
"""

from datetime import date
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from growthpath.config import ConfigError, load_app_config
from growthpath.core.export import export_filename, roster_to_csv
from growthpath.core.insights import InsightGenerationError, generate_insights
from growthpath.core.roster import RosterEntry, RosterFilter, build_roster, progress_bucket
from growthpath.core.sample_data import search_sample_students
from growthpath.core.stats import (
    average_topic_score,
    compute_instructor_stats,
    compute_overview_stats,
)
from growthpath.db.attendance_repository import list_attendance
from growthpath.db.backend import BackendError
from growthpath.db.learning_repository import list_learning_records
from growthpath.db.students_repository import get_student_by_id

app = typer.Typer(
    name="growthpath",
    help="Learning-progress dashboard: roster, stats, CSV export and AI insights.",
    no_args_is_help=True,
)

console = Console()

PROGRESS_COLORS = {"low": "red", "medium": "yellow", "high": "green"}


def _load_roster_or_exit(
    search: str,
    status: str,
    progress: str,
) -> tuple[list[RosterEntry], list[RosterEntry]]:
    """Fetch the roster and apply filters, or exit with a readable error."""
    if status not in ("all", "active", "inactive"):
        console.print(f"[red]✗ Invalid status filter: {status}[/red]")
        raise typer.Exit(code=1)
    if progress not in ("all", "low", "medium", "high"):
        console.print(f"[red]✗ Invalid progress filter: {progress}[/red]")
        raise typer.Exit(code=1)

    try:
        entries = build_roster()
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        console.print("  Set SUPABASE_URL and SUPABASE_ANON_KEY")
        raise typer.Exit(code=1)
    except BackendError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    visible = RosterFilter(search=search, status=status, progress=progress).apply(entries)
    return entries, visible


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Web API."""
    import uvicorn

    server = load_app_config().server
    uvicorn.run(
        "growthpath.web.api:app",
        host=host or server.host,
        port=port or server.port,
        reload=reload,
    )


@app.command()
def overview(
    search: str = typer.Option("", "--search", "-s", help="Filter by name"),
) -> None:
    """Show overview stats and student cards for the sample roster."""
    students = search_sample_students(search)
    stats = compute_overview_stats(students)

    console.print(
        f"[bold]{stats.total_students}[/bold] students | "
        f"avg progress [bold]{stats.average_progress}%[/bold] | "
        f"active today [bold]{stats.active_today}[/bold] | "
        f"avg streak [bold]{stats.average_streak}[/bold] days | "
        f"topics {stats.completed_topics}/{stats.total_topics} "
        f"([bold]{stats.completion_rate}%[/bold])"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Progress", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Avg Score", justify="right")
    table.add_column("Last Activity")

    for s in students:
        table.add_row(
            s.name,
            f"{s.overall_progress}%",
            str(s.streak_days),
            str(average_topic_score(s.topics)),
            s.last_activity,
        )

    console.print(table)


@app.command()
def roster(
    search: str = typer.Option("", "--search", "-s", help="Name, email or student number"),
    status: str = typer.Option("all", "--status", help="all, active, inactive"),
    progress: str = typer.Option("all", "--progress", help="all, low, medium, high"),
) -> None:
    """Show the instructor roster from the backend."""
    entries, visible = _load_roster_or_exit(search, status, progress)
    stats = compute_instructor_stats([e.student for e in entries])

    console.print(
        f"[bold]{stats.total_students}[/bold] students | "
        f"avg progress [bold]{stats.average_progress}%[/bold] | "
        f"active this week [bold]{stats.active_this_week}[/bold] | "
        f"top performers [bold]{stats.top_performers}[/bold]"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Number", style="cyan")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Records", justify="right")
    table.add_column("Attendance", justify="right")
    table.add_column("Last Activity")

    for e in visible:
        s = e.student
        color = PROGRESS_COLORS[progress_bucket(s.overall_progress)]
        table.add_row(
            s.student_number,
            s.full_name,
            s.email,
            s.status,
            f"[{color}]{s.overall_progress}%[/{color}]",
            str(e.learning_records_count),
            f"{e.attendance_rate}%",
            s.last_activity,
        )

    console.print(table)
    console.print(f"\n[dim]Showing {len(visible)} of {len(entries)} students[/dim]")


@app.command()
def export(
    search: str = typer.Option("", "--search", "-s", help="Name, email or student number"),
    status: str = typer.Option("all", "--status", help="all, active, inactive"),
    progress: str = typer.Option("all", "--progress", help="all, low, medium, high"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", help="Target directory"),
) -> None:
    """Write the filtered roster to students-report-YYYY-MM-DD.csv."""
    _, visible = _load_roster_or_exit(search, status, progress)

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export_filename(date.today())
    path.write_text(roster_to_csv(visible), encoding="utf-8")

    console.print(f"[green]✓ Exported {len(visible)} students[/green]")
    console.print(f"  [dim]File:[/dim] {path}")


@app.command()
def insights(
    student_id: str = typer.Argument(..., help="Student row ID"),
) -> None:
    """Generate and store AI insights for one student."""
    try:
        student = get_student_by_id(student_id)
        if student is None:
            console.print(f"[red]✗ Student '{student_id}' not found[/red]")
            raise typer.Exit(code=1)
        learning = list_learning_records(student.id)
        attendance = list_attendance(student.id)
        with console.status("Generating insights..."):
            result = generate_insights(
                student.id,
                [r.to_dict() for r in learning],
                [a.to_dict() for a in attendance],
            )
    except (ConfigError, BackendError, InsightGenerationError) as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(
        f"[green]✓ Generated {result.count} insights[/green] "
        f"({', '.join(result.insight_types)})"
    )
    for row in result.rows:
        console.print(f"\n[bold]{row['insight_type'].title()}[/bold]")
        console.print(row["content"])


if __name__ == "__main__":
    app()
