"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of lifts, records, volume and
recommendations.
"""

from rich.console import Console
from rich.table import Table

from ..core.config import WEIGHT_UNIT
from ..core.config_loader import ReferenceTables
from ..core.models import (
    DeloadStatus,
    LiftEntry,
    LiftPlateau,
    MuscleGroupVolume,
    PersonalRecord,
    ProgressionSuggestion,
    RecoveryPriority,
    VolumeAlert,
    WeeklyTrainingStats,
)

console = Console()

_ALERT_STYLE = {"high": "red", "warning": "yellow", "low": "blue"}


def _fmt_weight(weight: float) -> str:
    return f"{weight:g}"


def _fmt_sets(entry: LiftEntry) -> str:
    """Compact sets column, e.g. '185×5, 185×5, 175×8'; bodyweight sets as 'BW×12'."""
    parts = []
    for s in entry.sets:
        w = "BW" if s.weight == 0 else _fmt_weight(s.weight)
        parts.append(f"{w}×{s.reps}")
    return ", ".join(parts) if parts else "-"


def _volume_zone(sets: int, mev: int, mav: int, mrv: int) -> str:
    if sets == 0:
        return "[dim]-[/dim]"
    if sets >= mrv:
        return "[red]at MRV[/red]"
    if sets > mav:
        return "[yellow]above MAV[/yellow]"
    if sets >= mev:
        return "[green]productive[/green]"
    return "[blue]under MEV[/blue]"


def format_history_table(exercise_name: str, entries: list[LiftEntry]) -> Table:
    """
    Create a Rich table displaying an exercise's logged sessions.

    Args:
        exercise_name: Exercise shown in the title
        entries: Entries to display, oldest first

    Returns:
        Rich Table object
    """
    table = Table(title=f"{exercise_name} History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Sets")
    table.add_column("Best", style="magenta")
    table.add_column("e1RM", justify="right", style="bold")
    table.add_column(f"Volume({WEIGHT_UNIT})", justify="right")

    for i, entry in enumerate(entries, 1):
        best = entry.best_set
        table.add_row(
            str(i),
            entry.date_key,
            _fmt_sets(entry),
            f"{_fmt_weight(best.weight)}×{best.reps}" if best else "-",
            _fmt_weight(entry.estimated_1rm) if entry.sets else "-",
            _fmt_weight(entry.volume),
        )

    return table


def print_history(exercise_name: str, entries: list[LiftEntry]) -> None:
    """Print an exercise's history, or a notice when there is none."""
    if not entries:
        console.print(f"[yellow]No sessions recorded for {exercise_name} yet.[/yellow]")
        return
    console.print(format_history_table(exercise_name, entries))


def print_prs(prs: dict[str, PersonalRecord]) -> None:
    """Print personal records, highest estimate first."""
    if not prs:
        console.print("[yellow]No personal records yet.[/yellow]")
        return

    table = Table(title="Personal Records")
    table.add_column("Exercise", style="cyan")
    table.add_column("Set", style="magenta")
    table.add_column("e1RM", justify="right", style="bold")
    table.add_column("Date")

    for name, pr in sorted(prs.items(), key=lambda kv: kv[1].estimated_1rm, reverse=True):
        table.add_row(
            name,
            f"{_fmt_weight(pr.weight)} {WEIGHT_UNIT} × {pr.reps}",
            _fmt_weight(pr.estimated_1rm),
            pr.date_key,
        )

    console.print(table)


def print_volume(
    volumes: dict[str, MuscleGroupVolume],
    tables: ReferenceTables,
    window_days: int,
) -> None:
    """
    Print weekly sets per muscle group against its landmarks.

    Args:
        volumes: {muscle_group: MuscleGroupVolume}
        tables: Reference tables (for landmarks)
        window_days: Window length shown in the title
    """
    table = Table(title=f"Volume (last {window_days} days)")
    table.add_column("Muscle", style="cyan")
    table.add_column("Sets", justify="right", style="bold")
    table.add_column("MEV", justify="right", style="dim")
    table.add_column("MAV", justify="right", style="dim")
    table.add_column("MRV", justify="right", style="dim")
    table.add_column(f"Load({WEIGHT_UNIT})", justify="right")
    table.add_column("Zone")

    for group, vol in volumes.items():
        lm = tables.landmarks_for(group)
        table.add_row(
            group,
            str(vol.sets),
            str(lm.mev),
            str(lm.mav),
            str(lm.mrv),
            _fmt_weight(vol.volume),
            _volume_zone(vol.sets, lm.mev, lm.mav, lm.mrv),
        )

    console.print(table)


def print_alerts(alerts: list[VolumeAlert]) -> None:
    for alert in alerts:
        style = _ALERT_STYLE.get(alert.level, "white")
        console.print(f"[{style}]{alert.message}[/{style}]")


def print_stats(stats: WeeklyTrainingStats, window_days: int) -> None:
    console.print(f"[bold]Last {window_days} days[/bold]")
    console.print(f"- Sessions: {stats.sessions}")
    console.print(f"- Total sets: {stats.total_sets}")
    console.print(f"- Total volume: {_fmt_weight(stats.total_volume)} {WEIGHT_UNIT}")
    console.print(f"- Avg sets/session: {stats.avg_sets_per_session}")


def print_suggestion(exercise_name: str, suggestion: ProgressionSuggestion | None) -> None:
    """Print the next-session target for an exercise."""
    if suggestion is None:
        console.print(f"[yellow]No history for {exercise_name}; start light and log it.[/yellow]")
        return
    console.print(
        f"[bold cyan]{exercise_name}[/bold cyan]: "
        f"[bold]{_fmt_weight(suggestion.weight)} {WEIGHT_UNIT} × {suggestion.reps_label}[/bold]"
    )
    console.print(f"  {suggestion.message}")


def print_deload(status: DeloadStatus) -> None:
    if status.recommended:
        console.print(f"[yellow]Deload recommended[/yellow] ({status.weeks_since_deload} weeks)")
        if status.reason:
            console.print(f"  {status.reason}")
    else:
        console.print(
            f"[green]No deload needed[/green] ({status.weeks_since_deload} weeks since last)"
        )


def print_recovery(priorities: list[RecoveryPriority], limit: int | None = None) -> None:
    """Print body areas ranked by fatigue."""
    table = Table(title="Recovery Priorities")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Area", style="cyan")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Reason")

    shown = priorities if limit is None else priorities[:limit]
    for i, p in enumerate(shown, 1):
        table.add_row(str(i), p.area, f"{p.score:.2f}", p.reason)

    console.print(table)


def print_plateaus(plateaus: list[LiftPlateau]) -> None:
    for p in plateaus:
        console.print(
            f"[yellow]{p.exercise_name}[/yellow]: no PR in {p.days_since_pr} days "
            f"(best {_fmt_weight(p.last_pr.weight)}×{p.last_pr.reps}, "
            f"e1RM {_fmt_weight(p.last_pr.estimated_1rm)})"
        )


def format_status_display(
    stats: WeeklyTrainingStats,
    deload: DeloadStatus,
    alerts: list[VolumeAlert],
    plateaus: list[LiftPlateau],
) -> str:
    """
    Format overall training status as a text block.

    Returns:
        Formatted string
    """
    lines = [
        "Current status",
        f"- Sessions this week: {stats.sessions}",
        f"- Sets this week: {stats.total_sets}",
        f"- Weeks since deload: {deload.weeks_since_deload}",
        f"- Deload recommended: {'yes' if deload.recommended else 'no'}",
        f"- Volume alerts: {len(alerts)}",
        f"- Plateaued lifts: {len(plateaus)}",
    ]
    return "\n".join(lines)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
