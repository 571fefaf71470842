"""
Rich-based rendering for schedules, standings and team history.

All functions are read-only views over models; the caller owns whatever
view state (selected round, sort column) decides what to show.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from leaguedesk.models import Project, Round, StandingsRow
from leaguedesk.projects import HistoryEntry, played_count
from leaguedesk.tournaments import classify, compute_standings

console = Console(legacy_windows=False)

_OUTCOME_STYLE = {
    "win": ("W", "green"),
    "draw": ("D", "yellow"),
    "loss": ("L", "red"),
    "pending": ("-", "dim"),
}


def signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


def format_score(score: int | None) -> str:
    return "-" if score is None else str(score)


# --------------------------------------------------------------------------- #
# Display functions                                                            #
# --------------------------------------------------------------------------- #

def show_project_list(projects: list[Project], current_id: str | None = None) -> None:
    table = Table(
        title="Championships",
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Name", min_width=20)
    table.add_column("Teams", justify="right", width=6)
    table.add_column("Rounds", justify="right", width=7)
    table.add_column("Status", style="dim")

    for i, project in enumerate(projects, 1):
        marker = "[bold green]▶[/] " if project.id == current_id else ""
        status = "configured" if project.is_configured else "setup pending"
        table.add_row(
            str(i),
            f"{marker}{project.name}",
            str(len(project.teams)),
            str(len(project.rounds)),
            status,
        )

    console.print()
    console.print(table)


def show_project_header(project: Project) -> None:
    played, total = played_count(project.rounds)
    mode = "home & away" if project.settings.double_round else "single round"
    console.print()
    console.print(
        Panel(
            f"[bold]{project.name}[/]\n\n"
            f"[dim]{len(project.teams)} teams  •  {len(project.rounds)} rounds ({mode})  •  "
            f"{played}/{total} matches played  •  "
            f"relegation: {project.settings.relegation_count}[/]",
            title="[bold green] leaguedesk [/]",
            border_style="green",
            expand=False,
        )
    )


def show_round(project: Project, rnd: Round) -> None:
    console.print()
    console.rule(
        f"[bold]Round {rnd.number} of {len(project.rounds)}[/]",
        style="bright_blue",
    )

    table = Table(show_header=True, header_style="bold", border_style="dim", show_lines=False)
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Home", min_width=20, justify="right")
    table.add_column("", width=7, justify="center")
    table.add_column("Away", min_width=20)

    for i, match in enumerate(rnd.matches, 1):
        if match.is_played:
            score = f"[bold]{match.home_score} x {match.away_score}[/]"
        else:
            score = "[dim]- x -[/]"
        table.add_row(
            str(i),
            project.team_name(match.home_team_id),
            score,
            project.team_name(match.away_team_id),
        )

    console.print(table)


def show_standings(
    project: Project,
    rows: list[StandingsRow],
    *,
    sort_label: str | None = None,
) -> None:
    """
    Render the table.  Zones are always taken from the default ranking, so a
    re-sorted view still marks the real leader and relegated teams.
    """
    ranked = compute_standings(project.teams, project.rounds)
    zones = dict(zip((r.team_id for r in ranked), classify(ranked, project.settings.relegation_count)))

    title = "Standings"
    if sort_label:
        title += f"  [dim](sorted by {sort_label})[/]"
    table = Table(title=title, show_header=True, header_style="bold", border_style="dim", show_lines=False)
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Team", min_width=20)
    table.add_column("Pts", justify="right", width=4)
    table.add_column("P", justify="center", width=3)
    table.add_column("W", justify="center", width=3)
    table.add_column("D", justify="center", width=3)
    table.add_column("L", justify="center", width=3)
    table.add_column("GF", justify="center", width=4)
    table.add_column("GA", justify="center", width=4)
    table.add_column("GD", justify="right", width=4)
    table.add_column("%", justify="right", width=6)

    for i, row in enumerate(rows, 1):
        zone = zones.get(row.team_id)
        style = "bold yellow" if zone == "leader" else "red" if zone == "relegation" else ""
        table.add_row(
            str(i),
            row.team_name,
            str(row.points),
            str(row.played),
            str(row.won),
            str(row.drawn),
            str(row.lost),
            str(row.goals_for),
            str(row.goals_against),
            signed(row.goal_difference),
            f"{row.efficiency:.1f}",
            style=style,
        )

    console.print()
    console.print(table)
    legend = "[bold yellow]■[/] leader"
    if project.settings.relegation_count > 0:
        legend += "   [red]■[/] relegation zone"
    console.print(f"  {legend}")


def show_team_history(team_name: str, entries: list[HistoryEntry]) -> None:
    table = Table(
        title=f"{team_name} — match history",
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("Rd", style="dim", width=3, justify="right")
    table.add_column("", width=4)
    table.add_column("Opponent", min_width=20)
    table.add_column("Score", justify="center", width=7)
    table.add_column("", width=2, justify="center")

    for entry in entries:
        label, style = _OUTCOME_STYLE[entry.outcome]
        table.add_row(
            str(entry.round_number),
            "home" if entry.is_home else "away",
            entry.opponent_name,
            f"{format_score(entry.team_score)} x {format_score(entry.opponent_score)}",
            f"[{style}]{label}[/]",
        )

    console.print()
    console.print(table)
