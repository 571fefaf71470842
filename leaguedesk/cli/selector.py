"""
Interactive prompts for the league CLI.

Project selection, championship setup (team list, rules) and result entry.
Validation errors are printed and the user is asked again; nothing here
writes to the store.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from leaguedesk.config import LeagueDefaults
from leaguedesk.models import Match, Project, ProjectSettings, Round, Team
from leaguedesk.projects import ConfigurationError, parse_team_list, validate_settings
from leaguedesk.tournaments import SORT_KEYS, rounds_per_turn

console = Console(legacy_windows=False)


def select_project(projects: list[Project]) -> Project | None:
    """Pick a project by its list number.  Enter with no input cancels."""
    if not projects:
        console.print("  [yellow]No championships yet.[/]")
        return None
    choices = [str(i) for i in range(1, len(projects) + 1)]
    raw = Prompt.ask("  Championship number (Enter to cancel)", default="", show_default=False)
    if raw.strip() == "":
        return None
    if raw not in choices:
        console.print(f"  [red]Invalid choice. Enter a number between 1 and {len(projects)}.[/]")
        return None
    return projects[int(raw) - 1]


def prompt_project_name() -> str:
    while True:
        name = Prompt.ask("  Championship name").strip()
        if name:
            return name
        console.print("  [red]Name must not be empty.[/]")


def prompt_settings(defaults: LeagueDefaults) -> ProjectSettings:
    """
    Collect the team list and rules.  Teams are pasted one per line and the
    list is closed with an empty line (minimum 2).
    """
    console.print(
        "\n[bold]Teams[/]\n"
        "  Type or paste team names, one per line.\n"
        "  Press [bold]Enter[/] on an empty line when you're done (minimum 2).\n"
    )

    teams: list[Team] = []
    while True:
        prompt = f"  Team #{len(teams) + 1}"
        if len(teams) >= 2:
            prompt += " (or Enter to finish)"
        raw = Prompt.ask(prompt, default="", show_default=False)
        if raw.strip() == "":
            if len(teams) < 2:
                console.print("  [red]Need at least 2 teams.[/]")
                continue
            break
        added = parse_team_list(raw)
        teams.extend(added)
        for team in added:
            console.print(f"  [green]✓[/] Added [bold]{team.name}[/]")

    double_round = Confirm.ask("\n  Home and away (double round)?", default=defaults.double_round)

    while True:
        relegation = IntPrompt.ask(
            "  Relegated teams",
            default=min(defaults.relegation_count, len(teams) - 1),
        )
        settings = ProjectSettings(
            double_round=double_round,
            relegation_count=relegation,
            teams=tuple(teams),
        )
        try:
            validate_settings(settings)
        except ConfigurationError as exc:
            console.print(f"  [red]{exc}[/]")
            continue
        break

    _print_lineup(settings)
    return settings


def select_sort_key() -> tuple[str, bool]:
    console.print("\n[bold]Sort by:[/]  " + "  ".join(f"{i}. {k}" for i, k in enumerate(SORT_KEYS, 1)))
    choice = IntPrompt.ask(
        "Select",
        choices=[str(i) for i in range(1, len(SORT_KEYS) + 1)],
        default=1,
        show_choices=False,
    )
    key = SORT_KEYS[choice - 1]
    descending = Confirm.ask("  Descending?", default=key != "team_name")
    return key, descending


def select_team(project: Project) -> Team | None:
    teams = list(project.teams)
    for i, team in enumerate(teams, 1):
        console.print(f"  [dim]{i:>3}.[/] {team.name}")
    raw = Prompt.ask("  Team number (Enter to cancel)", default="", show_default=False)
    if raw.strip() == "":
        return None
    if raw not in [str(i) for i in range(1, len(teams) + 1)]:
        console.print(f"  [red]Invalid choice. Enter a number between 1 and {len(teams)}.[/]")
        return None
    return teams[int(raw) - 1]


def prompt_result(project: Project, rnd: Round) -> tuple[Match, int | None, int | None] | None:
    """
    Ask which match of the round to score and the score itself.

    A score is typed as "2-1"; "-" clears an existing result.
    Returns None when the user cancels.
    """
    if not rnd.matches:
        console.print("  [yellow]This round has no matches.[/]")
        return None
    choices = [str(i) for i in range(1, len(rnd.matches) + 1)]
    raw = Prompt.ask("  Match number (Enter to cancel)", default="", show_default=False)
    if raw.strip() == "":
        return None
    if raw not in choices:
        console.print(f"  [red]Invalid choice. Enter a number between 1 and {len(rnd.matches)}.[/]")
        return None
    match = rnd.matches[int(raw) - 1]

    label = f"{project.team_name(match.home_team_id)} x {project.team_name(match.away_team_id)}"
    while True:
        score = Prompt.ask(f"  {label} — score (e.g. 2-1, '-' to clear)").strip()
        if score == "-":
            return match, None, None
        try:
            home, away = parse_score(score)
        except ValueError as exc:
            console.print(f"  [red]{exc}[/]")
            continue
        return match, home, away


def parse_score(text: str) -> tuple[int, int]:
    """Parse "2-1" / "2 x 1" / "2:1" into (home, away)."""
    normalized = text.lower().replace("x", "-").replace(":", "-")
    parts = [p.strip() for p in normalized.split("-")]
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Cannot read score {text!r}; use the form 2-1.")
    return int(parts[0]), int(parts[1])


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def _print_lineup(settings: ProjectSettings) -> None:
    table = Table(
        title="Championship Line-up",
        show_header=True,
        header_style="bold",
        border_style="green",
        show_lines=False,
    )
    table.add_column("#", style="dim", width=4, justify="right")
    table.add_column("Team", min_width=20)

    for i, team in enumerate(settings.teams, 1):
        table.add_row(str(i), team.name)

    n = len(settings.teams)
    per_turn = rounds_per_turn(n)
    total = per_turn * 2 if settings.double_round else per_turn

    console.print()
    console.print(table)
    console.print(f"  [dim]ℹ  {total} rounds will be generated.[/]")
    if n % 2 == 1:
        console.print("  [dim]ℹ  Odd number of teams: one team rests (bye) in every round.[/]")
    console.print()
