"""
leaguedesk — interactive CLI entry point.

Usage:
    python league_main.py [--config config.yaml]

Wires together:
    config → logging → project store → menu loop →
    championship setup / result entry / standings display
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.prompt import Confirm, Prompt

from leaguedesk.cli.display import (
    console,
    show_project_header,
    show_project_list,
    show_round,
    show_standings,
    show_team_history,
)
from leaguedesk.cli.selector import (
    prompt_project_name,
    prompt_result,
    prompt_settings,
    select_project,
    select_sort_key,
    select_team,
)
from leaguedesk.config import Config, load_config_or_default
from leaguedesk.logsetup import configure_logging
from leaguedesk.models import ProjectSettings
from leaguedesk.projects import (
    ConfigurationError,
    configure_project,
    create_project,
    project_standings,
    record_result,
    team_history,
)
from leaguedesk.store import ProjectStore, StoreError, export_filename

_MAIN_MENU = """
[bold]Championships[/]
  [bold]l[/] list   [bold]n[/] new   [bold]s[/] select   [bold]d[/] delete
  [bold]i[/] import [bold]q[/] quit"""

_PROJECT_MENU = """
[bold]{name}[/]
  [bold]r[/] rounds  [bold]t[/] standings  [bold]h[/] team history
  [bold]c[/] configure  [bold]e[/] export  [bold]b[/] back"""


def _main(config: Config) -> None:
    store = ProjectStore(config.store_path)

    while True:
        console.print(_MAIN_MENU)
        choice = Prompt.ask("Action", choices=["l", "n", "s", "d", "i", "q"], default="l")

        match choice:
            case "l":
                show_project_list(store.list_projects())
            case "n":
                project = create_project(
                    prompt_project_name(),
                    settings=_default_settings(config),
                )
                store.save(project)
                _project_loop(store, project.id, config)
            case "s":
                projects = store.list_projects()
                show_project_list(projects)
                selected = select_project(projects)
                if selected is not None:
                    _project_loop(store, selected.id, config)
            case "d":
                projects = store.list_projects()
                show_project_list(projects)
                selected = select_project(projects)
                if selected is not None and Confirm.ask(
                    f"  Delete [bold]{selected.name}[/]?", default=False
                ):
                    store.delete(selected.id)
                    console.print(f"  [green]✓[/] Deleted {selected.name}")
            case "i":
                _import(store)
            case "q":
                return


def _project_loop(store: ProjectStore, project_id: str, config: Config) -> None:
    round_index = 0  # view state: the round currently being browsed

    while True:
        project = store.get(project_id)
        if not project.is_configured:
            console.print(f"\n[yellow]{project.name} is not configured yet.[/]")
            settings = prompt_settings(config.league)
            project = store.update(project_id, lambda p: configure_project(p, settings))
            round_index = 0

        show_project_header(project)
        console.print(_PROJECT_MENU.format(name=project.name))
        choice = Prompt.ask("Action", choices=["r", "t", "h", "c", "e", "b"], default="r")

        match choice:
            case "r":
                round_index = _browse_rounds(store, project_id, round_index)
            case "t":
                key, descending = select_sort_key()
                rows = project_standings(project, key, descending)
                label = None if (key, descending) == ("points", True) else key
                show_standings(project, rows, sort_label=label)
            case "h":
                team = select_team(project)
                if team is not None:
                    show_team_history(team.name, team_history(project, team.id))
            case "c":
                if Confirm.ask(
                    "  Reconfiguring regenerates the schedule and discards all results. Continue?",
                    default=False,
                ):
                    settings = prompt_settings(config.league)
                    store.update(project_id, lambda p: configure_project(p, settings))
                    round_index = 0
            case "e":
                target = Path(export_filename(project))
                try:
                    target.write_text(store.export_project(project_id), encoding="utf-8")
                except OSError as exc:
                    console.print(f"  [red]Export error:[/] {exc}")
                else:
                    console.print(f"  [green]✓[/] Exported to {target.resolve()}")
            case "b":
                return


def _browse_rounds(store: ProjectStore, project_id: str, round_index: int) -> int:
    while True:
        project = store.get(project_id)
        if not project.rounds:
            console.print("  [yellow]No rounds available. Configure the championship first.[/]")
            return 0
        round_index = max(0, min(round_index, len(project.rounds) - 1))
        rnd = project.rounds[round_index]
        show_round(project, rnd)

        console.print("  [bold]p[/] previous  [bold]n[/] next  [bold]s[/] score  [bold]b[/] back")
        choice = Prompt.ask("Action", choices=["p", "n", "s", "b"], default="n")
        match choice:
            case "p":
                round_index = max(0, round_index - 1)
            case "n":
                round_index = min(len(project.rounds) - 1, round_index + 1)
            case "s":
                entry = prompt_result(project, rnd)
                if entry is None:
                    continue
                fixture, home, away = entry
                try:
                    store.update(project_id, lambda p: record_result(p, fixture.id, home, away))
                except ConfigurationError as exc:
                    console.print(f"  [red]Error:[/] {exc}")
            case "b":
                return round_index


def _import(store: ProjectStore) -> None:
    raw_path = Prompt.ask("  Path to exported JSON").strip()
    path = Path(raw_path)
    if not path.exists():
        console.print(f"  [red]Error:[/] file not found: {path}")
        return
    try:
        project = store.import_project(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        console.print(f"  [red]Import error:[/] {exc}")
        return
    console.print(f"  [green]✓[/] Imported [bold]{project.name}[/]")


def _default_settings(config: Config) -> ProjectSettings:
    return ProjectSettings(
        double_round=config.league.double_round,
        relegation_count=config.league.relegation_count,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Round-robin league organizer")
    parser.add_argument("--config", default="config.yaml", help="path to config.yaml")
    args = parser.parse_args()

    try:
        config = load_config_or_default(args.config)
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        sys.exit(1)

    configure_logging(config.logging, console=False)

    try:
        _main(config)
    except KeyboardInterrupt:
        console.print("\n[yellow]Bye.[/]")
    except StoreError as exc:
        console.print(f"[red]Storage error:[/] {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
