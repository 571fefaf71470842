"""
FastAPI application — the web backend.

Exposes:
  GET    /api/config                                   Rule defaults for new projects
  GET    /api/projects                                 List championships
  POST   /api/projects                                 Create one {name}
  POST   /api/projects/import                          Import an exported project
  GET    /api/projects/{id}                            Full project record
  DELETE /api/projects/{id}                            Delete a project
  POST   /api/projects/{id}/configure                  Set teams/rules, generate schedule
  GET    /api/projects/{id}/rounds                     All rounds
  GET    /api/projects/{id}/rounds/{number}            One round
  PUT    /api/projects/{id}/matches/{match_id}         Record or clear a score
  GET    /api/projects/{id}/standings?sort=&order=     Ranked table with zones
  GET    /api/projects/{id}/teams/{team_id}/history    One team's fixtures
  GET    /api/projects/{id}/export                     Download as JSON

Request and response bodies use the persisted camelCase shape.
"""

from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from leaguedesk.config import load_config_or_default
from leaguedesk.logsetup import configure_logging
from leaguedesk.models import Project, ProjectSettings, Team
from leaguedesk.projects import (
    ConfigurationError,
    configure_project,
    create_project,
    find_round,
    parse_team_list,
    project_standings,
    record_result,
    team_history,
)
from leaguedesk.store import ProjectStore, StoreError, export_filename
from leaguedesk.tournaments import SORT_KEYS, classify, compute_standings

config = load_config_or_default(Path(os.environ.get("LEAGUEDESK_CONFIG", "config.yaml")))
store = ProjectStore(config.store_path)

# --------------------------------------------------------------------------- #
# Logging                                                                      #
# --------------------------------------------------------------------------- #

logger = configure_logging(config.logging)


app = FastAPI(title="leaguedesk")


@app.exception_handler(StoreError)
async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Project store unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def _get_project(project_id: str) -> Project:
    try:
        return store.get(project_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Project not found: {project_id}")


def _summary(project: Project) -> dict:
    return {
        "id": project.id,
        "name": project.name,
        "createdAt": project.created_at,
        "isConfigured": project.is_configured,
        "teamCount": len(project.teams),
        "roundCount": len(project.rounds),
    }


def _parse_settings(payload: dict) -> ProjectSettings:
    """Build settings from {doubleRound, relegationCount, teams | teamList}."""
    if "teams" in payload:
        raw_teams = payload.get("teams") or []
        if not isinstance(raw_teams, list):
            raise HTTPException(status_code=400, detail="teams must be a list")
        try:
            teams = [Team.from_dict(t) for t in raw_teams]
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    else:
        teams = parse_team_list(str(payload.get("teamList", "")))

    relegation = payload.get("relegationCount", config.league.relegation_count)
    if isinstance(relegation, bool) or not isinstance(relegation, int):
        raise HTTPException(status_code=400, detail="relegationCount must be an integer")
    double_round = payload.get("doubleRound", config.league.double_round)
    if not isinstance(double_round, bool):
        raise HTTPException(status_code=400, detail="doubleRound must be true or false")

    return ProjectSettings(
        double_round=double_round,
        relegation_count=relegation,
        teams=tuple(teams),
    )


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and the RFC 5987 UTF-8 name."""
    fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    encoded = quote(filename, safe="")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _parse_score(value: object, field: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise HTTPException(status_code=400, detail=f"{field} must be an integer or null")
    return value


# --------------------------------------------------------------------------- #
# REST                                                                         #
# --------------------------------------------------------------------------- #

@app.get("/api/config")
def get_config():
    return {
        "doubleRound": config.league.double_round,
        "relegationCount": config.league.relegation_count,
        "sortKeys": list(SORT_KEYS),
    }


@app.get("/api/projects")
def list_projects():
    return [_summary(p) for p in store.list_projects()]


@app.post("/api/projects", status_code=201)
def post_project(payload: dict):
    name = str(payload.get("name", "")).strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    project = create_project(
        name,
        settings=ProjectSettings(
            double_round=config.league.double_round,
            relegation_count=config.league.relegation_count,
        ),
    )
    store.save(project)
    return project.to_dict()


@app.post("/api/projects/import", status_code=201)
def import_project(payload: dict):
    try:
        project = store.import_project(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return project.to_dict()


@app.get("/api/projects/{project_id}")
def get_project(project_id: str):
    return _get_project(project_id).to_dict()


@app.delete("/api/projects/{project_id}", status_code=204)
def delete_project(project_id: str):
    try:
        store.delete(project_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Project not found: {project_id}")
    return Response(status_code=204)


@app.post("/api/projects/{project_id}/configure")
def post_configure(project_id: str, payload: dict):
    settings = _parse_settings(payload)
    try:
        project = store.update(project_id, lambda p: configure_project(p, settings))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Project not found: {project_id}")
    except ConfigurationError as exc:
        logger.warning("Rejected configuration for project %s: %s", project_id, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return project.to_dict()


@app.get("/api/projects/{project_id}/rounds")
def get_rounds(project_id: str):
    return [r.to_dict() for r in _get_project(project_id).rounds]


@app.get("/api/projects/{project_id}/rounds/{number}")
def get_round(project_id: str, number: int):
    project = _get_project(project_id)
    try:
        return find_round(project, number).to_dict()
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Round not found: {number}")


@app.put("/api/projects/{project_id}/matches/{match_id}")
def put_match(project_id: str, match_id: str, payload: dict):
    home = _parse_score(payload.get("homeScore"), "homeScore")
    away = _parse_score(payload.get("awayScore"), "awayScore")
    _get_project(project_id)
    try:
        project = store.update(project_id, lambda p: record_result(p, match_id, home, away))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Match not found: {match_id}")
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    for rnd in project.rounds:
        for match in rnd.matches:
            if match.id == match_id:
                return {"round": rnd.number, "match": match.to_dict()}
    raise HTTPException(status_code=404, detail=f"Match not found: {match_id}")  # pragma: no cover


@app.get("/api/projects/{project_id}/standings")
def get_standings(project_id: str, sort: str = "points", order: str = "desc"):
    if order not in ("asc", "desc"):
        raise HTTPException(status_code=400, detail="order must be 'asc' or 'desc'")
    project = _get_project(project_id)
    try:
        rows = project_standings(project, sort, order == "desc")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    # Zones always come from the default ranking.
    ranked = compute_standings(project.teams, project.rounds)
    zones = dict(zip((r.team_id for r in ranked), classify(ranked, project.settings.relegation_count)))
    return [
        {"position": i, **row.to_dict(), "zone": zones.get(row.team_id)}
        for i, row in enumerate(rows, 1)
    ]


@app.get("/api/projects/{project_id}/teams/{team_id}/history")
def get_team_history(project_id: str, team_id: str):
    project = _get_project(project_id)
    try:
        entries = team_history(project, team_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Team not found: {team_id}")
    return [
        {
            "round": e.round_number,
            "matchId": e.match.id,
            "opponent": e.opponent_name,
            "isHome": e.is_home,
            "teamScore": e.team_score,
            "opponentScore": e.opponent_score,
            "outcome": e.outcome,
        }
        for e in entries
    ]


@app.get("/api/projects/{project_id}/export")
def export_project(project_id: str):
    project = _get_project(project_id)
    return Response(
        content=store.export_project(project_id),
        media_type="application/json",
        headers={"Content-Disposition": _content_disposition(export_filename(project))},
    )
