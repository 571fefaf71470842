"""
Entry point for the leaguedesk web API.

    python web_main.py              ← serves on server.host:server.port from config.yaml

Set LEAGUEDESK_CONFIG to point at a different config file.
"""

import os

import uvicorn

from leaguedesk.config import load_config_or_default

if __name__ == "__main__":
    cfg = load_config_or_default(os.environ.get("LEAGUEDESK_CONFIG", "config.yaml"))
    uvicorn.run(
        "leaguedesk.web.app:app",
        host=cfg.server.host,
        port=cfg.server.port,
        reload=True,
    )
