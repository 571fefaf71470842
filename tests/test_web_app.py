import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch
from urllib.parse import quote

from fastapi.testclient import TestClient

from leaguedesk.store import ProjectStore
from leaguedesk.web import app as web_app


class WebApiTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        store_patch = patch.object(web_app, "store", ProjectStore(Path(tmp.name) / "projects.json"))
        store_patch.start()
        self.addCleanup(store_patch.stop)
        self.client = TestClient(web_app.app)

    def _configured_project(self, double_round: bool = False) -> dict:
        created = self.client.post("/api/projects", json={"name": "Copa"})
        self.assertEqual(created.status_code, 201)
        project_id = created.json()["id"]
        resp = self.client.post(
            f"/api/projects/{project_id}/configure",
            json={"doubleRound": double_round, "relegationCount": 1, "teamList": "Ajax\nBenfica\nCeltic\nDinamo"},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()

    def test_config_endpoint(self) -> None:
        data = self.client.get("/api/config").json()
        self.assertIn("relegationCount", data)
        self.assertIn("points", data["sortKeys"])

    def test_create_and_list(self) -> None:
        self.client.post("/api/projects", json={"name": "One"})
        listing = self.client.get("/api/projects").json()
        self.assertEqual([p["name"] for p in listing], ["One"])
        self.assertFalse(listing[0]["isConfigured"])

    def test_create_requires_name(self) -> None:
        self.assertEqual(self.client.post("/api/projects", json={"name": " "}).status_code, 400)

    def test_configure_generates_rounds(self) -> None:
        project = self._configured_project(double_round=True)
        self.assertTrue(project["isConfigured"])
        self.assertEqual(len(project["rounds"]), 6)
        rounds = self.client.get(f"/api/projects/{project['id']}/rounds").json()
        self.assertEqual([r["number"] for r in rounds], [1, 2, 3, 4, 5, 6])

    def test_configure_rejects_bad_relegation(self) -> None:
        created = self.client.post("/api/projects", json={"name": "Bad"}).json()
        resp = self.client.post(
            f"/api/projects/{created['id']}/configure",
            json={"relegationCount": 2, "teamList": "A\nB"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Relegation", resp.json()["detail"])

    def test_configure_unknown_project(self) -> None:
        resp = self.client.post("/api/projects/nope/configure", json={"teamList": "A\nB"})
        self.assertEqual(resp.status_code, 404)

    def test_record_result_and_standings(self) -> None:
        project = self._configured_project()
        pid = project["id"]
        first = project["rounds"][0]["matches"][0]   # Ajax (home) vs Dinamo

        resp = self.client.put(
            f"/api/projects/{pid}/matches/{first['id']}",
            json={"homeScore": 3, "awayScore": 1},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["match"]["homeScore"], 3)

        rows = self.client.get(f"/api/projects/{pid}/standings").json()
        self.assertEqual(rows[0]["teamName"], "Ajax")
        self.assertEqual(rows[0]["points"], 3)
        self.assertEqual(rows[0]["goalDifference"], 2)
        self.assertEqual(rows[0]["zone"], "leader")
        self.assertEqual(rows[-1]["teamName"], "Dinamo")
        self.assertEqual(rows[-1]["zone"], "relegation")
        self.assertEqual([r["position"] for r in rows], [1, 2, 3, 4])

    def test_standings_alternate_sort(self) -> None:
        pid = self._configured_project()["id"]
        rows = self.client.get(f"/api/projects/{pid}/standings?sort=team_name&order=desc").json()
        self.assertEqual([r["teamName"] for r in rows], ["Dinamo", "Celtic", "Benfica", "Ajax"])

    def test_standings_bad_sort(self) -> None:
        pid = self._configured_project()["id"]
        self.assertEqual(self.client.get(f"/api/projects/{pid}/standings?sort=nope").status_code, 400)
        self.assertEqual(self.client.get(f"/api/projects/{pid}/standings?order=up").status_code, 400)

    def test_half_score_rejected(self) -> None:
        project = self._configured_project()
        match_id = project["rounds"][0]["matches"][0]["id"]
        resp = self.client.put(
            f"/api/projects/{project['id']}/matches/{match_id}",
            json={"homeScore": 1, "awayScore": None},
        )
        self.assertEqual(resp.status_code, 400)

    def test_non_integer_score_rejected(self) -> None:
        project = self._configured_project()
        match_id = project["rounds"][0]["matches"][0]["id"]
        resp = self.client.put(
            f"/api/projects/{project['id']}/matches/{match_id}",
            json={"homeScore": "2", "awayScore": 1},
        )
        self.assertEqual(resp.status_code, 400)

    def test_unknown_match(self) -> None:
        pid = self._configured_project()["id"]
        resp = self.client.put(f"/api/projects/{pid}/matches/nope", json={"homeScore": 1, "awayScore": 0})
        self.assertEqual(resp.status_code, 404)

    def test_round_lookup(self) -> None:
        pid = self._configured_project()["id"]
        self.assertEqual(self.client.get(f"/api/projects/{pid}/rounds/2").json()["number"], 2)
        self.assertEqual(self.client.get(f"/api/projects/{pid}/rounds/9").status_code, 404)

    def test_team_history(self) -> None:
        project = self._configured_project()
        team_id = project["settings"]["teams"][0]["id"]
        history = self.client.get(f"/api/projects/{project['id']}/teams/{team_id}/history").json()
        self.assertEqual(len(history), 3)
        self.assertTrue(all(h["outcome"] == "pending" for h in history))
        self.assertEqual(
            self.client.get(f"/api/projects/{project['id']}/teams/zzz/history").status_code, 404
        )

    def test_export_import_delete(self) -> None:
        project = self._configured_project()
        pid = project["id"]

        exported = self.client.get(f"/api/projects/{pid}/export")
        self.assertEqual(exported.status_code, 200)
        self.assertIn("Copa_config.json", exported.headers["content-disposition"])

        self.assertEqual(self.client.delete(f"/api/projects/{pid}").status_code, 204)
        self.assertEqual(self.client.get(f"/api/projects/{pid}").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/projects/{pid}").status_code, 404)

        imported = self.client.post("/api/projects/import", json=exported.json())
        self.assertEqual(imported.status_code, 201)
        self.assertEqual(self.client.get(f"/api/projects/{pid}").json(), project)

    def test_import_rejects_malformed(self) -> None:
        resp = self.client.post("/api/projects/import", json={"name": "no id"})
        self.assertEqual(resp.status_code, 400)

    def test_configure_rejects_non_boolean_double_round(self) -> None:
        created = self.client.post("/api/projects", json={"name": "Strict"}).json()
        resp = self.client.post(
            f"/api/projects/{created['id']}/configure",
            json={"doubleRound": "false", "relegationCount": 1, "teamList": "A\nB\nC\nD"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("doubleRound", resp.json()["detail"])
        self.assertFalse(self.client.get(f"/api/projects/{created['id']}").json()["isConfigured"])

    def test_configure_rejects_non_integer_relegation(self) -> None:
        created = self.client.post("/api/projects", json={"name": "Strict"}).json()
        resp = self.client.post(
            f"/api/projects/{created['id']}/configure",
            json={"relegationCount": "1", "teamList": "A\nB\nC"},
        )
        self.assertEqual(resp.status_code, 400)

    def test_export_non_ascii_name(self) -> None:
        name = "Liga 北京 ⚽"
        pid = self.client.post("/api/projects", json={"name": name}).json()["id"]
        resp = self.client.get(f"/api/projects/{pid}/export")
        self.assertEqual(resp.status_code, 200)
        header = resp.headers["content-disposition"]
        self.assertTrue(header.isascii())
        self.assertIn("filename*=UTF-8''" + quote("Liga_北京_⚽_config.json", safe=""), header)
        self.assertEqual(resp.json()["name"], name)

    def test_export_name_with_quote_and_slash(self) -> None:
        pid = self.client.post("/api/projects", json={"name": 'Copa "A/B"'}).json()["id"]
        header = self.client.get(f"/api/projects/{pid}/export").headers["content-disposition"]
        self.assertIn('filename="Copa__A_B__config.json"', header)

    def test_corrupt_store_is_reported_not_overwritten(self) -> None:
        web_app.store.path.parent.mkdir(parents=True, exist_ok=True)
        web_app.store.path.write_text("{bad json", encoding="utf-8")
        with self.assertLogs("leaguedesk", level="WARNING"):
            resp = self.client.post("/api/projects", json={"name": "Fresh"})
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(web_app.store.path.read_text(encoding="utf-8"), "{bad json")
