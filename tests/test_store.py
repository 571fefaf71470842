import itertools
import json
import tempfile
import threading
import unittest
from pathlib import Path

from leaguedesk.models import Project, ProjectSettings, Team
from leaguedesk.projects import configure_project, create_project, project_standings, record_result
from leaguedesk.store import ProjectStore, StoreError, export_filename

TEAMS = tuple(Team(f"t{i}", f"Team {i}") for i in range(6))


def counter_ids():
    counter = itertools.count(1)
    return lambda: f"m{next(counter)}"


def configured_project(name: str = "League") -> Project:
    project = create_project(name, now=1)
    settings = ProjectSettings(double_round=True, relegation_count=2, teams=TEAMS)
    return configure_project(project, settings, id_factory=counter_ids())


class ProjectStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = Path(tmp.name) / "data" / "projects.json"
        self.store = ProjectStore(self.path)

    def test_missing_file_reads_as_empty(self) -> None:
        self.assertEqual(self.store.list_projects(), [])

    def test_save_and_get_round_trip(self) -> None:
        project = configured_project()
        self.store.save(project)
        self.assertTrue(self.path.exists())
        self.assertEqual(self.store.get(project.id), project)

    def test_save_replaces_same_id(self) -> None:
        project = configured_project()
        self.store.save(project)
        self.store.save(record_result(project, "m1", 1, 0))
        projects = self.store.list_projects()
        self.assertEqual(len(projects), 1)
        self.assertTrue(projects[0].rounds[0].matches[0].is_played)

    def test_get_missing_raises_key_error(self) -> None:
        with self.assertRaises(KeyError):
            self.store.get("nope")

    def test_delete(self) -> None:
        first, second = configured_project("One"), configured_project("Two")
        self.store.save(first)
        self.store.save(second)
        self.store.delete(first.id)
        self.assertEqual([p.id for p in self.store.list_projects()], [second.id])
        with self.assertRaises(KeyError):
            self.store.delete(first.id)

    def test_invalid_json_returns_empty_list(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("{bad json", encoding="utf-8")
        with self.assertLogs("leaguedesk.store", level="WARNING"):
            self.assertEqual(self.store.list_projects(), [])

    def test_unreadable_record_is_skipped(self) -> None:
        good = configured_project()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps([{"name": "no id"}, good.to_dict()]), encoding="utf-8")
        with self.assertLogs("leaguedesk.store", level="WARNING"):
            self.assertEqual([p.id for p in self.store.list_projects()], [good.id])

    def test_unreadable_record_survives_other_writes(self) -> None:
        good = configured_project()
        bad = {"id": "x", "name": "Broken", "rounds": [{"number": "one"}]}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps([good.to_dict(), bad]), encoding="utf-8")

        with self.assertLogs("leaguedesk.store", level="WARNING"):
            self.store.save(create_project("Other", now=2))
            self.store.update(good.id, lambda p: record_result(p, "m1", 1, 1))
            self.store.delete(good.id)

        on_disk = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertIn(bad, on_disk)
        self.assertEqual(len(on_disk), 2)

    def test_invalid_json_is_never_overwritten(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("{bad json", encoding="utf-8")
        with self.assertLogs("leaguedesk.store", level="WARNING"):
            with self.assertRaises(StoreError):
                self.store.save(configured_project())
            with self.assertRaises(StoreError):
                self.store.delete("anything")
        self.assertEqual(self.path.read_text(encoding="utf-8"), "{bad json")

    def test_update_applies_function(self) -> None:
        project = configured_project()
        self.store.save(project)
        updated = self.store.update(project.id, lambda p: record_result(p, "m2", 3, 3))
        self.assertEqual(self.store.get(project.id), updated)

    def test_update_cannot_change_id(self) -> None:
        project = configured_project()
        self.store.save(project)
        other = configured_project("Other")
        with self.assertRaises(ValueError):
            self.store.update(project.id, lambda p: other)

    def test_concurrent_updates_are_not_lost(self) -> None:
        project = configured_project()
        self.store.save(project)
        match_ids = [m.id for r in project.rounds for m in r.matches]

        def score(match_id: str) -> None:
            self.store.update(project.id, lambda p: record_result(p, match_id, 1, 0))

        threads = [threading.Thread(target=score, args=(mid,)) for mid in match_ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stored = self.store.get(project.id)
        self.assertTrue(all(m.is_played for r in stored.rounds for m in r.matches))

    def test_export_then_import_reproduces_standings(self) -> None:
        project = configured_project()
        for i, match_id in enumerate(["m1", "m2", "m3", "m5", "m8"]):
            project = record_result(project, match_id, i % 3, 1)
        self.store.save(project)

        exported = self.store.export_project(project.id)
        self.store.delete(project.id)
        imported = self.store.import_project(exported)

        self.assertEqual(imported, project)
        self.assertEqual(project_standings(imported), project_standings(project))

    def test_import_replaces_existing(self) -> None:
        project = configured_project()
        self.store.save(project)
        data = record_result(project, "m1", 4, 0).to_dict()
        self.store.import_project(data)
        self.assertEqual(len(self.store.list_projects()), 1)
        self.assertEqual(self.store.get(project.id).rounds[0].matches[0].home_score, 4)

    def test_import_rejects_bad_json(self) -> None:
        with self.assertRaises(ValueError):
            self.store.import_project("{nope")

    def test_import_rejects_bad_shape(self) -> None:
        with self.assertRaises(ValueError):
            self.store.import_project({"id": "x"})

    def test_export_filename(self) -> None:
        project = create_project("Serie  A 2024", now=0)
        self.assertEqual(export_filename(project), "Serie_A_2024_config.json")

    def test_export_filename_strips_path_separators_and_quotes(self) -> None:
        self.assertEqual(
            export_filename(create_project('Copa A/B "Sul"\\Norte', now=0)),
            "Copa_A_B__Sul__Norte_config.json",
        )

    def test_export_filename_keeps_non_ascii(self) -> None:
        project = create_project("Liga 北京 ⚽", now=0)
        self.assertEqual(export_filename(project), "Liga_北京_⚽_config.json")

    def test_update_unknown_project_allocates_no_lock(self) -> None:
        for i in range(5):
            with self.assertRaises(KeyError):
                self.store.update(f"ghost-{i}", lambda p: p)
        self.assertEqual(self.store._project_locks, {})
