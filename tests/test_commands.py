import io
import json
import logging
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from catalog_check import cli
from catalog_check.commands import basilicas, duplicates, exists, placement, relocate
from catalog_check.config import DataSettings, Settings


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def build_catalog(root: Path) -> None:
    people = root / "people"
    write_json(
        people / "century-16" / "ignatius-of-loyola.json",
        {"id": "ignatius-of-loyola", "name": "Ignatius of Loyola", "deathYear": 1556},
    )
    write_json(
        people / "century-16" / "francis-xavier.json",
        {"id": "francis-xavier", "name": "Francis Xavier", "deathYear": 1552},
    )
    write_json(
        people / "century-4" / "athanasius.json",
        {"id": "athanasius", "name": "Athanasius of Alexandria", "deathYear": 373},
    )
    events = root / "events"
    write_json(
        events / "century-4" / "council-nicaea-i.json",
        {
            "id": "first-council-of-nicaea",
            "name": "First Council of Nicaea",
            "startYear": 325,
            "type": "council",
        },
    )
    write_json(
        events / "century-16" / "council-trent.json",
        {
            "id": "council-trent",
            "name": "Council of Trent",
            "startYear": 1545,
            "endYear": 1563,
            "type": "council",
        },
    )
    write_json(
        events / "century-16" / "protestant-reformation.json",
        {
            "id": "protestant-reformation",
            "name": "Protestant Reformation",
            "startYear": 1517,
            "type": "reform",
        },
    )
    write_json(
        root / "basilicas.json",
        [
            {
                "id": "st-peters-basilica",
                "name": "St. Peter's Basilica",
                "placeId": "rome",
                "type": "major-basilica",
            }
        ],
    )
    write_json(root / "places.json", [{"id": "rome", "name": "Rome"}])


class CatalogTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name).resolve()
        build_catalog(self.root)
        self.settings = Settings(data=DataSettings(root=self.root))

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def move(self, relative: str, bucket: str) -> Path:
        source = self.root / relative
        target = source.parent.parent / bucket / source.name
        target.parent.mkdir(parents=True, exist_ok=True)
        source.rename(target)
        return target


class TestExistsCommand(CatalogTestCase):
    def test_reports_partial_match(self) -> None:
        report = exists.run(self.settings, "people", ["Ignatius Loyola"])
        self.assertFalse(report.ok)
        joined = "\n".join(report.lines)
        self.assertIn('"Ignatius Loyola": FOUND (1 potential match(es))', joined)
        self.assertIn("1. Ignatius of Loyola (id: ignatius-of-loyola)", joined)
        self.assertIn("Score: 90% (partial match)", joined)
        self.assertIn("Death year: 1556", joined)
        self.assertIn("Location: century-16", joined)
        self.assertIn("File: people/century-16/ignatius-of-loyola.json", joined)

    def test_safe_to_add(self) -> None:
        report = exists.run(self.settings, "people", ["Thomas Aquinas"])
        self.assertTrue(report.ok)
        self.assertIn('"Thomas Aquinas": OK (no matches - safe to add)', report.lines)

    def test_councils_only_search_councils(self) -> None:
        report = exists.run(self.settings, "councils", ["Trent", "Protestant Reformation"])
        joined = "\n".join(report.lines)
        self.assertFalse(report.ok)
        self.assertIn("Council of Trent (id: council-trent)", joined)
        self.assertIn("Score: 80% (contains match)", joined)
        self.assertIn("Years: 1545-1563", joined)
        self.assertIn('"Protestant Reformation": OK (no matches - safe to add)', joined)

    def test_events_include_every_type(self) -> None:
        report = exists.run(self.settings, "events", ["Protestant Reformation"])
        self.assertFalse(report.ok)
        self.assertIn("Score: 100% (exact match)", "\n".join(report.lines))

    def test_basilicas(self) -> None:
        report = exists.run(self.settings, "basilicas", ["St Peters Basilica"])
        joined = "\n".join(report.lines)
        self.assertFalse(report.ok)
        self.assertIn("Score: 100% (exact match)", joined)
        self.assertIn("Place: rome", joined)

    def test_unknown_collection(self) -> None:
        with self.assertRaises(ValueError):
            exists.run(self.settings, "places", ["Rome"])


class TestPlacementCommand(CatalogTestCase):
    def test_clean_catalog(self) -> None:
        report = placement.run(self.settings, "people")
        self.assertTrue(report.ok)
        self.assertIn("Placement: OK (3 people in correct century folders)", report.lines)

    def test_events_use_start_year(self) -> None:
        self.assertTrue(placement.run(self.settings, "events").ok)

    def test_wrong_century(self) -> None:
        self.move("people/century-4/athanasius.json", "century-5")
        report = placement.run(self.settings, "people")
        joined = "\n".join(report.lines)
        self.assertFalse(report.ok)
        self.assertIn("Wrong century placement: ERROR (1)", joined)
        self.assertIn("deathYear: 373", joined)
        self.assertIn("Expected: century-4", joined)
        self.assertIn("Actual: century-5", joined)

    def test_checks_records_named_index(self) -> None:
        write_json(
            self.root / "events" / "century-15" / "index-of-forbidden-books.json",
            {"id": "index-of-forbidden-books", "name": "Index of Forbidden Books", "startYear": 1559},
        )
        (self.root / "events" / "century-15" / "index.ts").write_text("export default [];", encoding="utf-8")
        report = placement.run(self.settings, "events")
        joined = "\n".join(report.lines)
        self.assertFalse(report.ok)
        self.assertIn("Index of Forbidden Books (id: index-of-forbidden-books)", joined)
        self.assertIn("Expected: century-16", joined)

    def test_missing_date_is_not_a_failure(self) -> None:
        write_json(self.root / "people" / "century-1" / "anon.json", {"id": "anon", "name": "Anonymous"})
        report = placement.run(self.settings, "people")
        self.assertTrue(report.ok)
        self.assertIn("Missing deathYear: WARNING (1)", report.lines)

    def test_duplicate_ids(self) -> None:
        write_json(
            self.root / "people" / "century-15" / "francis-xavier.json",
            {"id": "francis-xavier", "name": "Francis Xavier", "deathYear": 1452},
        )
        report = placement.run(self.settings, "people")
        joined = "\n".join(report.lines)
        self.assertFalse(report.ok)
        self.assertIn("Duplicate ids: ERROR (1)", joined)
        self.assertIn("Found in century-15: people/century-15/francis-xavier.json", joined)
        self.assertIn("Found in century-16: people/century-16/francis-xavier.json", joined)


class TestDuplicatesCommand(CatalogTestCase):
    def test_clean_catalog(self) -> None:
        report = duplicates.run(self.settings)
        self.assertTrue(report.ok)
        self.assertIn("People checked: 3", report.lines)
        self.assertIn("Events checked: 3", report.lines)
        self.assertIn("Duplicates: OK (no duplicates found)", report.lines)

    def test_duplicate_event_id(self) -> None:
        write_json(
            self.root / "events" / "century-5" / "nicaea-again.json",
            {"id": "first-council-of-nicaea", "name": "Nicaea"},
        )
        report = duplicates.run(self.settings)
        joined = "\n".join(report.lines)
        self.assertFalse(report.ok)
        self.assertIn("Duplicate events ids: ERROR (1)", joined)
        self.assertIn("ID: first-council-of-nicaea (found 2 times)", joined)

    def test_parse_errors_fail(self) -> None:
        (self.root / "people" / "century-4" / "broken.json").write_text("{", encoding="utf-8")
        with self.assertLogs("catalog_check.loader", level="WARNING"):
            report = duplicates.run(self.settings)
        self.assertFalse(report.ok)
        self.assertIn("Parse errors in people files: ERROR (1)", report.lines)
        self.assertIn("People checked: 4", report.lines)

    def test_incomplete_records_are_not_parse_errors(self) -> None:
        write_json(self.root / "people" / "century-4" / "nameless.json", {"id": "nameless"})
        report = duplicates.run(self.settings)
        self.assertTrue(report.ok)
        self.assertIn("People checked: 4", report.lines)

    def test_finds_duplicates_in_nested_folders(self) -> None:
        write_json(
            self.root / "people" / "century-16" / "drafts" / "xavier.json",
            {"id": "francis-xavier", "name": "Francis Xavier"},
        )
        report = duplicates.run(self.settings)
        joined = "\n".join(report.lines)
        self.assertFalse(report.ok)
        self.assertIn("Duplicate people ids: ERROR (1)", joined)
        self.assertIn("File: people/century-16/drafts/xavier.json", joined)


class TestBasilicasCommand(CatalogTestCase):
    def test_valid_file(self) -> None:
        report = basilicas.run(self.settings)
        self.assertTrue(report.ok)
        self.assertIn("Basilicas: OK (all basilicas are valid)", report.lines)

    def test_reports_every_problem(self) -> None:
        write_json(
            self.root / "basilicas.json",
            [
                {"id": "st-peters-basilica", "name": "St. Peter's Basilica", "placeId": "rome", "type": "major-basilica"},
                {"id": "st-peters-basilica", "name": "Duplicate", "placeId": "atlantis", "type": "minor-basilica"},
                {"id": "nameless", "placeId": "rome", "type": "historic-basilica"},
            ],
        )
        report = basilicas.run(self.settings)
        self.assertFalse(report.ok)
        self.assertIn("Duplicate ids: 1", report.lines)
        self.assertIn("Missing required fields: 1", report.lines)
        self.assertIn("Invalid types: 1", report.lines)
        self.assertIn("Invalid/missing placeIds: 1", report.lines)


class TestRelocateCommand(CatalogTestCase):
    def test_nothing_to_move(self) -> None:
        report = relocate.run(self.settings, "people")
        self.assertTrue(report.ok)
        self.assertEqual(len(report.lines), 1)

    def test_dry_run_leaves_files(self) -> None:
        misplaced = self.move("people/century-4/athanasius.json", "century-5")
        report = relocate.run(self.settings, "people", dry_run=True)
        self.assertTrue(misplaced.exists())
        self.assertIn("[dry-run] Would move", "\n".join(report.lines))

    def test_moves_to_expected_century(self) -> None:
        misplaced = self.move("people/century-4/athanasius.json", "century-5")
        report = relocate.run(self.settings, "people")
        self.assertTrue(report.ok)
        self.assertFalse(misplaced.exists())
        self.assertTrue((self.root / "people" / "century-4" / "athanasius.json").exists())
        self.assertTrue(placement.run(self.settings, "people").ok)

    def test_creates_missing_century_folder(self) -> None:
        write_json(
            self.root / "people" / "century-16" / "augustine.json",
            {"id": "augustine", "name": "Augustine of Hippo", "deathYear": 430},
        )
        relocate.run(self.settings, "people")
        self.assertTrue((self.root / "people" / "century-5" / "augustine.json").exists())

    def test_existing_target_is_not_overwritten(self) -> None:
        write_json(
            self.root / "people" / "century-5" / "athanasius.json",
            {"id": "athanasius-copy", "name": "Copy", "deathYear": 373},
        )
        report = relocate.run(self.settings, "people")
        self.assertFalse(report.ok)
        self.assertIn("target exists", "\n".join(report.lines))
        self.assertTrue((self.root / "people" / "century-5" / "athanasius.json").exists())

    def test_moves_into_century_before_common_era(self) -> None:
        write_json(
            self.root / "people" / "century-1" / "judas-maccabeus.json",
            {"id": "judas-maccabeus", "name": "Judas Maccabeus", "deathYear": -160},
        )
        report = relocate.run(self.settings, "people")
        self.assertIn("century-1 -> century--1", "\n".join(report.lines))
        self.assertTrue((self.root / "people" / "century--1" / "judas-maccabeus.json").exists())

        corpus, result = placement.check(self.settings, "people")
        self.assertIn("judas-maccabeus", [p.id for p in corpus.entities])
        self.assertEqual(len(corpus), 4)
        self.assertTrue(result.ok)


class TestCli(CatalogTestCase):
    def setUp(self) -> None:
        super().setUp()
        root_logger = logging.getLogger()
        self._handlers = list(root_logger.handlers)
        self._level = root_logger.level

    def tearDown(self) -> None:
        root_logger = logging.getLogger()
        root_logger.handlers[:] = self._handlers
        root_logger.setLevel(self._level)
        super().tearDown()

    def run_cli(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        code = 0
        with redirect_stdout(out):
            try:
                cli.main(["--data-root", str(self.root), *argv])
            except SystemExit as exc:
                code = exc.code if isinstance(exc.code, int) else 1
        return code, out.getvalue()

    def test_placement_exit_codes(self) -> None:
        code, _ = self.run_cli("placement")
        self.assertEqual(code, 0)

        self.move("people/century-4/athanasius.json", "century-5")
        code, output = self.run_cli("placement")
        self.assertEqual(code, 1)
        self.assertIn("Expected: century-4", output)

    def test_warnings_alone_exit_zero(self) -> None:
        write_json(self.root / "people" / "century-1" / "anon.json", {"id": "anon", "name": "Anonymous"})
        code, output = self.run_cli("placement")
        self.assertEqual(code, 0)
        self.assertIn("Missing deathYear: WARNING (1)", output)

    def test_exists_exit_codes(self) -> None:
        code, _ = self.run_cli("exists", "people", "Thomas Aquinas")
        self.assertEqual(code, 0)
        code, output = self.run_cli("exists", "councils", "Council of Trent")
        self.assertEqual(code, 1)
        self.assertIn("exact match", output)

    def test_missing_data_root(self) -> None:
        code, _ = self.run_cli("--data-root", str(self.root / "missing"), "duplicates")
        self.assertEqual(code, 1)

    def test_fix_placement(self) -> None:
        self.move("people/century-4/athanasius.json", "century-5")
        code, output = self.run_cli("fix-placement", "--collection", "people")
        self.assertEqual(code, 0)
        self.assertIn("1 of 1 file(s) moved", output)

    def test_fix_placement_blocked_move_exits_one(self) -> None:
        write_json(
            self.root / "people" / "century-5" / "athanasius.json",
            {"id": "athanasius-copy", "name": "Copy", "deathYear": 373},
        )
        code, output = self.run_cli("fix-placement")
        self.assertEqual(code, 1)
        self.assertIn("target exists", output)
        self.assertIn("0 of 1 file(s) moved", output)


if __name__ == "__main__":
    unittest.main()
