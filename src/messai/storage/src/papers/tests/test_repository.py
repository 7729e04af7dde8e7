import json
import os
import tempfile
import unittest

from messai.features.extraction.exceptions import PaperNotFoundError, PersistenceError
from messai.storage.src.database import get_db_connection
from messai.storage.src.papers.database_repositories import PaperRepository, load_json_column
from messai.storage.src.papers.initialize_database import setup_database


class TestPaperRepository(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.conn = get_db_connection(os.path.join(self.tmpdir.name, "papers.db"))
        setup_database(self.conn)
        self.repo = PaperRepository(self.conn)

    def tearDown(self):
        self.conn.close()
        self.tmpdir.cleanup()

    def test_create_and_get(self):
        paper_id = self.repo.create_paper({
            "title": "Microbial fuel cell study",
            "authors": ["A. Researcher"],
            "doi": "10.1/abc",
        })
        paper = self.repo.get_paper(paper_id)

        self.assertEqual(paper["title"], "Microbial fuel cell study")
        self.assertEqual(json.loads(paper["authors"]), ["A. Researcher"])
        self.assertEqual(paper["source"], "user")
        self.assertIsNone(self.repo.get_paper("missing"))

    def test_create_rejects_bad_input(self):
        with self.assertRaises(PersistenceError):
            self.repo.create_paper({"title": "x", "colour": "blue"})
        with self.assertRaises(PersistenceError):
            self.repo.create_paper({"abstract": "no title"})

        self.repo.create_paper({"title": "first", "doi": "10.1/dup"})
        with self.assertRaises(PersistenceError):
            self.repo.create_paper({"title": "second", "doi": "10.1/dup"})

    def test_list_and_search(self):
        for i in range(3):
            self.repo.create_paper({"title": f"Paper {i}", "abstract": "biofilm" if i == 1 else "other"})

        self.assertEqual(len(self.repo.list_papers(limit=2)), 2)
        found = self.repo.list_papers(search="biofilm")
        self.assertEqual([p["title"] for p in found], ["Paper 1"])
        self.assertEqual(self.repo.count_papers(), 3)

    def test_unprocessed_and_save_extraction(self):
        first = self.repo.create_paper({"title": "first"})
        second = self.repo.create_paper({"title": "second"})

        self.repo.save_extraction(
            first,
            {"performance_metrics": '{"powerDensity": {"value": 10.0, "unit": "mW/m²"}}', "power_output": 10.0},
            {"performanceMetrics": {"powerDensity": {"value": 10.0, "unit": "mW/m²"}}},
            confidence=0.7,
        )

        pending = self.repo.get_unprocessed_papers(limit=10)
        self.assertEqual([p["id"] for p in pending], [second])
        self.assertEqual(len(self.repo.get_unprocessed_papers(limit=10, reprocess=True)), 2)
        self.assertEqual(len(self.repo.get_unprocessed_papers(limit=10, model_version="other")), 2)

        stored = self.repo.get_paper(first)
        self.assertEqual(stored["power_output"], 10.0)
        self.assertEqual(stored["ai_confidence"], 0.7)
        self.assertEqual(stored["ai_model_version"], "pattern-matching-v3")
        self.assertEqual(load_json_column(stored["ai_data_extraction"])["performanceMetrics"]["powerDensity"]["value"],
                         10.0)
        self.assertEqual(self.repo.count_with_category("performance_metrics"), 1)
        self.assertEqual(self.repo.count_processed(), 1)
        self.assertEqual([p["id"] for p in self.repo.get_extracted_papers(10)], [first])

    def test_save_scores(self):
        paper_id = self.repo.create_paper({"title": "x"})
        self.repo.save_validation(paper_id, {"is_valid": True})
        self.repo.save_relevance(paper_id, {"overall": 42.0})
        self.repo.save_quality(paper_id, {"overall": 80.0})

        stored = self.repo.get_paper(paper_id)
        self.assertEqual(load_json_column(stored["validation_result"]), {"is_valid": True})
        self.assertEqual(load_json_column(stored["relevance_score"])["overall"], 42.0)
        self.assertEqual(load_json_column(stored["quality_score"])["overall"], 80.0)

    def test_missing_paper_errors(self):
        with self.assertRaises(PaperNotFoundError):
            self.repo.save_quality("missing", {})
        with self.assertRaises(PaperNotFoundError):
            self.repo.delete_paper("missing")
        with self.assertRaises(PaperNotFoundError):
            self.repo.require_paper("missing")

    def test_delete(self):
        paper_id = self.repo.create_paper({"title": "x"})
        self.repo.delete_paper(paper_id)
        self.assertIsNone(self.repo.get_paper(paper_id))

    def test_count_with_category_rejects_other_columns(self):
        with self.assertRaises(PersistenceError):
            self.repo.count_with_category("title; DROP TABLE research_papers")

    def test_extraction_columns_checked(self):
        paper_id = self.repo.create_paper({"title": "x"})
        with self.assertRaises(PersistenceError):
            self.repo.save_extraction(paper_id, {"title": "changed"}, {}, confidence=0.5)


class TestLoadJsonColumn(unittest.TestCase):

    def test_tolerant_decoding(self):
        self.assertEqual(load_json_column('{"a": 1}'), {"a": 1})
        self.assertIsNone(load_json_column("{not json"))
        self.assertIsNone(load_json_column(None))
        self.assertIsNone(load_json_column(""))


if __name__ == '__main__':
    unittest.main()
