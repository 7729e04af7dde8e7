import json
import os
import tempfile
import unittest
from unittest import mock

from messai.features.extraction.exceptions import ConfigurationError
from messai.features.pipeline.config import PipelineConfig
from messai.features.pipeline.runner import BatchRunner
from messai.storage.src.database import get_db_connection
from messai.storage.src.papers.database_repositories import PaperRepository, load_json_column
from messai.storage.src.papers.initialize_database import setup_database

EXAMPLE = ("Power density of 1500 mW/m² was achieved at pH 7.0 and 30°C using "
           "Geobacter sulfurreducens on carbon cloth anodes.")


class FailingRepository(PaperRepository):
    """Raises while saving papers titled 'boom'."""

    def save_extraction(self, paper_id, columns, extraction, confidence, model_version="x"):
        if self.get_paper(paper_id)["title"] == "boom":
            raise RuntimeError("disk full")
        super().save_extraction(paper_id, columns, extraction, confidence, model_version)


class RunnerTestCase(unittest.TestCase):
    repository_class = PaperRepository

    def setUp(self):
        self.conn = get_db_connection(":memory:")
        setup_database(self.conn)
        self.repo = self.repository_class(self.conn)

    def tearDown(self):
        self.conn.close()


class TestRunExtraction(RunnerTestCase):

    def setUp(self):
        super().setUp()
        self.rich = self.repo.create_paper({"title": "Microbial fuel cell study", "abstract": EXAMPLE})
        self.empty = self.repo.create_paper({"title": "Unrelated topic about birds"})
        self.runner = BatchRunner(self.repo)

    def test_extracts_and_stores(self):
        summary = self.runner.run_extraction()

        self.assertEqual((summary.processed, summary.succeeded, summary.failed), (2, 2, 0))
        self.assertEqual(summary.counts["empty"], 1)
        self.assertEqual(summary.counts["performanceMetrics"], 1)

        paper = self.repo.get_paper(self.rich)
        self.assertEqual(paper["power_output"], 1500.0)
        self.assertEqual(paper["ai_model_version"], "pattern-matching-v3")
        self.assertEqual(paper["ai_confidence"], 0.7)
        self.assertEqual(json.loads(paper["organism_types"]), ["Geobacter sulfurreducens"])
        stored = load_json_column(paper["ai_data_extraction"])
        self.assertEqual(stored["performanceMetrics"]["powerDensity"], {"value": 1500.0, "unit": "mW/m²"})

        self.assertEqual(self.runner.run_extraction().processed, 0)
        self.assertEqual(self.runner.run_extraction(reprocess=True).processed, 2)

    def test_reprocessing_clears_values_no_longer_found(self):
        self.runner.run_extraction()
        self.conn.execute("UPDATE research_papers SET abstract = ? WHERE id = ?",
                          ("Operated at pH 6.8 with a mixed culture.", self.rich))
        self.conn.commit()

        self.runner.run_extraction(reprocess=True)

        paper = self.repo.get_paper(self.rich)
        self.assertIsNone(paper["performance_metrics"])
        self.assertIsNone(paper["power_output"])
        self.assertIsNone(paper["anode_materials"])
        self.assertEqual(json.loads(paper["organism_types"]), ["mixed culture"])
        self.assertEqual(json.loads(paper["experimental_conditions"])["pH"], 6.8)

    def test_dry_run_writes_nothing(self):
        summary = self.runner.run_extraction(dry_run=True)
        self.assertTrue(summary.dry_run)
        self.assertEqual(summary.succeeded, 2)
        self.assertIsNone(self.repo.get_paper(self.rich)["ai_data_extraction"])

    def test_limit(self):
        self.assertEqual(self.runner.run_extraction(limit=1).processed, 1)

    def test_stats(self):
        self.runner.run_extraction()
        stats = self.runner.extraction_stats()
        self.assertEqual(stats["total_papers"], 2)
        self.assertEqual(stats["processed"], 2)
        self.assertEqual(stats["current_version"], 2)
        self.assertEqual(stats["coverage"], 100.0)
        self.assertEqual(stats["categories"]["performance_metrics"], 1)
        self.assertEqual(stats["categories"]["electrochemical_data"], 0)


class TestFailuresAreCounted(RunnerTestCase):
    repository_class = FailingRepository

    def test_failure_does_not_abort_batch(self):
        self.repo.create_paper({"title": "boom", "abstract": EXAMPLE})
        ok = self.repo.create_paper({"title": "fine", "abstract": EXAMPLE})

        summary = BatchRunner(self.repo).run_extraction()

        self.assertEqual((summary.processed, summary.succeeded, summary.failed), (2, 1, 1))
        self.assertIn("disk full", summary.errors[0])
        self.assertIsNotNone(self.repo.get_paper(ok)["ai_data_extraction"])


class TestRunValidation(RunnerTestCase):

    def test_validates_stored_extractions(self):
        paper_id = self.repo.create_paper({"title": "MFC", "abstract": EXAMPLE})
        broken = self.repo.create_paper({"title": "broken"})
        runner = BatchRunner(self.repo)
        runner.run_extraction()
        self.conn.execute("UPDATE research_papers SET ai_data_extraction = '{bad' WHERE id = ?", (broken,))

        summary = runner.run_validation()

        self.assertEqual((summary.processed, summary.succeeded, summary.skipped), (2, 1, 1))
        self.assertEqual(summary.counts["valid"], 1)
        self.assertEqual(summary.counts["critical"], 0)
        result = load_json_column(self.repo.get_paper(paper_id)["validation_result"])
        self.assertTrue(result["is_valid"])
        self.assertEqual(len(result["warnings"]), 2)


class TestRunRelevance(RunnerTestCase):

    def setUp(self):
        super().setUp()
        self.keep = self.repo.create_paper({
            "title": "Microbial fuel cell with Geobacter biofilm",
            "keywords": ["bioelectrochemical"],
        })
        self.remove = self.repo.create_paper({"title": "Silicon solar panel efficiency"})
        self.runner = BatchRunner(self.repo)

    def test_report_only_by_default(self):
        summary = self.runner.run_relevance()
        self.assertTrue(summary.dry_run)
        self.assertEqual(summary.counts["keep"], 1)
        self.assertEqual(summary.counts["remove"], 1)
        self.assertEqual(summary.counts["isPurelyNonBiological"], 1)
        self.assertIsNone(self.repo.get_paper(self.keep)["relevance_score"])

    def test_apply_saves_scores(self):
        self.runner.run_relevance(apply=True)
        stored = load_json_column(self.repo.get_paper(self.keep)["relevance_score"])
        self.assertEqual(stored["recommendation"], "keep")
        self.assertEqual(stored["breakdown"]["systemRelevance"], 50.0)

    def test_remove_deletes_flagged_papers(self):
        summary = self.runner.run_relevance(remove=True)
        self.assertEqual(summary.counts["deleted"], 1)
        self.assertIsNone(self.repo.get_paper(self.remove))
        self.assertIsNotNone(self.repo.get_paper(self.keep))


class TestRunQualityAndDuplicates(RunnerTestCase):

    def test_quality_saved(self):
        paper_id = self.repo.create_paper({"title": "Untitled note"})
        summary = BatchRunner(self.repo).run_quality(reference_year=2024)

        self.assertEqual(summary.succeeded, 1)
        self.assertEqual(summary.counts["poor"], 1)
        self.assertEqual(summary.counts["needsEnhancement"], 1)
        stored = load_json_column(self.repo.get_paper(paper_id)["quality_score"])
        self.assertEqual(stored["grade"], "poor")

    def test_duplicates(self):
        first = self.repo.create_paper({"title": "Power from microbes"})
        second = self.repo.create_paper({"title": "POWER FROM MICROBES."})
        groups = BatchRunner(self.repo).find_duplicate_papers()
        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0].paper_ids, [first, second])

    def test_delay_between_papers(self):
        self.repo.create_paper({"title": "a"})
        self.repo.create_paper({"title": "b"})
        config = PipelineConfig(delay_seconds=0.01)
        summary = BatchRunner(self.repo, config).run_quality(reference_year=2024)
        self.assertGreaterEqual(summary.elapsed_seconds, 0.01)


class TestPipelineConfig(unittest.TestCase):

    def test_from_dict(self):
        config = PipelineConfig.from_dict({"relevance": {"keep_threshold": 40}, "batch_limit": 5})
        self.assertEqual(config.relevance.keep_threshold, 40)
        self.assertEqual(config.batch_limit, 5)
        self.assertEqual(config.validation.ohms_law_tolerance, 0.3)

    def test_invalid_values_raise_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            PipelineConfig.from_dict({"batch_limit": 0})
        with self.assertRaises(ConfigurationError):
            PipelineConfig.from_dict({"extraction": {"enabled_categories": ["weather"]}})

    def test_from_json_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"delay_seconds": 0.5}, f)
            self.assertEqual(PipelineConfig.from_json_file(path).delay_seconds, 0.5)

            with open(path, "w", encoding="utf-8") as f:
                f.write("[1, 2]")
            with self.assertRaises(ConfigurationError):
                PipelineConfig.from_json_file(path)

    def test_delay_defaults_to_environment(self):
        with mock.patch.dict(os.environ, {"MESSAI_DELAY_SECONDS": "0.25"}):
            self.assertEqual(PipelineConfig().delay_seconds, 0.25)
        with mock.patch.dict(os.environ, {"MESSAI_DELAY_SECONDS": "soon"}):
            self.assertEqual(PipelineConfig().delay_seconds, 0.0)
        with mock.patch.dict(os.environ, {"MESSAI_DELAY_SECONDS": "0.25"}):
            self.assertEqual(PipelineConfig(delay_seconds=0).delay_seconds, 0.0)

        with self.assertRaises(ConfigurationError):
            PipelineConfig.from_json_file("/nonexistent/config.json")


if __name__ == '__main__':
    unittest.main()
