"""
Batch runner for extraction, validation, relevance and quality scoring.

Each run reads papers through a PaperRepository, processes them one at a
time and writes the results back. A failure on one paper is logged and
counted and the run moves on to the next paper.
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ...core.logging import get_logger
from ...storage.src.papers.database_repositories import CATEGORY_COLUMNS, PaperRepository, load_json_column
from ..extraction.models import ExtractedParameterSet
from ..extraction.paper_extractor import ParameterExtractor, extraction_confidence, flatten_for_storage
from ..paperqual.duplicates import DuplicateGroup, find_duplicates
from ..paperqual.quality import score_paper_quality
from ..paperqual.relevance import Recommendation, score_relevance
from ..paperqual.validation import ParameterValidator
from .config import PipelineConfig

logger = get_logger(__name__)


@dataclass
class BatchSummary:
    """Counts and timing for one batch run."""
    operation: str
    processed: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    elapsed_seconds: float = 0.0
    dry_run: bool = False
    counts: Dict[str, int] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def count(self, name: str, amount: int = 1):
        self.counts[name] = self.counts.get(name, 0) + amount

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _terms(value: Any) -> Any:
    """Stored keyword and organism columns may be JSON lists or plain text."""
    loaded = load_json_column(value)
    if isinstance(loaded, (list, str)):
        return loaded
    return value if isinstance(value, str) else None


class BatchRunner:
    """
    Runs the batch operations against a paper repository.
    """

    def __init__(self, repository: PaperRepository, config: Optional[PipelineConfig] = None):
        self.repository = repository
        self.config = config or PipelineConfig()
        self.extractor = ParameterExtractor(self.config.extraction)
        self.validator = ParameterValidator(self.config.validation)

    def _limit(self, limit: Optional[int]) -> int:
        return limit if limit is not None else self.config.batch_limit

    def _pause(self, index: int, total: int):
        if self.config.delay_seconds > 0 and index < total - 1:
            time.sleep(self.config.delay_seconds)

    def _fail(self, summary: BatchSummary, paper: Dict[str, Any], error: Exception):
        logger.error(f"{summary.operation} failed for paper {paper.get('id')}: {error}")
        summary.failed += 1
        summary.errors.append(f"{paper.get('id')}: {error}")

    def run_extraction(self, limit: Optional[int] = None, reprocess: bool = False,
                       dry_run: bool = False) -> BatchSummary:
        """
        Extract parameters for papers not yet processed by the current model version.

        Args:
            limit: Maximum papers to process
            reprocess: Include papers that were already processed
            dry_run: Extract without writing results

        Returns:
            BatchSummary for the run
        """
        summary = BatchSummary(operation="extraction", dry_run=dry_run)
        start = time.monotonic()
        model_version = self.config.extraction.model_version
        papers = self.repository.get_unprocessed_papers(self._limit(limit), model_version, reprocess)
        logger.info(f"Found {len(papers)} papers for extraction")

        for index, paper in enumerate(papers):
            summary.processed += 1
            try:
                result = self.extractor.extract(paper.get("title"), paper.get("abstract"))
                confidence = extraction_confidence(result)
                for category in result.populated_categories():
                    summary.count(category)
                if result.is_empty():
                    summary.count("empty")

                if not dry_run:
                    self.repository.save_extraction(
                        paper["id"],
                        flatten_for_storage(result),
                        result.to_dict(),
                        confidence,
                        model_version,
                    )
                summary.succeeded += 1
                logger.info(f"Extracted {len(result.populated_categories())} categories "
                            f"from '{(paper.get('title') or '')[:60]}' (confidence {confidence:.0%})")
            except Exception as e:
                self._fail(summary, paper, e)
            self._pause(index, len(papers))

        summary.elapsed_seconds = time.monotonic() - start
        return summary

    def run_validation(self, limit: Optional[int] = None) -> BatchSummary:
        """Validate stored extraction results and save the validation report."""
        summary = BatchSummary(operation="validation")
        start = time.monotonic()
        papers = self.repository.get_extracted_papers(self._limit(limit))
        logger.info(f"Validating {len(papers)} papers")

        for index, paper in enumerate(papers):
            summary.processed += 1
            try:
                data = load_json_column(paper.get("ai_data_extraction"))
                if not isinstance(data, dict):
                    summary.skipped += 1
                    continue
                result = self.validator.validate(data)
                self.repository.save_validation(paper["id"], result.to_dict())
                summary.count("valid" if result.is_valid else "invalid")
                summary.count("critical", result.critical_count)
                summary.count("violations", len(result.violations))
                summary.count("warnings", len(result.warnings))
                summary.succeeded += 1
            except Exception as e:
                self._fail(summary, paper, e)
            self._pause(index, len(papers))

        summary.elapsed_seconds = time.monotonic() - start
        return summary

    def run_relevance(self, limit: Optional[int] = None, apply: bool = False,
                      remove: bool = False) -> BatchSummary:
        """
        Score every paper for microbial relevance.

        Args:
            limit: Maximum papers to score
            apply: Save each score to the paper
            remove: Delete papers whose recommendation is 'remove'

        Returns:
            BatchSummary with keep/remove/review and category counts
        """
        summary = BatchSummary(operation="relevance", dry_run=not (apply or remove))
        start = time.monotonic()
        papers = self.repository.get_all_papers(self._limit(limit))
        logger.info(f"Analyzing {len(papers)} papers for microbial relevance")

        for index, paper in enumerate(papers):
            summary.processed += 1
            try:
                score = score_relevance(
                    paper.get("title"),
                    paper.get("abstract"),
                    _terms(paper.get("keywords")),
                    _terms(paper.get("organism_types")),
                    paper.get("system_type"),
                    config=self.config.relevance,
                )
                summary.count(score.recommendation.value)
                for name, flag in score.categories.items():
                    if flag:
                        summary.count(name)

                if remove and score.recommendation is Recommendation.REMOVE:
                    self.repository.delete_paper(paper["id"])
                    summary.count("deleted")
                elif apply:
                    self.repository.save_relevance(paper["id"], score.to_dict())
                summary.succeeded += 1
            except Exception as e:
                self._fail(summary, paper, e)
            self._pause(index, len(papers))

        summary.elapsed_seconds = time.monotonic() - start
        return summary

    def run_quality(self, limit: Optional[int] = None, reference_year: Optional[int] = None) -> BatchSummary:
        """Score bibliographic quality and save it for each paper."""
        summary = BatchSummary(operation="quality")
        start = time.monotonic()
        papers = self.repository.get_all_papers(self._limit(limit))
        logger.info(f"Scoring quality for {len(papers)} papers")

        for index, paper in enumerate(papers):
            summary.processed += 1
            try:
                stored = load_json_column(paper.get("ai_data_extraction"))
                extracted = ExtractedParameterSet.from_dict(stored) if isinstance(stored, dict) else None
                score = score_paper_quality(paper, extracted, reference_year, self.config.quality)
                self.repository.save_quality(paper["id"], score.to_dict())
                summary.count(score.grade)
                if score.needs_enhancement:
                    summary.count("needsEnhancement")
                summary.succeeded += 1
            except Exception as e:
                self._fail(summary, paper, e)
            self._pause(index, len(papers))

        summary.elapsed_seconds = time.monotonic() - start
        return summary

    def find_duplicate_papers(self) -> List[DuplicateGroup]:
        return find_duplicates(self.repository.get_all_papers())

    def extraction_stats(self) -> Dict[str, Any]:
        """Counts of processed papers and of papers carrying each category."""
        total = self.repository.count_papers()
        processed = self.repository.count_processed()
        categories = {column: self.repository.count_with_category(column) for column in CATEGORY_COLUMNS}
        return {
            "total_papers": total,
            "processed": processed,
            "current_version": self.repository.count_processed(self.config.extraction.model_version),
            "model_version": self.config.extraction.model_version,
            "coverage": round(processed / total * 100, 1) if total else 0.0,
            "categories": categories,
        }
