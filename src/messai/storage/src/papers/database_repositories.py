"""
Database repositories for research papers.
"""

import json
import sqlite3
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MODEL_VERSION
from ....core.logging import get_logger
from ....features.extraction.exceptions import PaperNotFoundError, PersistenceError
from .initialize_database import JSON_COLUMNS

logger = get_logger(__name__)

PAPER_COLUMNS = (
    "id", "title", "abstract", "authors", "journal", "publication_date", "doi",
    "pubmed_id", "arxiv_id", "external_url", "keywords", "source", "system_type",
    "organism_types", "anode_materials", "cathode_materials", "power_output",
    "efficiency", "experimental_conditions", "reactor_configuration",
    "electrode_specifications", "biological_parameters", "performance_metrics",
    "operational_parameters", "electrochemical_data", "ai_data_extraction",
    "validation_result", "relevance_score", "quality_score", "ai_model_version",
    "ai_processing_date", "ai_confidence", "created_at", "updated_at",
)

# Columns written by save_extraction from the flattened extraction result
EXTRACTION_COLUMNS = (
    "experimental_conditions", "reactor_configuration", "electrode_specifications",
    "biological_parameters", "performance_metrics", "operational_parameters",
    "electrochemical_data", "power_output", "efficiency", "system_type",
    "organism_types", "anode_materials", "cathode_materials",
)

CATEGORY_COLUMNS = EXTRACTION_COLUMNS[:7]


def load_json_column(value: Any) -> Any:
    """Decode a JSON text column, returning None for empty or malformed values."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed JSON column value: {value[:80]!r}")
        return None


def _encode(column: str, value: Any) -> Any:
    if column in JSON_COLUMNS and value is not None and not isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return value


class BaseRepository:
    """Base repository class handling database connection."""

    def __init__(self, db_connection: sqlite3.Connection):
        self.db = db_connection

    def cursor(self):
        return self.db.cursor()

    def commit(self):
        self.db.commit()


class PaperRepository(BaseRepository):
    """Repository for research paper operations."""

    def create_paper(self, paper: Dict[str, Any]) -> str:
        """
        Create a new paper.

        Args:
            paper: Column values; list and dict values for JSON columns are encoded

        Returns:
            The new paper id
        """
        unknown = set(paper) - set(PAPER_COLUMNS)
        if unknown:
            raise PersistenceError("Unknown paper columns", {"columns": sorted(unknown)})
        if not paper.get("title"):
            raise PersistenceError("Paper title is required")

        record = {column: _encode(column, value) for column, value in paper.items()}
        record.setdefault("id", str(uuid.uuid4()))
        now = datetime.utcnow().isoformat()
        record.setdefault("created_at", now)
        record.setdefault("updated_at", now)

        columns = list(record)
        placeholders = ", ".join("?" for _ in columns)
        cursor = self.cursor()
        try:
            cursor.execute(
                f'INSERT INTO research_papers ({", ".join(columns)}) VALUES ({placeholders})',
                [record[column] for column in columns],
            )
        except sqlite3.IntegrityError as e:
            raise PersistenceError(f"Could not create paper: {e}", {"doi": record.get("doi")}) from e
        self.commit()
        return record["id"]

    def get_paper(self, paper_id: str) -> Optional[Dict[str, Any]]:
        """Get paper by ID."""
        cursor = self.cursor()
        cursor.execute('SELECT * FROM research_papers WHERE id = ?', (paper_id,))
        row = cursor.fetchone()
        return dict(row) if row else None

    def require_paper(self, paper_id: str) -> Dict[str, Any]:
        paper = self.get_paper(paper_id)
        if paper is None:
            raise PaperNotFoundError(paper_id)
        return paper

    def list_papers(self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0,
                    search: Optional[str] = None) -> List[Dict[str, Any]]:
        """List papers newest first, optionally filtered by title or abstract text."""
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        cursor = self.cursor()
        if search:
            pattern = f"%{search}%"
            cursor.execute('''
                SELECT * FROM research_papers
                WHERE title LIKE ? OR abstract LIKE ?
                ORDER BY created_at DESC, id LIMIT ? OFFSET ?
            ''', (pattern, pattern, limit, max(0, offset)))
        else:
            cursor.execute('SELECT * FROM research_papers ORDER BY created_at DESC, id LIMIT ? OFFSET ?',
                           (limit, max(0, offset)))
        rows = cursor.fetchall()
        return [dict(row) for row in rows] if rows else []

    def get_all_papers(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Get papers in insertion order, optionally capped."""
        cursor = self.cursor()
        if limit is None:
            cursor.execute('SELECT * FROM research_papers ORDER BY created_at, rowid')
        else:
            cursor.execute('SELECT * FROM research_papers ORDER BY created_at, rowid LIMIT ?', (limit,))
        rows = cursor.fetchall()
        return [dict(row) for row in rows] if rows else []

    def get_unprocessed_papers(self, limit: int, model_version: str = MODEL_VERSION,
                               reprocess: bool = False) -> List[Dict[str, Any]]:
        """Papers never extracted, or extracted by a different model version."""
        if reprocess:
            return self.get_all_papers(limit)
        cursor = self.cursor()
        cursor.execute('''
            SELECT * FROM research_papers
            WHERE ai_data_extraction IS NULL
               OR ai_model_version IS NULL
               OR ai_model_version != ?
            ORDER BY created_at, rowid LIMIT ?
        ''', (model_version, limit))
        rows = cursor.fetchall()
        return [dict(row) for row in rows] if rows else []

    def get_extracted_papers(self, limit: int) -> List[Dict[str, Any]]:
        cursor = self.cursor()
        cursor.execute('''
            SELECT * FROM research_papers
            WHERE ai_data_extraction IS NOT NULL
            ORDER BY created_at, rowid LIMIT ?
        ''', (limit,))
        rows = cursor.fetchall()
        return [dict(row) for row in rows] if rows else []

    def _update(self, paper_id: str, values: Dict[str, Any]):
        values = {column: _encode(column, value) for column, value in values.items()}
        values["updated_at"] = datetime.utcnow().isoformat()
        assignments = ", ".join(f"{column} = ?" for column in values)
        cursor = self.cursor()
        cursor.execute(f'UPDATE research_papers SET {assignments} WHERE id = ?',
                       list(values.values()) + [paper_id])
        if cursor.rowcount == 0:
            raise PaperNotFoundError(paper_id)
        self.commit()

    def save_extraction(self, paper_id: str, columns: Dict[str, Any], extraction: Dict[str, Any],
                        confidence: float, model_version: str = MODEL_VERSION):
        """
        Store an extraction result.

        Args:
            paper_id: Paper to update
            columns: Flattened storage columns; category columns set to None are cleared
            extraction: Full extraction result, stored in ai_data_extraction
            confidence: Confidence for ai_confidence
            model_version: Tag for ai_model_version
        """
        unknown = set(columns) - set(EXTRACTION_COLUMNS)
        if unknown:
            raise PersistenceError("Unknown extraction columns", {"columns": sorted(unknown)})

        values = dict(columns)
        values.update({
            "ai_data_extraction": extraction,
            "ai_confidence": confidence,
            "ai_model_version": model_version,
            "ai_processing_date": datetime.utcnow().isoformat(),
        })
        self._update(paper_id, values)

    def save_validation(self, paper_id: str, result: Dict[str, Any]):
        self._update(paper_id, {"validation_result": result})

    def save_relevance(self, paper_id: str, score: Dict[str, Any]):
        self._update(paper_id, {"relevance_score": score})

    def save_quality(self, paper_id: str, score: Dict[str, Any]):
        self._update(paper_id, {"quality_score": score})

    def delete_paper(self, paper_id: str):
        """Delete a paper."""
        cursor = self.cursor()
        cursor.execute('DELETE FROM research_papers WHERE id = ?', (paper_id,))
        if cursor.rowcount == 0:
            raise PaperNotFoundError(paper_id)
        self.commit()

    def count_papers(self) -> int:
        cursor = self.cursor()
        cursor.execute('SELECT COUNT(*) FROM research_papers')
        return cursor.fetchone()[0]

    def count_processed(self, model_version: Optional[str] = None) -> int:
        cursor = self.cursor()
        if model_version is None:
            cursor.execute('SELECT COUNT(*) FROM research_papers WHERE ai_data_extraction IS NOT NULL')
        else:
            cursor.execute('SELECT COUNT(*) FROM research_papers WHERE ai_model_version = ?', (model_version,))
        return cursor.fetchone()[0]

    def count_with_category(self, column: str) -> int:
        """Count papers with a value in one of the extraction category columns."""
        if column not in CATEGORY_COLUMNS:
            raise PersistenceError(f"Not a category column: {column}", {"allowed": list(CATEGORY_COLUMNS)})
        cursor = self.cursor()
        cursor.execute(f'SELECT COUNT(*) FROM research_papers WHERE {column} IS NOT NULL')
        return cursor.fetchone()[0]
