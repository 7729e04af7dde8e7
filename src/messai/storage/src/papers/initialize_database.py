"""
Database initialization utilities.
"""

import sqlite3
from typing import Optional

from ..database import get_db_connection
from ....core.logging import get_logger

logger = get_logger(__name__)

# JSON text columns, one per extraction category plus the scoring results
JSON_COLUMNS = (
    "keywords",
    "authors",
    "organism_types",
    "anode_materials",
    "cathode_materials",
    "experimental_conditions",
    "reactor_configuration",
    "electrode_specifications",
    "biological_parameters",
    "performance_metrics",
    "operational_parameters",
    "electrochemical_data",
    "ai_data_extraction",
    "validation_result",
    "relevance_score",
    "quality_score",
)


def setup_database(conn: Optional[sqlite3.Connection] = None) -> None:
    """
    Initialize the database with all required tables.

    Args:
        conn: Open connection to use; a new connection is opened and closed
            when omitted
    """
    owns_connection = conn is None
    try:
        if owns_connection:
            conn = get_db_connection()
        cursor = conn.cursor()

        # Create research_papers table
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS research_papers (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                abstract TEXT,
                authors TEXT,
                journal TEXT,
                publication_date TEXT,
                doi TEXT,
                pubmed_id TEXT,
                arxiv_id TEXT,
                external_url TEXT,
                keywords TEXT,
                source TEXT DEFAULT 'user',
                system_type TEXT,
                organism_types TEXT,
                anode_materials TEXT,
                cathode_materials TEXT,
                power_output REAL,
                efficiency REAL,
                experimental_conditions TEXT,
                reactor_configuration TEXT,
                electrode_specifications TEXT,
                biological_parameters TEXT,
                performance_metrics TEXT,
                operational_parameters TEXT,
                electrochemical_data TEXT,
                ai_data_extraction TEXT,
                validation_result TEXT,
                relevance_score TEXT,
                quality_score TEXT,
                ai_model_version TEXT,
                ai_processing_date TIMESTAMP,
                ai_confidence REAL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        cursor.execute('CREATE UNIQUE INDEX IF NOT EXISTS idx_research_papers_doi ON research_papers (doi)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_research_papers_model ON research_papers (ai_model_version)')

        conn.commit()
        logger.info("Database initialized")
    except sqlite3.Error as e:
        logger.error(f"Error initializing database: {e}")
        raise
    finally:
        if owns_connection and conn is not None:
            conn.close()
