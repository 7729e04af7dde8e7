"""Research paper storage."""

from .database_repositories import PaperRepository, load_json_column
from .initialize_database import setup_database

__all__ = ['PaperRepository', 'load_json_column', 'setup_database']
