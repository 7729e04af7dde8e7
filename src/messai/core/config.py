"""Core constants shared by the MESSAI batch scripts."""

# Batch processing defaults
DEFAULT_BATCH_LIMIT = 100
MAX_BATCH_LIMIT = 10000

# Fixed pause between papers. The original scripts slept between calls to
# stay under third-party rate limits; the pattern engine needs none.
DEFAULT_DELAY_SECONDS = 0.0

# Version tag written to ai_model_version for pattern-based extraction
MODEL_VERSION = "pattern-matching-v3"

# Confidence stored alongside extraction results
CONFIDENCE_WITH_PERFORMANCE = 0.7
CONFIDENCE_WITHOUT_PERFORMANCE = 0.5

# Pagination defaults for listing papers
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Default database location, relative to the working directory
DEFAULT_DB_DIR = "storage"
DEFAULT_DB_FILENAME = "messai.db"
