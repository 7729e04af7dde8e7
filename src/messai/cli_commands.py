"""
CLI Command Definitions.
Contains all Click command definitions and decorators.
"""

import click
from . import __version__


# Main CLI group
@click.group()
@click.version_option(__version__)
@click.option("--log-level", type=click.Choice(["none", "error", "info", "debug"]), help="Set the log level")
@click.option("--db", "db_path", type=click.Path(dir_okay=False), help="SQLite database file (overrides MESSAI_DB_PATH)")
def cli(log_level, db_path):
    """MESSAI: parameter extraction and quality scoring for MES literature."""
    from .core.logging import setup_logging
    from .core.settings import LogLevel, BackendSettings

    if db_path:
        BackendSettings.set_setting("db_path", db_path)

    if log_level:
        # Override setting for this run
        lvl = LogLevel(log_level)
        BackendSettings.set_log_level(lvl)
        setup_logging(lvl)
    else:
        # Use existing setting
        setup_logging()


@cli.command("init-db")
def init_db():
    """Create the research_papers table if it does not exist."""
    from .cli_handlers import handle_init_db
    handle_init_db()


@cli.command("add-paper")
@click.argument("title")
@click.option("--abstract", help="Paper abstract")
@click.option("--author", "authors", multiple=True, help="Author name (repeatable)")
@click.option("--journal", help="Journal name")
@click.option("--publication-date", help="Publication date, e.g. 2023-04-01")
@click.option("--doi", help="DOI")
@click.option("--pubmed-id", help="PubMed ID")
@click.option("--arxiv-id", help="arXiv ID")
@click.option("--url", "external_url", help="External URL")
@click.option("--keyword", "keywords", multiple=True, help="Keyword (repeatable)")
def add_paper(title, abstract, authors, journal, publication_date, doi, pubmed_id, arxiv_id, external_url, keywords):
    """Add a paper to the database."""
    from .cli_handlers import handle_add_paper
    handle_add_paper(title, abstract, authors, journal, publication_date, doi, pubmed_id, arxiv_id,
                     external_url, keywords)


@cli.command("list-papers")
@click.option("--limit", type=click.IntRange(min=1), default=20, help="Maximum papers to list")
@click.option("--offset", type=click.IntRange(min=0), default=0, help="Papers to skip")
@click.option("--search", help="Filter by title or abstract text")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table", help="Output format")
def list_papers(limit, offset, search, output_format):
    """List stored papers."""
    from .cli_handlers import handle_list_papers
    handle_list_papers(limit, offset, search, output_format)


@cli.command()
@click.option("--limit", type=click.IntRange(min=1), help="Maximum papers to process")
@click.option("--reprocess", is_flag=True, help="Re-extract papers already processed by this model version")
@click.option("--dry-run", is_flag=True, help="Extract without saving results")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Pipeline configuration JSON file")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text", help="Summary format")
def extract(limit, reprocess, dry_run, config_file, output_format):
    """Extract parameters from stored papers."""
    from .cli_handlers import handle_extract
    handle_extract(limit, reprocess, dry_run, config_file, output_format)


@cli.command()
@click.option("--limit", type=click.IntRange(min=1), help="Maximum papers to validate")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Pipeline configuration JSON file")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text", help="Summary format")
def validate(limit, config_file, output_format):
    """Validate stored extraction results."""
    from .cli_handlers import handle_validate
    handle_validate(limit, config_file, output_format)


@cli.command("score-relevance")
@click.option("--limit", type=click.IntRange(min=1), help="Maximum papers to score")
@click.option("--apply", is_flag=True, help="Save relevance scores to the papers")
@click.option("--remove-papers", is_flag=True, help="Delete papers recommended for removal")
@click.option("--yes", is_flag=True, help="Do not ask before deleting papers")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Pipeline configuration JSON file")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text", help="Summary format")
def score_relevance(limit, apply, remove_papers, yes, config_file, output_format):
    """Score papers for microbial relevance."""
    from .cli_handlers import handle_score_relevance
    handle_score_relevance(limit, apply, remove_papers, yes, config_file, output_format)


@cli.command()
@click.option("--limit", type=click.IntRange(min=1), help="Maximum papers to score")
@click.option("--reference-year", type=int, help="Year used to compute publication age")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Pipeline configuration JSON file")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text", help="Summary format")
def quality(limit, reference_year, config_file, output_format):
    """Score bibliographic quality of stored papers."""
    from .cli_handlers import handle_quality
    handle_quality(limit, reference_year, config_file, output_format)


@cli.command()
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table", help="Output format")
def duplicates(output_format):
    """Find papers sharing a DOI or title."""
    from .cli_handlers import handle_duplicates
    handle_duplicates(output_format)


@cli.command()
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table", help="Output format")
def stats(output_format):
    """Show extraction coverage statistics."""
    from .cli_handlers import handle_stats
    handle_stats(output_format)


@cli.command()
@click.argument("title")
@click.option("--abstract", help="Paper abstract")
@click.option("--validate", "run_validation", is_flag=True, help="Also validate the extracted parameters")
def analyze(title, abstract, run_validation):
    """Extract parameters from a title and abstract and print JSON."""
    from .cli_handlers import handle_analyze
    handle_analyze(title, abstract, run_validation)


if __name__ == "__main__":
    cli()
