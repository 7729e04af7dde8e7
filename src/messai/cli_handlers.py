"""
CLI Command Handlers.
Contains all the implementation logic for CLI commands.
"""

import json
import sqlite3
from contextlib import contextmanager

import click

from .features.extraction.exceptions import ExtractionError


@contextmanager
def _repository():
    """Open the configured database, make sure the schema exists, and yield a PaperRepository."""
    from .storage.src.database import get_db_connection
    from .storage.src.papers.database_repositories import PaperRepository
    from .storage.src.papers.initialize_database import setup_database

    conn = get_db_connection()
    try:
        setup_database(conn)
        yield PaperRepository(conn)
    finally:
        conn.close()


def _load_config(config_file):
    from .features.pipeline.config import PipelineConfig

    if config_file:
        return PipelineConfig.from_json_file(config_file)
    return PipelineConfig()


def _echo_summary(summary, output_format):
    from .features.paperqual.reporting import PaperQualityReporter
    click.echo(PaperQualityReporter.get_report(summary.to_dict(), output_format))


# Database handlers
def handle_init_db():
    """Handle database initialization command."""
    try:
        from .storage.src.database import get_db_path

        with _repository():
            pass
        click.echo(f"Database ready at {get_db_path()}")

    except (sqlite3.Error, OSError) as e:
        click.echo(f"Error initializing database: {e}", err=True)
        raise click.Abort()


def handle_add_paper(title, abstract, authors, journal, publication_date, doi, pubmed_id, arxiv_id,
                     external_url, keywords):
    """Handle paper creation command."""
    paper = {
        "title": title,
        "abstract": abstract,
        "authors": list(authors) or None,
        "journal": journal,
        "publication_date": publication_date,
        "doi": doi,
        "pubmed_id": pubmed_id,
        "arxiv_id": arxiv_id,
        "external_url": external_url,
        "keywords": list(keywords) or None,
    }
    try:
        with _repository() as repo:
            paper_id = repo.create_paper({k: v for k, v in paper.items() if v is not None})
        click.echo(f"Paper created with ID: {paper_id}")

    except (ExtractionError, sqlite3.Error) as e:
        click.echo(f"Error adding paper: {e}", err=True)
        raise click.Abort()


def handle_list_papers(limit, offset, search, output_format):
    """Handle paper listing command."""
    try:
        with _repository() as repo:
            papers = repo.list_papers(limit=limit, offset=offset, search=search)

        if not papers:
            click.echo("No papers found.")
            return

        if output_format == "json":
            click.echo(json.dumps(papers, indent=2, default=str, ensure_ascii=False))
        else:
            # Table format
            click.echo(f"{'ID':<38} {'Title':<50} {'Extracted':<10} {'Confidence'}")
            click.echo("-" * 110)
            for paper in papers:
                title = (paper.get('title') or '')[:49]
                extracted = "yes" if paper.get('ai_data_extraction') else "no"
                confidence = paper.get('ai_confidence')
                confidence_str = f"{confidence:.2f}" if confidence is not None else "-"
                click.echo(f"{paper['id']:<38} {title:<50} {extracted:<10} {confidence_str}")

    except sqlite3.Error as e:
        click.echo(f"Error listing papers: {e}", err=True)
        raise click.Abort()


# Batch handlers
def handle_extract(limit, reprocess, dry_run, config_file, output_format):
    """Handle batch extraction command."""
    try:
        from .features.pipeline.runner import BatchRunner

        config = _load_config(config_file)
        with _repository() as repo:
            summary = BatchRunner(repo, config).run_extraction(limit=limit, reprocess=reprocess, dry_run=dry_run)
        _echo_summary(summary, output_format)

    except (ExtractionError, sqlite3.Error) as e:
        click.echo(f"Error extracting parameters: {e}", err=True)
        raise click.Abort()


def handle_validate(limit, config_file, output_format):
    """Handle batch validation command."""
    try:
        from .features.pipeline.runner import BatchRunner

        config = _load_config(config_file)
        with _repository() as repo:
            summary = BatchRunner(repo, config).run_validation(limit=limit)
        _echo_summary(summary, output_format)

    except (ExtractionError, sqlite3.Error) as e:
        click.echo(f"Error validating parameters: {e}", err=True)
        raise click.Abort()


def handle_score_relevance(limit, apply, remove_papers, yes, config_file, output_format):
    """Handle relevance scoring command."""
    if remove_papers and not yes:
        click.confirm("Papers recommended for removal will be deleted. Continue?", abort=True)

    try:
        from .features.pipeline.runner import BatchRunner

        config = _load_config(config_file)
        with _repository() as repo:
            summary = BatchRunner(repo, config).run_relevance(limit=limit, apply=apply, remove=remove_papers)
        _echo_summary(summary, output_format)

    except (ExtractionError, sqlite3.Error) as e:
        click.echo(f"Error scoring relevance: {e}", err=True)
        raise click.Abort()


def handle_quality(limit, reference_year, config_file, output_format):
    """Handle quality scoring command."""
    try:
        from .features.pipeline.runner import BatchRunner

        config = _load_config(config_file)
        with _repository() as repo:
            summary = BatchRunner(repo, config).run_quality(limit=limit, reference_year=reference_year)
        _echo_summary(summary, output_format)

    except (ExtractionError, sqlite3.Error) as e:
        click.echo(f"Error scoring quality: {e}", err=True)
        raise click.Abort()


def handle_duplicates(output_format):
    """Handle duplicate detection command."""
    try:
        from .features.pipeline.runner import BatchRunner

        with _repository() as repo:
            groups = BatchRunner(repo).find_duplicate_papers()

        if output_format == "json":
            click.echo(json.dumps([group.to_dict() for group in groups], indent=2, ensure_ascii=False))
            return

        if not groups:
            click.echo("No duplicates found.")
            return

        click.echo(f"{'Reason':<8} {'Count':<6} {'Key'}")
        click.echo("-" * 80)
        for group in groups:
            click.echo(f"{group.reason:<8} {len(group.paper_ids):<6} {group.key[:64]}")
            for paper_id in group.paper_ids:
                click.echo(f"  - {paper_id}")

    except sqlite3.Error as e:
        click.echo(f"Error finding duplicates: {e}", err=True)
        raise click.Abort()


def handle_stats(output_format):
    """Handle extraction statistics command."""
    try:
        from .features.pipeline.runner import BatchRunner

        with _repository() as repo:
            stats = BatchRunner(repo).extraction_stats()

        if output_format == "json":
            click.echo(json.dumps(stats, indent=2))
            return

        click.echo(f"Total papers: {stats['total_papers']}")
        click.echo(f"Processed: {stats['processed']} ({stats['coverage']}%)")
        click.echo(f"Current version ({stats['model_version']}): {stats['current_version']}")
        click.echo("")
        click.echo(f"{'Category':<28} {'Papers'}")
        click.echo("-" * 40)
        for column, count in stats['categories'].items():
            click.echo(f"{column:<28} {count}")

    except (ExtractionError, sqlite3.Error) as e:
        click.echo(f"Error reading statistics: {e}", err=True)
        raise click.Abort()


def handle_analyze(title, abstract, run_validation):
    """Handle one-off analysis command."""
    from .features.extraction.paper_extractor import extract, extraction_confidence

    result = extract(title, abstract)
    output = {
        "extracted": result.to_dict(),
        "confidence": extraction_confidence(result),
    }
    if run_validation:
        from .features.paperqual.validation import validate
        output["validation"] = validate(result).to_dict()

    click.echo(json.dumps(output, indent=2, ensure_ascii=False))
