"""
Report formatting for batch runs and per-paper validation.

Provides JSON and human-readable text output.
"""

import json
from pathlib import Path
from typing import Any, Dict


class PaperQualityReporter:
    """
    Formats batch summaries and validation results for display.
    """

    @staticmethod
    def format_json(results: Dict[str, Any], pretty: bool = True) -> str:
        """
        Format results as JSON.

        Args:
            results: Summary or validation results
            pretty: Whether to pretty-print JSON

        Returns:
            JSON formatted string
        """
        if pretty:
            return json.dumps(results, indent=2, default=str, ensure_ascii=False)
        return json.dumps(results, default=str, ensure_ascii=False)

    @staticmethod
    def format_summary_text(summary: Dict[str, Any]) -> str:
        """Format a batch summary as text."""
        lines = []

        lines.append("=" * 50)
        lines.append(f"{summary.get('operation', 'batch').upper()} SUMMARY")
        lines.append("=" * 50)

        if summary.get('dry_run'):
            lines.append("DRY RUN - no changes were written")
        lines.append(f"Processed: {summary.get('processed', 0)}")
        lines.append(f"Succeeded: {summary.get('succeeded', 0)}")
        lines.append(f"Skipped: {summary.get('skipped', 0)}")
        lines.append(f"Failed: {summary.get('failed', 0)}")
        lines.append(f"Elapsed: {summary.get('elapsed_seconds', 0):.2f}s")

        counts = summary.get('counts', {})
        if counts:
            lines.append("")
            lines.append("BREAKDOWN:")
            lines.append("-" * 30)
            for name, count in counts.items():
                lines.append(f"{name}: {count}")

        errors = summary.get('errors', [])
        if errors:
            lines.append("")
            lines.append("ERRORS:")
            lines.append("-" * 30)
            for error in errors[:5]:  # Limit to 5 errors
                lines.append(f"- {error}")

        return "\n".join(lines)

    @staticmethod
    def format_validation_text(result: Dict[str, Any]) -> str:
        """Format a single validation result as text."""
        lines = []

        lines.append("=" * 50)
        lines.append("PARAMETER VALIDATION REPORT")
        lines.append("=" * 50)
        lines.append(f"Status: {'VALID' if result.get('is_valid') else 'INVALID'}")
        lines.append(f"Confidence: {result.get('confidence_score', 0):.2f}")
        lines.append(f"Consistency: {result.get('consistency_score', 0):.2f}")
        lines.append(f"Physical plausibility: {result.get('physical_plausibility', 0):.2f}")
        lines.append("")

        violations = result.get('violations', [])
        if violations:
            lines.append("VIOLATIONS:")
            lines.append("-" * 30)
            for violation in violations:
                lines.append(f"[{violation['severity'].upper()}] {violation['message']}")
            lines.append("")

        warnings = result.get('warnings', [])
        if warnings:
            lines.append("WARNINGS:")
            lines.append("-" * 30)
            for warning in warnings:
                lines.append(f"[{warning['impact']}] {warning['message']}")
            lines.append("")

        recommendations = result.get('recommendations', [])
        if recommendations:
            lines.append("RECOMMENDATIONS:")
            lines.append("-" * 30)
            for recommendation in recommendations:
                lines.append(f"- {recommendation}")
        elif not violations and not warnings:
            lines.append("No issues detected.")

        return "\n".join(lines)

    @staticmethod
    def format_text(results: Dict[str, Any]) -> str:
        """Format either a validation result or a batch summary as text."""
        if 'is_valid' in results:
            return PaperQualityReporter.format_validation_text(results)
        return PaperQualityReporter.format_summary_text(results)

    @staticmethod
    def get_report(results: Dict[str, Any], format_type: str = "json") -> str:
        if format_type == "json":
            return PaperQualityReporter.format_json(results)
        if format_type == "text":
            return PaperQualityReporter.format_text(results)
        raise ValueError(f"Unsupported format: {format_type}")

    @staticmethod
    def save_report(results: Dict[str, Any], output_path: str, format_type: str = "json") -> None:
        """
        Save a report to file.

        Args:
            results: Summary or validation results
            output_path: Path to save the report
            format_type: Format type ('json' or 'text')
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        content = PaperQualityReporter.get_report(results, format_type)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
