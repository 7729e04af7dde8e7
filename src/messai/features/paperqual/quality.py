"""
Bibliographic quality scoring for research papers.

The score is the sum of six parts: verification (0-20), completeness (0-15),
relevance (0-20), data richness (0-25), recency (0-10) and impact (0-10).
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from ..extraction.models import ExtractedParameterSet
from ..extraction.paper_extractor import extract
from .config import PaperQualityConfig

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "authors", "abstract", "publication_date", "journal")

CORE_TERMS = (
    "microbial fuel cell", "bioelectrochemical", "microbial electrolysis",
    "microbial desalination", "bioelectricity", "electroactive bacteria",
)

RELATED_TERMS = (
    "electron transfer", "biofilm", "biocathode", "bioanode",
    "electrochemical", "bioelectrode", "electrogenic", "exoelectrogen",
)

HIGH_IMPACT_JOURNALS = (
    "nature", "science", "cell", "joule", "energy & environmental science",
    "advanced materials", "advanced energy materials", "acs nano",
    "biotechnology and bioengineering", "bioresource technology",
    "environmental science & technology", "water research",
    "chemical engineering journal", "applied energy", "renewable energy",
)

# (max age in years, points)
RECENCY_BANDS = ((2, 10), (5, 8), (10, 6), (15, 4), (25, 2))

_YEAR = re.compile(r"\b(\d{4})\b")


@dataclass
class QualityScore:
    overall: float
    breakdown: Dict[str, float]
    flags: Dict[str, bool]
    recommendations: List[str] = field(default_factory=list)

    @property
    def needs_enhancement(self) -> bool:
        return self.flags["needsEnhancement"]

    @property
    def grade(self) -> str:
        if self.overall >= 85:
            return "excellent"
        if self.overall >= 70:
            return "good"
        if self.overall >= 50:
            return "fair"
        return "poor"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["grade"] = self.grade
        return data


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() not in ("", "[]", "null")
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True


def publication_year(value: Any) -> Optional[int]:
    """Pull a four-digit year out of a date, datetime, int or date string."""
    if value is None:
        return None
    if isinstance(value, date):
        return value.year
    if isinstance(value, int):
        return value
    match = _YEAR.search(str(value))
    return int(match.group(1)) if match else None


def term_relevance(text: str) -> float:
    """Fraction 0-1 from core (0.2 each) and related (0.1 each) term hits."""
    lowered = text.lower()
    score = sum(0.2 for term in CORE_TERMS if term in lowered)
    score += sum(0.1 for term in RELATED_TERMS if term in lowered)
    return min(score, 1.0)


def recency_points(age: int) -> float:
    for max_age, points in RECENCY_BANDS:
        if age <= max_age:
            return float(points)
    return 1.0


def is_high_impact(journal: str) -> bool:
    lowered = journal.lower()
    return any(re.search(r"\b" + re.escape(name) + r"\b", lowered) for name in HIGH_IMPACT_JOURNALS)


def score_paper_quality(paper: Mapping[str, Any],
                        extracted: Optional[ExtractedParameterSet] = None,
                        reference_year: Optional[int] = None,
                        config: Optional[PaperQualityConfig] = None) -> QualityScore:
    """
    Score a paper record for bibliographic quality.

    Args:
        paper: Paper record with snake_case column names
        extracted: Parameters already extracted for the paper; extracted
            from title and abstract when omitted
        reference_year: Year to measure publication age against, defaults
            to the current year
        config: Thresholds for the enhancement flag

    Returns:
        QualityScore with breakdown, flags and recommendations
    """
    config = config or PaperQualityConfig()
    paper = dict(paper)
    reference_year = reference_year or date.today().year
    recommendations: List[str] = []
    breakdown = {
        "verification": 0.0,
        "completeness": 0.0,
        "relevance": 0.0,
        "dataRichness": 0.0,
        "recency": 0.0,
        "impact": 0.0,
    }
    flags = {
        "isVerified": False,
        "hasPerformanceData": False,
        "hasMaterialsData": False,
        "hasOrganismData": False,
        "isHighImpact": False,
        "needsEnhancement": False,
    }

    # Verification
    external_url = paper.get("external_url") or ""
    if _has_value(paper.get("doi")):
        breakdown["verification"] = 20.0
        flags["isVerified"] = True
    elif _has_value(paper.get("pubmed_id")) or _has_value(paper.get("arxiv_id")):
        breakdown["verification"] = 15.0
        flags["isVerified"] = True
    elif "doi.org" in external_url:
        breakdown["verification"] = 10.0
        recommendations.append("Extract DOI from external URL")
    else:
        recommendations.append("No verifiable ID - consider marking as low confidence")

    # Completeness
    present = [name for name in REQUIRED_FIELDS if _has_value(paper.get(name))]
    breakdown["completeness"] = len(present) / len(REQUIRED_FIELDS) * 15
    if not _has_value(paper.get("abstract")):
        recommendations.append("Missing abstract - fetch from source")

    # Relevance
    title = paper.get("title") or ""
    abstract = paper.get("abstract") or ""
    relevance = term_relevance(f"{title} {abstract} {paper.get('keywords') or ''}")
    breakdown["relevance"] = relevance * 20
    if relevance < config.low_relevance_threshold:
        recommendations.append("Low relevance - review categorization")

    # Data richness
    if extracted is None:
        extracted = extract(title, abstract)
    electrodes = extracted.electrode_specifications
    biology = extracted.biological_parameters

    if extracted.performance_metrics is not None:
        breakdown["dataRichness"] += 10
        flags["hasPerformanceData"] = True
    if (electrodes is not None and (electrodes.anode_materials or electrodes.cathode_materials)) \
            or _has_value(paper.get("anode_materials")) or _has_value(paper.get("cathode_materials")):
        breakdown["dataRichness"] += 8
        flags["hasMaterialsData"] = True
    if (biology is not None and biology.organisms) or _has_value(paper.get("organism_types")):
        breakdown["dataRichness"] += 7
        flags["hasOrganismData"] = True

    if not flags["hasPerformanceData"]:
        recommendations.append("Extract performance metrics from text")
    if not flags["hasMaterialsData"]:
        recommendations.append("Extract electrode materials information")
    if not flags["hasOrganismData"]:
        recommendations.append("Identify microbial species/consortia")

    # Recency
    year = publication_year(paper.get("publication_date"))
    if year is not None:
        breakdown["recency"] = recency_points(reference_year - year)

    # Impact
    journal = paper.get("journal")
    if _has_value(journal):
        if is_high_impact(journal):
            breakdown["impact"] = 10.0
            flags["isHighImpact"] = True
        else:
            breakdown["impact"] = 5.0

    overall = sum(breakdown.values())
    if overall < config.enhancement_threshold or len(recommendations) > config.max_recommendations:
        flags["needsEnhancement"] = True

    logger.debug(f"Quality {overall:.1f} for '{title[:60]}' with {len(recommendations)} recommendations")
    return QualityScore(overall=overall, breakdown=breakdown, flags=flags, recommendations=recommendations)
