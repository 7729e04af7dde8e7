"""
Microbial relevance scoring.

Scores a paper 0-100 for relevance to biological electrochemical systems
from weighted keyword hits in its title, abstract, keywords, organism list
and system type, and recommends keeping, removing or reviewing it.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Pattern, Tuple, Union

from .config import RelevanceConfig

logger = logging.getLogger(__name__)

MICROBIAL_KEYWORDS: Tuple[str, ...] = (
    # General microbial terms
    "microb", "bacteria", "microorganism", "microbial", "bacterial",
    "biofilm", "biomass", "microbe", "microbiology", "prokaryote",
    # Organisms
    "geobacter", "shewanella", "pseudomonas", "escherichia", "e. coli",
    "desulfovibrio", "rhodobacter", "clostridium", "bacillus",
    "lactobacillus", "saccharomyces", "methanogen", "archaea",
    # Bioelectrochemical terms
    "bioelectrochemical", "bioelectricity", "bioelectrogenic",
    "electroactive", "electrogenic", "exoelectrogen", "electrochemically active",
    "biocathode", "bioanode", "bioelectrode", "microbial electrode",
    # System types
    "microbial fuel cell", "mfc", "microbial electrolysis", "mec",
    "microbial desalination", "mdc", "microbial electrosynthesis", "mes",
    "bioelectrochemical system", "bes", "microbial electrochemical",
    # Biological processes
    "fermentation", "anaerobic", "aerobic", "metabolism", "respiration",
    "electron transfer", "bioconversion", "biodegradation", "bioremediation",
    "syntrophic", "consortium", "mixed culture", "pure culture",
    # Biological materials
    "enzyme", "protein", "cytochrome", "mediator", "biochar",
    "biological catalyst", "biocatalyst", "living organism",
)

ALGAE_KEYWORDS: Tuple[str, ...] = (
    "algae", "algal", "microalgae", "microalgal", "macroalgae",
    "phytoplankton", "seaweed", "cyanobacteria", "blue-green algae",
    "chlorella", "spirulina", "chlamydomonas", "scenedesmus",
    "nannochloropsis", "dunaliella", "haematococcus", "botryococcus",
    "arthrospira", "anabaena", "nostoc", "synechocystis",
    "photosynthesis", "photosynthetic", "photoautotrophic",
    "photobiological", "phototrophic", "photomicrobial",
    "algal biomass", "algal cultivation", "algal growth",
    "algae fuel cell", "photosynthetic fuel cell", "photo-mfc",
    "algae microbial fuel cell", "algal mfc", "phototrophic mfc",
    "biophotovoltaic", "photobioelectrochemical",
)

EXCLUSION_KEYWORDS: Tuple[str, ...] = (
    # Chemical and physical systems
    "purely chemical", "abiotic", "non-biological", "inorganic only",
    "metal-air battery", "lithium battery", "chemical fuel cell",
    # Solar without a biological component
    "photovoltaic cell", "solar panel", "silicon solar",
    "dye-sensitized solar", "perovskite solar", "quantum dot solar",
    # Conventional fuel cells
    "proton exchange membrane fuel cell", "pemfc", "solid oxide fuel cell",
    "sofc", "alkaline fuel cell", "afc", "phosphoric acid fuel cell",
    "molten carbonate fuel cell", "direct methanol fuel cell",
    # Other energy systems
    "supercapacitor", "battery", "capacitor", "electrolyzer",
    "gas turbine", "wind turbine", "hydroelectric", "nuclear",
)

# Biological language that cancels the exclusion penalty
CONTEXT_MODIFIERS: Tuple[str, ...] = (
    "bio-inspired", "biomimetic", "biological", "microbial",
    "with bacteria", "using microorganisms", "biofilm-based",
    "enzyme-catalyzed", "biologically catalyzed",
)

SYSTEM_PATTERN = re.compile(r"\b(mfc|mec|mdc|mes|bes|bioelectrochemical)\b", re.IGNORECASE)
BIOELECTROCHEMICAL_PATTERN = re.compile(r"bioelectrochemical|bioelectricity|electroactive", re.IGNORECASE)


class Recommendation(str, Enum):
    KEEP = "keep"
    REMOVE = "remove"
    REVIEW = "review"


@dataclass
class RelevanceScore:
    """Result of scoring one paper for microbial relevance."""
    overall: float
    breakdown: Dict[str, float]
    categories: Dict[str, bool]
    matched_keywords: List[str]
    excluded_keywords: List[str]
    exclusion_penalty: float
    recommendation: Recommendation
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_microbial(self) -> bool:
        return self.categories["isMicrobial"]

    @property
    def is_algae(self) -> bool:
        return self.categories["isAlgae"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "breakdown": dict(self.breakdown),
            "categories": dict(self.categories),
            "matchedKeywords": list(self.matched_keywords),
            "excludedKeywords": list(self.excluded_keywords),
            "exclusionPenalty": self.exclusion_penalty,
            "recommendation": self.recommendation.value,
        }


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> Pattern:
    return re.compile(r"\b" + re.escape(keyword) + r"\b", re.IGNORECASE)


def _matches(text: str, keywords: Iterable[str]) -> List[str]:
    return [kw for kw in keywords if _keyword_pattern(kw).search(text)]


def _occurrences(text: str, keywords: Iterable[str]) -> int:
    return sum(len(_keyword_pattern(kw).findall(text)) for kw in keywords)


def _as_text(value: Union[None, str, Iterable[str]]) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return " ".join(str(item) for item in value if item)


def recommend(overall: float, categories: Dict[str, bool],
              config: Optional[RelevanceConfig] = None) -> Recommendation:
    """Decide keep/remove/review from the overall score and category flags."""
    config = config or RelevanceConfig()
    if overall >= config.keep_threshold or categories["isMicrobial"] or categories["isAlgae"]:
        return Recommendation.KEEP
    if overall < config.remove_threshold or categories["isPurelyNonBiological"]:
        return Recommendation.REMOVE
    return Recommendation.REVIEW


def score_relevance(title: Optional[str],
                    abstract: Optional[str] = None,
                    keywords: Union[None, str, Iterable[str]] = None,
                    organism_types: Union[None, str, Iterable[str]] = None,
                    system_type: Optional[str] = None,
                    config: Optional[RelevanceConfig] = None) -> RelevanceScore:
    """
    Score a paper's relevance to microbial and algal electrochemical systems.

    Args:
        title: Paper title
        abstract: Paper abstract
        keywords: Keyword string or list
        organism_types: Organism string or list
        system_type: System type label such as "MFC"
        config: Weights and thresholds; defaults are used when omitted

    Returns:
        RelevanceScore with overall score, breakdown and recommendation
    """
    config = config or RelevanceConfig()
    parts = [title, abstract, _as_text(keywords), _as_text(organism_types), system_type]
    text = " ".join(part for part in parts if part).lower()

    matched_microbial = _matches(text, MICROBIAL_KEYWORDS)
    matched_algae = _matches(text, ALGAE_KEYWORDS)
    matched_exclusion = _matches(text, EXCLUSION_KEYWORDS)
    has_context_modifier = bool(_matches(text, CONTEXT_MODIFIERS))

    microbial_score = min(100.0, len(matched_microbial) * config.microbial_weight)
    algae_score = min(100.0, len(matched_algae) * config.algae_weight)
    system_score = config.system_score if SYSTEM_PATTERN.search(text) else 0.0

    # Occurrence based so that repeating a keyword never lowers the density
    total_words = max(1, len(text.split()))
    occurrences = _occurrences(text, matched_microbial) + _occurrences(text, matched_algae)
    keyword_density = min(100.0, occurrences / total_words * config.density_scale)

    if has_context_modifier:
        exclusion_penalty = 0.0
    else:
        exclusion_penalty = min(config.exclusion_penalty_cap,
                                len(matched_exclusion) * config.exclusion_penalty_per_match)

    weighted = (microbial_score * config.microbial_share
                + algae_score * config.algae_share
                + system_score * config.system_share
                + keyword_density * config.density_share)
    overall = max(0.0, min(100.0, weighted - exclusion_penalty))

    categories = {
        "isMicrobial": bool(matched_microbial),
        "isAlgae": bool(matched_algae),
        "isBioelectrochemical": system_score > 0 or bool(BIOELECTROCHEMICAL_PATTERN.search(text)),
        "isPurelyNonBiological": (bool(matched_exclusion) and not has_context_modifier
                                  and not matched_microbial and not matched_algae),
    }

    matched = list(dict.fromkeys(matched_microbial + matched_algae))
    recommendation = recommend(overall, categories, config)
    logger.debug(f"Relevance {overall:.1f} ({recommendation.value}) from {len(matched)} keywords")

    return RelevanceScore(
        overall=overall,
        breakdown={
            "microbialRelevance": microbial_score,
            "algaeRelevance": algae_score,
            "systemRelevance": system_score,
            "keywordDensity": keyword_density,
        },
        categories=categories,
        matched_keywords=matched,
        excluded_keywords=matched_exclusion,
        exclusion_penalty=exclusion_penalty,
        recommendation=recommendation,
        details={"total_words": total_words, "keyword_occurrences": occurrences},
    )
