"""
Field pattern catalog for parameter extraction.

Each semantic field maps to an ordered list of regular expressions. The
catalog is plain data: adding a phrasing means adding a FieldPattern, not
touching the extractor. Capture group conventions:

    group 1  numeric value, or the categorical text for TEXT/LIST fields
    group 2  unit string (optional)
    group 3  qualifier such as "maximum power" (optional)

Patterns without groups are qualitative anchors and carry a default value
or a canonical token instead.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Tuple

from .exceptions import InvalidPatternError, UnknownFieldError
from .units import QuantityKind


class FieldKind(str, Enum):
    """How a field's match is turned into a value."""
    MEASUREMENT = "measurement"  # value + unit, normalized
    NUMBER = "number"            # bare float
    TEXT = "text"                # single token or cleaned text
    LIST = "list"                # every match of every pattern


class TextStyle(str, Enum):
    """Canonicalization applied to TEXT and LIST values."""
    RAW = "raw"
    LOWER = "lower"
    HYPHEN = "hyphen"
    SPECIES = "species"


@dataclass(frozen=True)
class FieldPattern:
    """One alternative phrasing for a field."""
    regex: str
    default_value: Optional[object] = None
    default_unit: Optional[str] = None
    token: Optional[str] = None
    conditions: Optional[str] = None

    @property
    def compiled(self) -> Pattern:
        return _compile(self.regex)


@dataclass(frozen=True)
class FieldSpec:
    """A semantic field and its ordered patterns."""
    name: str
    category: str
    kind: FieldKind
    patterns: Tuple[FieldPattern, ...]
    quantity: Optional[QuantityKind] = None
    canonical: TextStyle = TextStyle.RAW
    default_unit: Optional[str] = None
    token_map: Mapping[str, str] = field(default_factory=dict)


@lru_cache(maxsize=None)
def _compile(regex: str) -> Pattern:
    return re.compile(regex, re.IGNORECASE)


CATEGORY_ORDER: Tuple[str, ...] = (
    "environmental",
    "reactorConfiguration",
    "electrodeSpecifications",
    "biologicalParameters",
    "performanceMetrics",
    "operationalParameters",
    "electrochemicalData",
)

# Shared regex fragments
NUM = r"(?<![\d.,])(\d+(?:,\d{3})*(?:\.\d+)?)"
PM = r"(?:\s*(?:±|\+/-|\+-)\s*\d+(?:\.\d+)?)?"
GAP = r"(?:[^.;]|\.(?=\d))*?"
SQ = r"(?:²|\^?2)"
CUBE = r"(?:³|\^?3)"
NEG_SQ = r"\s*\^?\s*[-−]\s*2"
NEG_CUBE = r"\s*\^?\s*[-−]\s*3"
NEG_ONE = r"\s*\^?\s*[-−]\s*1"
# "X/cm2" or "X cm-2"; a bare space never means "per"
PER_AREA = r"(?:\s*/\s*(?:cm|m)" + SQ + r"|\s+(?:cm|m)" + NEG_SQ + r")"
PER_VOLUME_DAY = (
    r"(?:\s*/\s*(?:L|m" + CUBE + r")(?:\s*/\s*|\s*·\s*)d(?:ay)?"
    r"|\s*/\s*(?:L|m" + CUBE + r")\s+d(?:ay)?" + NEG_ONE +
    r"|\s+(?:L" + NEG_ONE + r"|m" + NEG_CUBE + r")\s+d(?:ay)?" + NEG_ONE + r")"
)

POWER_UNIT = r"((?:[μµu]W|mW|W)" + PER_AREA + r")(?![a-z0-9³])"
CURRENT_UNIT = r"((?:[μµu]A|mA|A)" + PER_AREA + r")(?![a-z0-9³])"
VOLUMETRIC_POWER_UNIT = (
    r"((?:mW|W)(?:\s*/\s*(?:m" + CUBE + r"|L)|\s+(?:m" + NEG_CUBE + r"|L" + NEG_ONE + r")))(?![a-z0-9])"
)
VOLTAGE_UNIT = r"(mV|V)(?![a-z0-9/·])(?!\s*/|\s+s\s*[-−]\s*1)(?!\s*(?:vs\.?|versus)\b)"
VOLUME_UNIT = r"(mL|L|cm" + CUBE + r"|[μµu]L|m" + CUBE + r")(?![a-z0-9²³])(?!\s*/|\s*[-−]\s*1)"
AREA_UNIT = r"(cm" + SQ + r"|mm" + SQ + r"|m" + SQ + r")(?![a-z0-9])"
LENGTH_UNIT = r"(mm|cm|[μµu]m|m)(?![a-z0-9²³/])"
THICKNESS_UNIT = r"([μµu]m|microns?|micrometers?|nm|mm)(?![a-z0-9²³/])"
TIME_UNIT = r"(hours?|hrs?|h|days?|d|min(?:utes?)?|weeks?)(?![a-z])"
TEMPERATURE_SYMBOL = r"([°º]\s*[CF]|℃)(?![a-z])"
TEMPERATURE_UNIT = r"(degrees?\s*(?:celsius|C|F|fahrenheit)|celsius|(?-i:K))(?![a-zΩ0-9])"
DURATION_UNIT = r"(days?|d|hours?|hrs?|h|weeks?|wks?|months?)(?![a-z])"
AGE_UNIT = r"(days?|weeks?|months?)"
PERCENT_UNIT = r"\s*(%|percent)"
OHM_UNIT = r"(kΩ|k\s*ohms?|MΩ|M\s*ohms?|mΩ|Ω|ohms?)(?![a-z])"
FLOW_UNIT = r"(m?L\s*/\s*(?:min|h|d|day)|m?L\s+(?:min|h|d)\s*[-−]\s*1)(?![a-z])"
CONCENTRATION_UNIT = (
    r"(g\s*/\s*L|mg\s*/\s*L|g\s+L\s*[-−]\s*1|mg\s+L\s*[-−]\s*1|kg\s*/\s*m" + CUBE + r")(?![a-z])"
)
LOADING_UNIT = r"((?:k?g|mg)(?:\s*COD)?" + PER_VOLUME_DAY + r")(?![a-z])"
SCAN_UNIT = r"(mV\s*/\s*s|V\s*/\s*s|mV\s+s\s*[-−]\s*1|V\s+s\s*[-−]\s*1)(?![a-z])"


def _production_unit(require_tag: bool) -> str:
    tag = r"\s*(?:H2|H₂)" if require_tag else r"(?:\s*(?:H2|H₂))?"
    return r"((?:m?L|m" + CUBE + r")" + tag + PER_VOLUME_DAY + r")(?![a-z])"


def _alternation(terms: Iterable[str]) -> str:
    """Join vocabulary terms longest-first, letting spaces match space or hyphen."""
    ordered = sorted(terms, key=len, reverse=True)
    return "|".join(term.replace(" ", r"[\s-]+") for term in ordered)


def _measured(anchor: str, unit: str, conditions: Optional[str] = None) -> FieldPattern:
    """Anchor phrase, then the nearest number with a unit in the same clause."""
    return FieldPattern(anchor + GAP + NUM + PM + r"\s*" + unit, conditions=conditions)


def _bare(unit: str, suffix: str = "") -> FieldPattern:
    """Number with a unit, optionally followed by a context phrase."""
    return FieldPattern(NUM + PM + r"\s*" + unit + suffix)


ELECTRODE_MATERIALS = (
    "reduced graphene oxide",
    "graphene oxide",
    "graphene",
    "carbon nanotubes?",
    "carbon cloth",
    "carbon felt",
    "carbon paper",
    "carbon brush(?:es)?",
    "carbon mesh",
    "carbon fiber",
    "carbon veil",
    "graphite felt",
    "graphite rods?",
    "graphite brush(?:es)?",
    "graphite plates?",
    "graphite granules",
    "graphite fiber brush(?:es)?",
    "graphite",
    "stainless steel mesh",
    "stainless steel",
    "activated carbon",
    "biochar",
    "MXene",
    "Ti3C2Tx",
    "Pt/C",
    "platinum",
    "titanium",
    "copper",
    "nickel foam",
    "nickel",
    "polyaniline",
    "polypyrrole",
)
MATERIAL = _alternation(ELECTRODE_MATERIALS)

MATERIAL_TOKENS = {
    "mxene": "MXene",
    "ti3c2tx": "Ti3C2Tx",
    "pt/c": "Pt/C",
}

GENERA = _alternation((
    "Geobacter", "Shewanella", "Pseudomonas", "Escherichia", "Clostridium",
    "Desulfovibrio", "Desulfuromonas", "Rhodoferax", "Rhodopseudomonas",
    "Klebsiella", "Enterobacter", "Citrobacter", "Aeromonas", "Comamonas",
    "Ochrobactrum", "Bacillus", "Lactobacillus", "Thermincola", "Sporomusa",
    "Geothrix", "Acidithiobacillus", "Methanosarcina", "Methanobacterium",
    "Saccharomyces", "Chlorella", "Spirulina", "Arthrospira", "Scenedesmus",
    "Chlamydomonas", "Synechocystis", "Synechococcus",
))

# Words that follow a genus name without being its epithet
EPITHET_STOP_WORDS = (
    "and|or|with|was|were|is|are|on|in|as|at|the|of|for|to|by|from|using|"
    "strain|strains|species|spp|genus|dominated|dominant|biofilm|biofilms|"
    "cells|which|that|when|while|also|being|based|grown|could|growth|"
    "abundance|related|showed|produced|exhibited|electrode|electrodes|"
    "anode|anodes|cathode|cathodes|community|communities|population|"
    "populations|isolate|isolates|enriched|culture|cultures|pure|mixed"
)

KNOWN_EPITHETS = (
    "coli|sulfurreducens|metallireducens|oneidensis|putrefaciens|aeruginosa|"
    "pneumoniae|vulgaris|subtilis|cerevisiae|platensis|reinhardtii|obliquus|"
    "butyricum|acetobutylicum|ferrireducens|ferrooxidans|barkeri"
)


def _field(name: str, category: str, kind: FieldKind, patterns: List[FieldPattern],
           **kwargs) -> FieldSpec:
    return FieldSpec(name=name, category=category, kind=kind, patterns=tuple(patterns), **kwargs)


_ENV = "environmental"
_REACTOR = "reactorConfiguration"
_ELECTRODE = "electrodeSpecifications"
_BIO = "biologicalParameters"
_PERF = "performanceMetrics"
_OPS = "operationalParameters"
_EC = "electrochemicalData"

_FIELD_SPECS: List[FieldSpec] = [
    # Environmental conditions
    _field("temperature", _ENV, FieldKind.MEASUREMENT, [
        _bare(TEMPERATURE_SYMBOL),
        _measured(r"\btemperatures?\b", TEMPERATURE_UNIT),
        _bare(r"((?-i:K))(?![a-zΩ0-9])"),
        FieldPattern(r"\broom\s+temperature\b", default_value=22.0, default_unit="°C"),
        FieldPattern(r"\bambient\s+temperature\b", default_value=25.0, default_unit="°C"),
    ], quantity=QuantityKind.TEMPERATURE, default_unit="°C"),

    _field("pH", _ENV, FieldKind.NUMBER, [
        FieldPattern(r"\bpH(?![a-z])\s*(?:value\s*)?(?:of\s*|=\s*|:\s*|was\s*|at\s*|around\s*)?"
                     r"(\d+(?:\.\d+)?)(?![\d])"),
        FieldPattern(r"\bneutral\s+pH\b", default_value=7.0),
    ]),

    _field("duration", _ENV, FieldKind.MEASUREMENT, [
        FieldPattern(r"\b(?:operat\w*|run|ran|monitored|experiments?)\b" + GAP +
                     r"\b(?:for|over)\s+" + NUM + r"\s*" + DURATION_UNIT),
        FieldPattern(r"\b(?:for|over|during|after)\s+" + NUM + r"\s*(days?|weeks?|months?)(?![a-z])"),
    ], quantity=QuantityKind.TIME),

    _field("substrate", _ENV, FieldKind.TEXT, [
        FieldPattern(r"\b((?:brewery|domestic|synthetic|industrial|municipal|swine|dairy|food|"
                     r"palm\s+oil\s+mill|winery|starch\s+processing)\s+waste\s*water)\b"),
        FieldPattern(r"\b(acetate|glucose|sucrose|lactate|butyrate|propionate|formate|"
                     r"glycerol|ethanol|cellulose|starch|xylose)\b"),
        FieldPattern(r"\b((?:landfill\s+)?leachate|urine|food\s+waste)\b"),
    ], canonical=TextStyle.LOWER),

    _field("substrateConcentration", _ENV, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:acetate|glucose|sucrose|lactate|substrate|COD)\b", CONCENTRATION_UNIT),
    ], quantity=QuantityKind.CONCENTRATION),

    # Reactor configuration
    _field("systemType", _REACTOR, FieldKind.TEXT, [
        FieldPattern(r"\b(?:microbial\s+fuel\s+cells?|MFCs?)\b", token="MFC"),
        FieldPattern(r"\b(?:microbial\s+electrolysis\s+cells?|MECs?)\b", token="MEC"),
        FieldPattern(r"\b(?:microbial\s+desalination\s+cells?|MDCs?)\b", token="MDC"),
        FieldPattern(r"\b(?:microbial\s+electrosynthesis|MES(?!\s+buffer))\b", token="MES"),
        FieldPattern(r"\b(?:bioelectrochemical\s+systems?|BESs?)\b", token="BES"),
    ]),

    _field("design", _REACTOR, FieldKind.TEXT, [
        FieldPattern(r"\b((?:single|dual|two|double|three|multi)[\s-]*chamber(?:ed|s)?)\b"),
        FieldPattern(r"\b(H[\s-]*type|tubular|flat[\s-]*plate|stacked|up[\s-]*flow|"
                     r"air[\s-]*cathode|membrane[\s-]*less|cube)\b"),
    ], canonical=TextStyle.HYPHEN, token_map={"h-type": "H-type"}),

    _field("volume", _REACTOR, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:reactor|working|liquid|total|anod(?:e|ic)|cathod(?:e|ic)|chamber|cell|"
                  r"effective)\s+volumes?\b", VOLUME_UNIT),
        _bare(VOLUME_UNIT, r"\s+(?:[\w]+[\s-]+){0,2}?(?:reactors?|MFCs?|MECs?|cells?|chambers?|bottles?)\b"),
        FieldPattern(r"\bvolume\s*(?:of|:|=|was)?\s*" + NUM + r"\s*" + VOLUME_UNIT),
    ], quantity=QuantityKind.VOLUME),

    _field("flowRate", _REACTOR, FieldKind.MEASUREMENT, [
        _measured(r"\bflow\s+rates?\b", FLOW_UNIT),
        _bare(FLOW_UNIT),
    ], quantity=QuantityKind.FLOW_RATE),

    # Electrode specifications
    _field("anodeMaterials", _ELECTRODE, FieldKind.LIST, [
        FieldPattern(r"\b(" + MATERIAL + r")(?:[\s-]+(?:based|modified))?[\s-]+(?:bio)?anodes?\b"),
        FieldPattern(r"\b(?:bio)?anodes?\b[^.;]{0,40}?\b(?:made\s+(?:of|from)|composed\s+of|"
                     r"consist(?:ed|ing)\s+of|of|using|with)\s+(?:an?\s+|the\s+)?(" + MATERIAL + r")\b"),
        FieldPattern(r"\b(" + MATERIAL + r")\s+(?:was|were)\s+used\s+as\s+(?:the\s+)?(?:bio)?anodes?\b"),
    ], canonical=TextStyle.LOWER, token_map=MATERIAL_TOKENS),

    _field("cathodeMaterials", _ELECTRODE, FieldKind.LIST, [
        FieldPattern(r"\b(" + MATERIAL + r")(?:[\s-]+(?:based|modified))?"
                     r"(?:[\s-]+(?:air|gas[\s-]+diffusion))?[\s-]+(?:bio)?cathodes?\b"),
        FieldPattern(r"\b(?:bio)?cathodes?\b[^.;]{0,40}?\b(?:made\s+(?:of|from)|composed\s+of|"
                     r"consist(?:ed|ing)\s+of|of|using|with)\s+(?:an?\s+|the\s+)?(" + MATERIAL + r")\b"),
        FieldPattern(r"\b(" + MATERIAL + r")\s+(?:was|were)\s+used\s+as\s+(?:the\s+)?(?:bio)?cathodes?\b"),
    ], canonical=TextStyle.LOWER, token_map=MATERIAL_TOKENS),

    _field("anodeArea", _ELECTRODE, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:bio)?anode\s+(?:\w+\s+)?(?:surface\s+)?areas?\b", AREA_UNIT),
        _bare(AREA_UNIT, r"\s+(?:[\w]+[\s-]+){0,3}?(?:bio)?anodes?\b"),
        _measured(r"\b(?:electrode|projected)\s+(?:surface\s+)?areas?\b", AREA_UNIT, conditions="electrode"),
    ], quantity=QuantityKind.AREA),

    _field("cathodeArea", _ELECTRODE, FieldKind.MEASUREMENT, [
        _measured(r"\bcathode\s+(?:\w+\s+)?(?:surface\s+)?areas?\b", AREA_UNIT),
        _bare(AREA_UNIT, r"\s+(?:[\w]+[\s-]+){0,3}?cathodes?\b"),
    ], quantity=QuantityKind.AREA),

    _field("spacing", _ELECTRODE, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:electrode|inter[\s-]*electrode|anode[\s-]+cathode)\s+"
                  r"(?:spacing|distance|gap|separation)\b", LENGTH_UNIT),
        _measured(r"\bdistance\s+between\s+(?:the\s+)?(?:electrodes|anode\s+and\s+cathode)\b", LENGTH_UNIT),
        _bare(LENGTH_UNIT, r"\s+(?:electrode\s+)?(?:spacing|separation|gap)\b"),
    ], quantity=QuantityKind.LENGTH),

    _field("modifications", _ELECTRODE, FieldKind.LIST, [
        FieldPattern(r"\b(carbon\s+nanotubes?|CNTs?|MWCNTs?|SWCNTs?)[\s-]+"
                     r"(?:modified|coated|deposited|decorated)\b"),
        FieldPattern(r"\b(reduced\s+graphene\s+oxide|graphene\s+oxide|graphene|rGO|GO)[\s-]+"
                     r"(?:modified|coated)\b"),
        FieldPattern(r"\b(platinum|Pt|gold|Au|silver|Ag|palladium|Pd)[\s-]+"
                     r"(?:catalysts?|coating|nanoparticles?)\b"),
        FieldPattern(r"\b(biochar|activated\s+carbon)[\s-]+(?:modified|treated)\b"),
        FieldPattern(r"\b(polyaniline|PANI|polypyrrole|PPy|PEDOT)[\s-]+"
                     r"(?:coating|coated|modification|modified)\b"),
        FieldPattern(r"\b(MXene|Ti3C2Tx?)[\s-]+(?:modified|coated|coating|decorated)\b"),
        FieldPattern(r"\b((?:heat|acid|ammonia|plasma)[\s-]+treat(?:ed|ment))\b"),
    ], canonical=TextStyle.LOWER, token_map={
        "cnt": "CNT", "cnts": "CNT", "mwcnt": "MWCNT", "mwcnts": "MWCNT",
        "swcnt": "SWCNT", "swcnts": "SWCNT", "rgo": "rGO", "go": "GO",
        "pt": "Pt", "au": "Au", "ag": "Ag", "pd": "Pd", "pani": "PANI",
        "ppy": "PPy", "pedot": "PEDOT", "mxene": "MXene",
        "ti3c2tx": "Ti3C2Tx", "ti3c2t": "Ti3C2Tx",
    }),

    # Biological parameters
    _field("organisms", _BIO, FieldKind.LIST, [
        FieldPattern(r"\b((?:" + GENERA + r")(?:\s+(?!(?:" + EPITHET_STOP_WORDS + r")\b)(?-i:[a-z]{4,}))?)\b"),
        FieldPattern(r"\b((?-i:[A-Z])\.\s?(?:" + KNOWN_EPITHETS + r"))\b"),
        FieldPattern(r"\bmixed\s+(?:microbial\s+)?(?:cultures?|consortia|consortium|communit(?:y|ies))\b",
                     token="mixed culture"),
    ], canonical=TextStyle.SPECIES),

    _field("inoculumSource", _BIO, FieldKind.TEXT, [
        FieldPattern(r"\b(anaerobic\s+sludge|activated\s+sludge|digester\s+sludge|"
                     r"wastewater\s+treatment\s+plant|WWTP|primary\s+clarifier)\b"),
        FieldPattern(r"\b((?:river|marine|lake|pond|freshwater)\s+sediments?|sediments?)\b"),
        FieldPattern(r"\b(compost|garden\s+soil|paddy\s+soil)\b"),
        FieldPattern(r"\b((?:pre[\s-]*acclimated|enriched|mixed)\s+"
                     r"(?:cultures?|consortium|consortia|communit(?:y|ies)))\b"),
    ], canonical=TextStyle.LOWER, token_map={"wwtp": "wastewater treatment plant"}),

    _field("biofilmAge", _BIO, FieldKind.MEASUREMENT, [
        FieldPattern(NUM + r"[\s-]*" + AGE_UNIT + r"[\s-]*old\s+biofilms?\b"),
        FieldPattern(r"\bbiofilms?\b" + GAP + NUM + r"\s*" + AGE_UNIT + r"\s*old\b"),
        FieldPattern(r"\bmature\s+biofilms?\b", token="mature"),
        FieldPattern(r"\b(?:young|immature)\s+biofilms?\b", token="young"),
    ], quantity=QuantityKind.TIME),

    _field("biofilmThickness", _BIO, FieldKind.MEASUREMENT, [
        _measured(r"\bbiofilms?\s+thickness(?:es)?\b", THICKNESS_UNIT),
        _measured(r"\bthickness\s+of\s+(?:the\s+)?biofilms?\b", THICKNESS_UNIT),
        _bare(THICKNESS_UNIT, r"[\s-]*thick\s+biofilms?\b"),
    ], quantity=QuantityKind.THICKNESS),

    # Performance metrics
    _field("powerDensity", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:maximum|max\.?|peak)\s+(?:power\s+densit(?:y|ies)|power\s+output|power)\b",
                  POWER_UNIT, conditions="maximum"),
        _measured(r"\bpower\s+densit(?:y|ies)\b", POWER_UNIT),
        _bare(POWER_UNIT),
    ], quantity=QuantityKind.POWER_DENSITY),

    _field("volumetricPowerDensity", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\bvolumetric\s+power(?:\s+densit(?:y|ies))?\b", VOLUMETRIC_POWER_UNIT),
        _bare(VOLUMETRIC_POWER_UNIT),
    ], quantity=QuantityKind.VOLUMETRIC_POWER),

    _field("currentDensity", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:maximum|max\.?|peak)\s+current\s+densit(?:y|ies)\b", CURRENT_UNIT,
                  conditions="maximum"),
        _measured(r"\bcurrent\s+densit(?:y|ies)\b", CURRENT_UNIT),
        _bare(CURRENT_UNIT),
    ], quantity=QuantityKind.CURRENT_DENSITY),

    _field("voltage", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:maximum|peak|cell|output|operating)\s+voltages?\b", VOLTAGE_UNIT),
        _measured(r"\b(?:open[\s-]*circuit\s+(?:voltage|potential)|OCV|OCP)\b", VOLTAGE_UNIT,
                  conditions="open circuit"),
        _bare(VOLTAGE_UNIT, r"(?:\s*(?:at|@|under)\s+(?:the\s+)?(maximum\s+power(?:\s+point)?|"
                            r"peak\s+power|open[\s-]+circuit|short[\s-]+circuit))?"),
    ], quantity=QuantityKind.VOLTAGE),

    _field("coulombicEfficiency", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\bcoulombic\s+efficienc(?:y|ies)\b", PERCENT_UNIT),
        _bare(PERCENT_UNIT, r"\s*(?:of\s+)?(?:coulombic\s+efficiency|(?-i:CE))\b"),
        _measured(r"\b(?-i:CE)s?\b", PERCENT_UNIT),
    ], quantity=QuantityKind.PERCENT),

    _field("energyEfficiency", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\benergy\s+efficienc(?:y|ies)\b", PERCENT_UNIT),
        _bare(PERCENT_UNIT, r"\s*(?:of\s+)?energy\s+efficiency\b"),
    ], quantity=QuantityKind.PERCENT),

    _field("voltageEfficiency", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\bvoltage\s+efficienc(?:y|ies)\b", PERCENT_UNIT),
        _bare(PERCENT_UNIT, r"\s*(?:of\s+)?voltage\s+efficiency\b"),
    ], quantity=QuantityKind.PERCENT),

    _field("codRemoval", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:COD|chemical\s+oxygen\s+demand)\s+removals?(?:\s+efficienc(?:y|ies))?\b",
                  PERCENT_UNIT),
        _bare(PERCENT_UNIT, r"\s+(?:of\s+)?(?:the\s+)?(?:COD|chemical\s+oxygen\s+demand)\b"),
    ], quantity=QuantityKind.PERCENT),

    _field("hydrogenProductionRate", _PERF, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:hydrogen|H2)\s+(?:production|evolution|generation)(?:\s+rates?)?\b",
                  _production_unit(require_tag=False)),
        _bare(_production_unit(require_tag=True)),
    ], quantity=QuantityKind.PRODUCTION_RATE),

    # Operational parameters
    _field("externalResistance", _OPS, FieldKind.MEASUREMENT, [
        _measured(r"\bexternal\s+(?:resistances?|resistors?|loads?)\b", OHM_UNIT),
        _bare(OHM_UNIT, r"\s+(?:external\s+)?(?:resistors?|resistances?|loads?)\b"),
        _measured(r"\bload\s+resistances?\b", OHM_UNIT),
    ], quantity=QuantityKind.RESISTANCE),

    _field("hrt", _OPS, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:hydraulic\s+retention\s+times?|HRTs?)\b", TIME_UNIT),
        _bare(TIME_UNIT, r"\s+(?:of\s+)?(?:hydraulic\s+retention\s+time|HRT)\b"),
    ], quantity=QuantityKind.TIME),

    _field("olr", _OPS, FieldKind.MEASUREMENT, [
        _measured(r"\b(?:organic\s+loading\s+rates?|OLRs?)\b", LOADING_UNIT),
        _bare(LOADING_UNIT),
    ], quantity=QuantityKind.LOADING_RATE),

    _field("feedingMode", _OPS, FieldKind.TEXT, [
        FieldPattern(r"\b(sequencing\s+batch|fed[\s-]*batch|semi[\s-]*continuous|continuous(?:[\s-]*flow)?|batch)"
                     r"\s+(?:mode|operation|feeding|conditions?|reactors?|system)\b"),
        FieldPattern(r"\b(?:operated|run)\s+(?:in\s+)?(?:an?\s+)?"
                     r"(fed[\s-]*batch|semi[\s-]*continuous|continuous|batch)\b"),
    ], canonical=TextStyle.HYPHEN),

    # Electrochemical data
    _field("internalResistance", _EC, FieldKind.MEASUREMENT, [
        _measured(r"\binternal\s+resistances?\b", OHM_UNIT),
        _bare(OHM_UNIT, r"\s+(?:of\s+)?internal\s+resistance\b"),
    ], quantity=QuantityKind.RESISTANCE),

    _field("chargeTransferResistance", _EC, FieldKind.MEASUREMENT, [
        _measured(r"\bcharge[\s-]+transfer\s+resistances?\b", OHM_UNIT),
        _measured(r"\bR\s*ct\b", OHM_UNIT),
    ], quantity=QuantityKind.RESISTANCE),

    _field("voltammetryTypes", _EC, FieldKind.LIST, [
        FieldPattern(r"\b(?:cyclic\s+voltammetr(?:y|ic)|(?-i:CV))\b", token="cyclic voltammetry"),
        FieldPattern(r"\b(?:linear\s+sweep\s+voltammetr(?:y|ic)|(?-i:LSV))\b", token="linear sweep voltammetry"),
        FieldPattern(r"\b(?:differential\s+pulse\s+voltammetr(?:y|ic)|(?-i:DPV))\b",
                     token="differential pulse voltammetry"),
        FieldPattern(r"\b(?:square[\s-]+wave\s+voltammetr(?:y|ic)|(?-i:SWV))\b", token="square wave voltammetry"),
    ]),

    _field("scanRate", _EC, FieldKind.MEASUREMENT, [
        _measured(r"\bscan(?:ning)?\s+rates?\b", SCAN_UNIT),
        _bare(SCAN_UNIT),
    ], quantity=QuantityKind.SCAN_RATE),

    _field("impedanceSpectroscopy", _EC, FieldKind.TEXT, [
        FieldPattern(r"\b(?:electrochemical\s+impedance\s+spectroscopy|(?-i:EIS)|impedance\s+spectr\w+|"
                     r"nyquist\s+plots?)\b", token="EIS"),
    ]),
]


def build_library(specs: Iterable[FieldSpec]) -> Dict[str, FieldSpec]:
    """
    Index field specs by name after checking every regex compiles.

    Raises:
        InvalidPatternError: If a pattern is not a valid regular expression
    """
    library: Dict[str, FieldSpec] = {}
    for spec in specs:
        for pattern in spec.patterns:
            try:
                _compile(pattern.regex)
            except re.error as e:
                raise InvalidPatternError(spec.name, pattern.regex, str(e)) from e
        library[spec.name] = spec
    return library


PATTERN_LIBRARY: Dict[str, FieldSpec] = build_library(_FIELD_SPECS)

# Lookup by name with case and underscores ignored: "power_density", "powerDensity", "ph"
_NAME_INDEX: Dict[str, str] = {name.replace("_", "").lower(): name for name in PATTERN_LIBRARY}


def get_field_spec(name: str) -> FieldSpec:
    """Look up a field by camelCase or snake_case name."""
    if name in PATTERN_LIBRARY:
        return PATTERN_LIBRARY[name]
    canonical = _NAME_INDEX.get(name.replace("_", "").lower())
    if canonical is None:
        raise UnknownFieldError(name)
    return PATTERN_LIBRARY[canonical]


def fields_for_category(category: str) -> Tuple[FieldSpec, ...]:
    """Return the fields of a category in catalog order."""
    return tuple(spec for spec in PATTERN_LIBRARY.values() if spec.category == category)
