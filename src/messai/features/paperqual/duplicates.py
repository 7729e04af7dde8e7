"""Duplicate detection by normalized DOI or title."""

import re
import string
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

_DOI_PREFIXES = ("https://doi.org/", "http://doi.org/", "https://dx.doi.org/", "http://dx.doi.org/", "doi:")
_PUNCTUATION = re.compile(f"[{re.escape(string.punctuation)}\u2010\u2011\u2013\u2014\u2018\u2019\u201c\u201d]+")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class DuplicateGroup:
    reason: str            # "doi" or "title"
    key: str
    paper_ids: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"reason": self.reason, "key": self.key, "paperIds": list(self.paper_ids)}


def normalize_doi(doi: Optional[str]) -> Optional[str]:
    if not doi:
        return None
    value = doi.strip().lower()
    for prefix in _DOI_PREFIXES:
        if value.startswith(prefix):
            value = value[len(prefix):]
            break
    return value or None


def normalize_title(title: Optional[str]) -> Optional[str]:
    if not title:
        return None
    value = _PUNCTUATION.sub(" ", title.casefold())
    value = _WHITESPACE.sub(" ", value).strip()
    return value or None


def find_duplicates(papers: Iterable[Mapping[str, Any]]) -> List[DuplicateGroup]:
    """
    Group papers that share a normalized DOI or a normalized title.

    A paper already grouped by DOI is not grouped again by title. DOI groups
    come before title groups; within each, groups and their ids keep
    first-seen order.
    """
    by_doi: Dict[str, List[Any]] = {}
    by_title: Dict[str, List[Any]] = {}
    order: List[Tuple[str, str]] = []
    records = [dict(paper) for paper in papers]

    for paper in records:
        doi = normalize_doi(paper.get("doi"))
        if doi is None:
            continue
        if doi not in by_doi:
            by_doi[doi] = []
            order.append(("doi", doi))
        by_doi[doi].append(paper.get("id"))

    doi_grouped = {pid for ids in by_doi.values() if len(ids) > 1 for pid in ids}
    for paper in records:
        if paper.get("id") in doi_grouped:
            continue
        title = normalize_title(paper.get("title"))
        if title is None:
            continue
        if title not in by_title:
            by_title[title] = []
            order.append(("title", title))
        by_title[title].append(paper.get("id"))

    groups = []
    for reason, key in order:
        ids = by_doi[key] if reason == "doi" else by_title[key]
        if len(ids) > 1:
            groups.append(DuplicateGroup(reason=reason, key=key, paper_ids=ids))
    return groups
