"""Shared helper functions for paper filtering and parsing."""

from typing import Iterable, Optional

from rxivcal.models.paper import Paper


def filter_papers(papers: Iterable[Paper], query: Optional[str]) -> list[Paper]:
    """Filter papers by a free-text query.

    Case-insensitive substring match against title, abstract, authors
    or category; any one field matching is enough.  A blank query
    returns the papers unchanged.

    Args:
        papers: Papers to filter
        query: Search text typed by the user

    Returns:
        Matching papers, in input order
    """
    papers = list(papers)
    if not query or not query.strip():
        return papers

    q = query.strip().lower()

    def matches(paper: Paper) -> bool:
        return (
            q in (paper.title or "").lower()
            or q in (paper.abstract or "").lower()
            or q in (paper.authors or "").lower()
            or q in (paper.category or "").lower()
        )

    return [p for p in papers if matches(p)]


def parse_authors(authors_str: Optional[str]) -> list[str]:
    """Parse bioRxiv's ``Last, F.; Other, A.`` author string into a list."""
    if not authors_str or not authors_str.strip():
        return []
    return [a.strip() for a in authors_str.split(";") if a.strip()]
