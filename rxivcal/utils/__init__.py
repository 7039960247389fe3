"""Utility functions."""

from rxivcal.utils.text import clean_abstract, normalize_doi, parse_day, split_bullets

__all__ = ["clean_abstract", "normalize_doi", "parse_day", "split_bullets"]
