"""Command-line interface handlers."""

import argparse
import asyncio
import logging
import sys
from datetime import date
from typing import Optional

from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from rxivcal.config import Settings
from rxivcal.console import ConsoleUI
from rxivcal.gui.helpers import filter_papers
from rxivcal.models.paper import MonthQuery, Paper
from rxivcal.services.biorxiv_service import BiorxivService
from rxivcal.services.calendar_service import build_grid, find_day
from rxivcal.services.summary_service import SummarizationError, SummaryService
from rxivcal.utils.text import normalize_doi, parse_day, split_bullets


class RxivCalCLI:
    """CLI application for rxivcal."""

    def __init__(self, settings: Optional[Settings] = None, ui: Optional[ConsoleUI] = None):
        """Initialize CLI with settings.

        Args:
            settings: Application settings (loads from ``.metadata`` if not provided)
            ui: Console UI (tests pass one writing to a buffer)
        """
        self.settings = settings or Settings.load()
        self.ui = ui or ConsoleUI()
        self.fetcher = BiorxivService(
            base_url=self.settings.api_base,
            server=self.settings.server,
            max_papers=self.settings.max_papers,
            timeout=self.settings.timeout,
        )
        self.summarizer = SummaryService(
            api_key=self.settings.gemini_api_key,
            model=self.settings.gemini_model,
        )

    def _fetch(self, query: MonthQuery) -> list[Paper]:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            console=self.ui.console,
            transient=True,
        ) as progress:
            progress.add_task(f"Fetching {self.settings.server} papers for {query.label}...", total=None)
            return asyncio.run(self.fetcher.fetch_papers_by_month(query.year, query.month))

    def cmd_month(self, query: MonthQuery, search: str = "") -> None:
        """Print the heatmap calendar for a month."""
        papers = self._fetch(query)
        days = build_grid(query.year, query.month, filter_papers(papers, search))
        self.ui.display_month(query, days, total=len(papers), search=search)

    def cmd_day(self, day: date, search: str = "") -> None:
        """List the papers recorded on one day."""
        query = MonthQuery(day.year, day.month - 1)
        papers = self._fetch(query)
        days = build_grid(query.year, query.month, filter_papers(papers, search))
        self.ui.display_papers(find_day(days, day))

    def cmd_summarize(self, doi: str, day: date, explain: bool = False) -> int:
        """Summarize (or explain jargon in) one paper's abstract.

        Returns:
            Process exit code
        """
        doi = normalize_doi(doi)
        papers = self._fetch(MonthQuery(day.year, day.month - 1))
        paper = next((p for p in papers if p.doi == doi), None)
        if paper is None:
            self.ui.error(f"Paper {doi} not found in {day:%B %Y}.")
            return 1

        call = self.summarizer.explain_jargon if explain else self.summarizer.summarize
        try:
            text = asyncio.run(call(paper.abstract))
        except SummarizationError as e:
            self.ui.error(str(e))
            return 1

        title = "Key Terms" if explain else "Gemini Summary"
        self.ui.display_bullets(paper, title, split_bullets(text))
        return 0


def _month_arg(value: str) -> MonthQuery:
    try:
        return MonthQuery.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _day_arg(value: str) -> date:
    try:
        return parse_day(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="rxivcal",
        description="bioRxiv monthly calendar → day list → Gemini summary",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # month command
    month_parser = subparsers.add_parser("month", help="Show the paper heatmap for a month")
    month_parser.add_argument(
        "month",
        nargs="?",
        type=_month_arg,
        default=None,
        help="Month as YYYY-MM (default: current month)",
    )
    month_parser.add_argument("-q", "--query", default="", help="Search filter")

    # day command
    day_parser = subparsers.add_parser("day", help="List papers recorded on a day")
    day_parser.add_argument("date", type=_day_arg, help="Date as YYYY-MM-DD")
    day_parser.add_argument("-q", "--query", default="", help="Search filter")

    # summarize / explain commands
    for name, help_text in (
        ("summarize", "AI bullet summary of a paper's abstract"),
        ("explain", "Explain the hardest technical terms in an abstract"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("doi", help="Paper DOI")
        sub.add_argument(
            "--date",
            type=_day_arg,
            required=True,
            help="Record date of the paper (YYYY-MM-DD)",
        )

    return parser


def run_cli(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )

    cli = RxivCalCLI()

    if args.command == "month":
        cli.cmd_month(args.month or MonthQuery.today(), args.query)
    elif args.command == "day":
        cli.cmd_day(args.date, args.query)
    elif args.command == "summarize":
        return cli.cmd_summarize(args.doi, args.date)
    elif args.command == "explain":
        return cli.cmd_summarize(args.doi, args.date, explain=True)
    return 0


def main() -> None:
    sys.exit(run_cli())
