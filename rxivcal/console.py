"""Console UI for terminal output using Rich."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rxivcal.models.paper import CalendarDay, MonthQuery, Paper
from rxivcal.services.calendar_service import WEEKDAYS, month_weeks

# Rich styles per heat tier
TIER_STYLES = {
    "high": "bold white on green4",
    "medium": "white on green3",
    "low": "black on pale_green1",
    "none": "",
}


class ConsoleUI:
    """Rich-based console UI for calendars, paper lists and summaries."""

    def __init__(self, console: Console | None = None):
        """Initialize console."""
        self.console = console or Console()

    def error(self, message: str) -> None:
        """Print an error message in red."""
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    def display_month(
        self,
        query: MonthQuery,
        days: list[CalendarDay],
        total: int,
        search: str = "",
    ) -> None:
        """Render the 6x7 grid with paper counts coloured by heat tier.

        Args:
            query: Displayed month
            days: The 42 grid cells
            total: Papers fetched for the month (before filtering)
            search: Active search query, if any
        """
        table = Table(title=query.label, show_lines=True)
        for name in WEEKDAYS:
            table.add_column(name, justify="center", width=8)

        for week in month_weeks(days):
            cells = []
            for day in week:
                if not day.is_current_month:
                    cells.append(f"[dim]{day.date.day}[/dim]")
                    continue
                label = f"[underline]{day.date.day}[/underline]" if day.is_today else str(day.date.day)
                if day.count:
                    style = TIER_STYLES[day.tier]
                    label += f"\n[{style}] {day.count} [/]"
                cells.append(label)
            table.add_row(*cells)

        self.console.print(table)
        matched = sum(d.count for d in days)
        if search:
            self.console.print(
                f'Showing results for "[bold]{escape(search)}[/bold]" ({matched} of {total} papers)'
            )
        else:
            self.console.print(f"{total} papers")

    def display_papers(self, day: CalendarDay) -> None:
        """List the papers recorded on one day."""
        table = Table(title=f"{day.key} ({day.count} papers)")
        table.add_column("#", justify="right")
        table.add_column("Category", overflow="fold")
        table.add_column("Title", overflow="fold")
        table.add_column("DOI", overflow="fold")

        for i, paper in enumerate(day.papers, 1):
            table.add_row(str(i), escape(paper.category or "-"), escape(paper.title), paper.doi)

        if day.papers:
            self.console.print(table)
            self.console.print(
                "Tip: `rxivcal summarize <DOI> --date YYYY-MM-DD` for an AI summary"
            )
        else:
            self.console.print("No papers found for this date.")

    def display_bullets(self, paper: Paper, title: str, lines: list[str]) -> None:
        """Print a summary/explanation as a bullet list under the paper title."""
        self.console.print(f"[bold]{escape(paper.title)}[/bold]")
        self.console.print(f"[dim]{paper.doi_url}[/dim]")
        self.console.print(f"\n[bold green]{title}[/bold green]")
        for line in lines:
            self.console.print(f"  • {escape(line)}")
