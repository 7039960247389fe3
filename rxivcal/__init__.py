"""rxivcal - bioRxiv monthly calendar explorer.

A small local web app (and CLI) that pages through the bioRxiv API
for a whole month, lays the preprints out on a calendar heatmap and
summarizes abstracts with Gemini on demand.
"""

__version__ = "1.0.0"

from rxivcal.config import Settings
from rxivcal.models.paper import CalendarDay, MonthQuery, Paper

__all__ = ["CalendarDay", "MonthQuery", "Paper", "Settings", "__version__"]
