"""Per-paper summary state (transient, UI-scoped)."""

from dataclasses import dataclass
from typing import ClassVar, Union

from rxivcal.utils.text import split_bullets


@dataclass(frozen=True)
class NotRequested:
    """No summary has been asked for this DOI yet."""

    status: ClassVar[str] = "not_requested"


@dataclass(frozen=True)
class Loading:
    """A summarization call is in flight."""

    status: ClassVar[str] = "loading"


@dataclass(frozen=True)
class Ready:
    """Summary text arrived."""

    status: ClassVar[str] = "ready"

    text: str

    @property
    def bullets(self) -> list[str]:
        return split_bullets(self.text)


@dataclass(frozen=True)
class Failed:
    """The last summarization attempt failed; may be retried."""

    status: ClassVar[str] = "failed"

    reason: str


SummaryState = Union[NotRequested, Loading, Ready, Failed]

NOT_REQUESTED = NotRequested()
LOADING = Loading()


class SummaryBook:
    """Mapping of DOI → :data:`SummaryState`.

    Cleared whenever the day panel closes or the displayed month
    changes; nothing here is ever persisted.
    """

    def __init__(self) -> None:
        self._states: dict[str, SummaryState] = {}

    def get(self, doi: str) -> SummaryState:
        return self._states.get(doi, NOT_REQUESTED)

    def should_request(self, doi: str) -> bool:
        """True unless a request is in flight or a summary is already shown."""
        return not isinstance(self.get(doi), (Loading, Ready))

    def mark_loading(self, doi: str) -> None:
        self._states[doi] = LOADING

    def mark_ready(self, doi: str, text: str) -> None:
        self._states[doi] = Ready(text)

    def mark_failed(self, doi: str, reason: str) -> None:
        self._states[doi] = Failed(reason)

    def clear(self) -> None:
        self._states.clear()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, doi: object) -> bool:
        return doi in self._states
