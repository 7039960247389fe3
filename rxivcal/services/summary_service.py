"""Gemini-backed abstract summarization and jargon explanation."""

import logging
from typing import Optional

from google import genai

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

SUMMARY_PROMPT = (
    "Summarize the following scientific abstract into 3 concise bullet points "
    "suitable for a quick overview. Use plain language where possible.\n\n"
    "Abstract:\n{abstract}"
)
JARGON_PROMPT = (
    "Identify the top 3 most complex technical terms in this text and briefly "
    'explain them for a general audience:\n\n"{text}"'
)

NO_SUMMARY = "No summary generated."
NO_EXPLANATION = "No explanations available."


class SummarizationError(RuntimeError):
    """Raised when the text-generation provider call fails for any reason."""


class SummaryService:
    """One-shot text generation against the Gemini API.

    The ``genai.Client`` is created lazily on first use so the app can
    start (and render calendars) without a key configured.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        client: Optional[genai.Client] = None,
    ):
        self.api_key = api_key
        self.model = model
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise SummarizationError(
                    "Gemini API key is not configured (set GEMINI_API_KEY)."
                )
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def configure(self, api_key: Optional[str], model: Optional[str] = None) -> None:
        """Swap credentials; the client is rebuilt on next use."""
        self.api_key = api_key
        if model:
            self.model = model
        self._client = None

    async def summarize(self, abstract: str) -> str:
        """Return a bullet-style summary of *abstract*.

        Raises:
            SummarizationError: On missing key or any provider/transport error
        """
        text = await self._generate(
            SUMMARY_PROMPT.format(abstract=abstract),
            failure="Failed to generate summary.",
            what="summarizing abstract",
        )
        return text or NO_SUMMARY

    async def explain_jargon(self, text: str) -> str:
        """Explain the three hardest technical terms in *text*.

        Raises:
            SummarizationError: On missing key or any provider/transport error
        """
        out = await self._generate(
            JARGON_PROMPT.format(text=text),
            failure="Failed to explain terms.",
            what="explaining jargon",
        )
        return out or NO_EXPLANATION

    async def _generate(self, contents: str, failure: str, what: str) -> str:
        client = self.client
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
            )
        except Exception as e:
            logger.error("Error %s: %s", what, e)
            raise SummarizationError(failure) from e
        return (getattr(response, "text", None) or "").strip()
