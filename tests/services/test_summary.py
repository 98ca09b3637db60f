import pytest

from airnope.exceptions import SummarizationError
from airnope.services.summary import Summarizer


class CountingSummarizer(Summarizer):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls = []
        self.error = None

    def _run(self, text: str) -> str:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return text.split(".")[0]


@pytest.mark.asyncio
async def test_summary_is_cached():
    summarizer = CountingSummarizer()
    text = "Claim your airdrop. Limited time. Connect wallet."
    assert await summarizer.summarize(text) == "Claim your airdrop"
    assert await summarizer.summarize(text) == "Claim your airdrop"
    assert summarizer.calls == [text]


@pytest.mark.asyncio
async def test_summary_failure_is_wrapped_and_not_cached():
    summarizer = CountingSummarizer()
    summarizer.error = RuntimeError("model crashed")
    with pytest.raises(SummarizationError):
        await summarizer.summarize("text")
    summarizer.error = None
    assert await summarizer.summarize("text") == "text"
    assert summarizer.calls == ["text", "text"]
