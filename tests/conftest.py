import sys
import pathlib
from typing import Any, Dict, Iterable, List, Optional

import pytest

# Make project root importable
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))


class FakeResponse:
    """Stands in for requests.Response: buffered body or a list of chunks."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"",
        chunks: Optional[Iterable[bytes]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self._chunks = chunks
        self._error = error
        self.closed = False
        self.pulled = 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def iter_content(self, chunk_size=None):
        for chunk in self._chunks or [self.content]:
            self.pulled += 1
            yield chunk
        if self._error is not None:
            raise self._error

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FakeSession:
    """Records every post() call and replies with a canned response."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None) -> None:
        self.response = response or FakeResponse()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_session():
    def _make(post_error=None, stream_error=None, **kwargs) -> FakeSession:
        return FakeSession(FakeResponse(error=stream_error, **kwargs), error=post_error)

    return _make


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("OPENROUTER_API_KEY", "EVOCAITION_API", "EVOCAITION_MODEL_ID"):
        monkeypatch.delenv(var, raising=False)
