import sys
import time
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from cx_extract.http_client import FetchError, FetchResult  # noqa: E402


class FakeHttp:
    """Serves canned bodies by URL; unknown URLs fail like a 404."""

    def __init__(self, pages: dict[str, str], delays: dict[str, float] | None = None) -> None:
        self.pages = pages
        self.delays = delays or {}
        self.requested: list[str] = []

    def get(self, url: str) -> FetchResult:
        self.requested.append(url)
        delay = self.delays.get(url)
        if delay:
            time.sleep(delay)
        if url not in self.pages:
            raise FetchError(url, "HTTP 404 Not Found")
        return FetchResult(url=url, text=self.pages[url])


class FixedSelection:
    """Selection service double that returns a fixed list of indices."""

    def __init__(self, indices: list[int]) -> None:
        self.indices = indices
        self.calls: list[list[str]] = []

    def present_choices(self, items, *, message):
        self.calls.append(list(items))
        return list(self.indices)


@pytest.fixture
def fake_http_factory():
    return FakeHttp


@pytest.fixture
def fixed_selection_factory():
    return FixedSelection
