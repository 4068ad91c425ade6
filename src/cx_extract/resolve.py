from __future__ import annotations

import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Protocol

from tqdm import tqdm

from .content import ResolvedContent, ResourceReference
from .http_client import FetchError, FetchResult


class Fetcher(Protocol):
    def get(self, url: str) -> FetchResult: ...


class ContentResolver:
    def __init__(self, http: Fetcher, *, max_workers: int = 8) -> None:
        self.http = http
        self.max_workers = max(1, max_workers)

    def _fetch_one(self, ref: ResourceReference) -> ResolvedContent:
        if not ref.locator:
            return ResolvedContent(
                source_label=ref.label, text="", succeeded=False, error="no locator"
            )
        try:
            res = self.http.get(ref.locator)
        except FetchError as e:
            tqdm.write(f"Warning: failed to load {ref.locator}: {e.reason}", file=sys.stderr)
            return ResolvedContent(
                source_label=ref.label, text="", succeeded=False, error=str(e)
            )
        return ResolvedContent(source_label=ref.label, text=res.text, succeeded=True)

    def resolve(self, refs: Sequence[ResourceReference]) -> list[ResolvedContent]:
        """Materialize every reference; one result per input, in input order.

        Inline references pass through. External ones are fetched concurrently
        and a failed fetch becomes an unsuccessful entry instead of an error.
        """

        results: list[ResolvedContent | None] = [None] * len(refs)
        external: list[int] = []
        for idx, ref in enumerate(refs):
            if ref.is_external:
                external.append(idx)
            else:
                results[idx] = ResolvedContent(
                    source_label=ref.label,
                    text=ref.raw_content or "",
                    succeeded=True,
                )

        if external:
            workers = min(self.max_workers, len(external))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                future_map = {pool.submit(self._fetch_one, refs[i]): i for i in external}
                with tqdm(total=len(external), desc="Downloading", unit="file") as bar:
                    for fut in as_completed(future_map):
                        results[future_map[fut]] = fut.result()
                        bar.update(1)

        return [r for r in results if r is not None]


def merge(results: Sequence[ResolvedContent]) -> str:
    blocks = [
        f"/* {r.source_label} */\n{r.text}" for r in results if r.succeeded
    ]
    return "\n\n".join(blocks)
