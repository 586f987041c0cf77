from __future__ import annotations

from typing import Optional


class FetchFailure(RuntimeError):
    """A region data file could not be fetched (network fault or non-2xx status)."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"{status}" if status is not None else reason
        super().__init__(f"Failed to fetch {url}: {detail}")


class EmptySelection(ValueError):
    def __init__(self) -> None:
        super().__init__("Select at least one country.")
