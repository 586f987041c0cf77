from __future__ import annotations

from typing import Dict

import requests

from src.openev.errors import FetchFailure


def fetch_text(url: str, headers: Dict[str, str], timeout_seconds: int) -> str:
    # single attempt: any failure is terminal for this load
    try:
        r = requests.get(url, headers=headers, timeout=timeout_seconds)
    except requests.RequestException as e:
        raise FetchFailure(url, reason=str(e)) from e
    if not r.ok:
        raise FetchFailure(url, status=r.status_code, reason=str(r.reason or ""))
    r.encoding = r.encoding or "utf-8"
    return r.text
