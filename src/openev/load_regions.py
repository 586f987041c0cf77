from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from src.openev.errors import EmptySelection, FetchFailure
from src.openev.extract_records import extract_rows
from src.openev.models import Pivot, Row, SessionState
from src.openev.pivot import build_pivot
from src.openev.year_range import default_range, filter_pivot, with_end, with_start
from src.utils.config import SourceSettings
from src.utils.http_client import fetch_text

logger = logging.getLogger(__name__)

FetchFn = Callable[[str, SourceSettings], str]

LOAD_ERROR_MESSAGE = "Error loading data (see console)."


def fetch_region_text(region: str, settings: SourceSettings) -> str:
    return fetch_text(settings.data_url(region), headers=settings.headers, timeout_seconds=settings.timeout_seconds)


def fetch_region_rows(region: str, settings: SourceSettings, fetch: FetchFn = fetch_region_text) -> List[Row]:
    text = fetch(region, settings)
    rows = extract_rows(text, region)
    if not rows:
        logger.info("No EV data parsed for %s", region)
    return rows


def load_regions(
    regions: Sequence[str],
    settings: SourceSettings,
    fetch: FetchFn = fetch_region_text,
) -> List[Tuple[str, List[Row]]]:
    """
    Fetch and extract every region in parallel. All-or-nothing: the first failure
    (in selection order) cancels what has not started yet and is re-raised, so no
    partial result is ever returned.
    """
    if not regions:
        raise EmptySelection()

    workers = min(settings.max_workers, len(regions))
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(fetch_region_rows, code, settings, fetch) for code in regions]
        datasets: List[Tuple[str, List[Row]]] = []
        try:
            for code, fut in zip(regions, futures):
                datasets.append((code, fut.result()))
        except Exception:
            for fut in futures:
                fut.cancel()
            raise
    return datasets


# ----------------------------
# Session transitions
# ----------------------------

def reload_session(
    state: SessionState,
    regions: Sequence[str],
    settings: SourceSettings,
    fetch: FetchFn = fetch_region_text,
) -> SessionState:
    """
    Rebuild the pivot for a new selection. On an empty selection or a failed
    fetch the previous pivot is kept and only the status changes.
    """
    try:
        datasets = load_regions(regions, settings, fetch=fetch)
    except EmptySelection as e:
        return replace(state, status=str(e), error=None)
    except FetchFailure as e:
        logger.error("Load failed for %s: %s", ", ".join(regions), e)
        return replace(state, status=LOAD_ERROR_MESSAGE, error=str(e))

    pivot = build_pivot(datasets)
    return SessionState(
        selected=tuple(regions),
        pivot=pivot,
        year_range=default_range(pivot),
        status=f"Loaded {len(pivot)} periods for {len(regions)} country(ies).",
        error=None,
    )


def update_year_start(state: SessionState, start: Optional[int]) -> SessionState:
    return replace(state, year_range=with_start(state.year_range, start))


def update_year_end(state: SessionState, end: Optional[int]) -> SessionState:
    return replace(state, year_range=with_end(state.year_range, end))


def current_view(state: SessionState) -> Pivot:
    return filter_pivot(state.pivot, state.year_range)
