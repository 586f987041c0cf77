from __future__ import annotations

import json
import logging
import re
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from src.openev.models import FieldValue, Number, Numeric, Other, RawRecord, RecordResult, Row
from src.openev.reconcile import DATA_TYPE_PRIORITY, reconcile_periods

logger = logging.getLogger(__name__)

# =============================================================================
# Open-EV-Charts data-file extractor
#
# Source files contain calls of the shape:
#   db.insert(db.countries.US, "2017-Q1", db.dsTypes.ElectricCarsTotal, "https://...",
#     { "other": 21415 });
#
# Each match becomes one RecordResult. A body that cannot be parsed is reported
# as a failed result and skipped; it never aborts the scan.
# =============================================================================

RECOGNIZED_DATA_TYPES = frozenset(DATA_TYPE_PRIORITY)

_STRING_LITERAL = r'"(?:[^"\\]|\\.)*"'
STRING_RX = re.compile(_STRING_LITERAL)
STRING_OR_COMMENT_RX = re.compile(r"(" + _STRING_LITERAL + r")|//[^\n]*|/\*[\s\S]*?\*/")
TRAILING_COMMA_RX = re.compile(r",(\s*})")
BARE_KEY_RX = re.compile(r"([{,]\s*)([A-Za-z_$][\w$]*)(\s*:)")


def build_call_pattern(region: str) -> re.Pattern:
    return re.compile(
        r"db\.insert\(\s*db\.countries\." + re.escape(region) + r"\s*,\s*"
        r'"([^"]+)"\s*,\s*'  # period
        r"db\.dsTypes\.(\w+)\s*,\s*"  # data type
        r'"[^"]*"\s*,\s*'  # source reference (ignored)
        r"\{([\s\S]*?)\}\s*\)"
    )


# ----------------------------
# Body cleaning / parsing
# ----------------------------

def strip_comments(text: str) -> str:
    # string literals are matched first so "https://..." values survive
    return STRING_OR_COMMENT_RX.sub(lambda m: m.group(1) or "", text)


def _sub_outside_strings(text: str, rx: re.Pattern, repl: str) -> str:
    out: List[str] = []
    pos = 0
    for m in STRING_RX.finditer(text):
        out.append(rx.sub(repl, text[pos:m.start()]))
        out.append(m.group(0))
        pos = m.end()
    out.append(rx.sub(repl, text[pos:]))
    return "".join(out)


def clean_body(body: str) -> str:
    """
    Turn the JS object literal between the braces into JSON text:
    comments removed, trailing commas dropped, bare keys quoted.
    """
    obj = "{" + strip_comments(body.strip()) + "}"
    obj = _sub_outside_strings(obj, TRAILING_COMMA_RX, r"\1")
    obj = _sub_outside_strings(obj, BARE_KEY_RX, r'\1"\2"\3')
    return obj


def _reject_constant(name: str) -> float:
    raise ValueError(f"unsupported constant {name}")


def tag_value(value: object) -> FieldValue:
    # bool is an int subclass but never a sales count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return Other(value)
    return Numeric(value)


def parse_body(body: str) -> Tuple[Optional[Dict[str, FieldValue]], Optional[str]]:
    """Returns (fields, None) on success or (None, error) when the body is not valid."""
    try:
        obj = json.loads(clean_body(body), parse_constant=_reject_constant)
    except ValueError as e:
        return None, str(e)
    if not isinstance(obj, dict):
        return None, f"expected an object, got {type(obj).__name__}"
    return {str(k): tag_value(v) for k, v in obj.items()}, None


def sum_numeric(fields: Dict[str, FieldValue]) -> Number:
    return sum((v.value for v in fields.values() if isinstance(v, Numeric)), 0)


# ----------------------------
# Scanning
# ----------------------------

def scan_records(text: str, region: str) -> Iterator[RecordResult]:
    pattern = build_call_pattern(region)
    for m in pattern.finditer(text or ""):
        period, data_type, body = m.group(1), m.group(2), m.group(3)
        fields, error = parse_body(body)
        if fields is None:
            logger.warning("Skipping unparsable record %s %s %s: %s", region, period, data_type, error)
            yield RecordResult(period=period, data_type=data_type, error=error)
            continue
        record = RawRecord(region=region, period=period, data_type=data_type, fields=fields)
        yield RecordResult(period=period, data_type=data_type, record=record)


def collect_period_records(results: Iterable[RecordResult]) -> Dict[str, Dict[str, Number]]:
    """Accumulate {period: {data_type: numeric sum}}; later records win for the same key."""
    periods: Dict[str, Dict[str, Number]] = {}
    for res in results:
        if not res.ok:
            continue
        rec = res.record
        if rec.data_type not in RECOGNIZED_DATA_TYPES:
            logger.debug("Ignoring data type %s for %s %s", rec.data_type, rec.region, rec.period)
            continue
        periods.setdefault(rec.period, {})[rec.data_type] = sum_numeric(rec.fields)
    return periods


def extract_rows(text: str, region: str) -> List[Row]:
    rows = reconcile_periods(collect_period_records(scan_records(text, region)))
    logger.debug("Extracted %d periods for %s", len(rows), region)
    return rows
