"""
Parse model replies into page files
"""

import json
import re
from typing import Any, Callable, List, Optional

from pagesmith import fallback
from pagesmith.models import GenerateResult, SessionFiles
from pagesmith.logger import get_logger

logger = get_logger(__name__)

JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)


def extract_fenced_json(text: str) -> Optional[str]:
    """Inner content of the first ```json fenced block"""
    match = JSON_FENCE.search(text)
    return match.group(1) if match else None


def extract_brace_span(text: str) -> Optional[str]:
    """Substring from the first '{' through the last '}'"""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        return text[start : end + 1]
    return None


# Order matters: a fenced block wins over brace scanning
EXTRACTION_STRATEGIES: List[Callable[[str], Optional[str]]] = [
    extract_fenced_json,
    extract_brace_span,
]


def extract_json_candidate(text: str) -> str:
    for strategy in EXTRACTION_STRATEGIES:
        candidate = strategy(text)
        if candidate:
            return candidate
    return text


def try_parse_json(raw: str) -> Optional[Any]:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return None


def coerce_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def coalesce(value: Any, fallback_value: str) -> str:
    """Per-field fallback: a missing or null field takes the previous value.

    Applied to each field on its own, so one missing field never discards the
    others that parsed fine.
    """
    if value is None:
        return fallback_value
    return coerce_text(value)


def parse_response(text: str, previous_files: SessionFiles) -> GenerateResult:
    candidate = extract_json_candidate(text)
    parsed = try_parse_json(candidate)

    if not isinstance(parsed, dict) or not isinstance(parsed.get("files"), dict):
        logger.error("Failed to parse model response into page files")
        logger.error(f"Raw response (first 500 chars): {text[:500]}")
        return fallback.parse_failure(previous_files)

    files = parsed["files"]
    return GenerateResult(
        summary=coalesce(parsed.get("summary"), fallback.DEFAULT_SUMMARY),
        files=SessionFiles(
            html=coalesce(files.get("html"), previous_files.html),
            css=coalesce(files.get("css"), previous_files.css),
            js=coalesce(files.get("js"), previous_files.js),
        ),
    )
