"""Interpretation of the generate_variants tool call"""

import math
from typing import Any, List, Optional

from pagesmith import fallback
from pagesmith.models import GenerateResult, SessionFiles, ToolCall, VariantRequest
from pagesmith.logger import get_logger

logger = get_logger(__name__)

VARIANTS_TOOL_NAME = "generate_variants"
VARIANTS_TOOL_DESCRIPTION = (
    "Generate multiple variants of the page based on user request. Use this tool when "
    "the user asks for multiple variations, alternatives, or different styles/designs of the page."
)
COUNT_DESCRIPTION = "Number of variants to generate (max 5)"
INSTRUCTIONS_DESCRIPTION = "Specific instructions for each variant. Must match the count."

MIN_VARIANTS = 2
MAX_VARIANTS = 5


def coerce_count(value: Any) -> int:
    """Numeric coercion, defaulting to 2, clamped into [2, 5]"""
    if isinstance(value, bool):
        value = int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan

    if math.isnan(number) or number <= 0:
        number = MIN_VARIANTS

    return int(round(min(max(number, MIN_VARIANTS), MAX_VARIANTS)))


def coerce_instructions(value: Any) -> List[str]:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return []


def find_variant_call(tool_calls: List[ToolCall]) -> Optional[ToolCall]:
    return next((call for call in tool_calls if call.name == VARIANTS_TOOL_NAME), None)


def interpret_tool_calls(
    tool_calls: List[ToolCall], files: SessionFiles
) -> Optional[GenerateResult]:
    """Turn the first generate_variants call into a variant directive.

    Returns None when no such call was requested. The instruction count is not
    checked against `count`.
    """
    call = find_variant_call(tool_calls)
    if call is None:
        return None

    variant_request = VariantRequest(
        count=coerce_count(call.args.get("count")),
        instructions=coerce_instructions(call.args.get("instructions")),
    )
    logger.info(
        f"Variant generation requested: count={variant_request.count}, "
        f"instructions={len(variant_request.instructions)}"
    )
    return GenerateResult(
        summary=fallback.VARIANTS_SUMMARY,
        files=files,
        variant_request=variant_request,
    )
