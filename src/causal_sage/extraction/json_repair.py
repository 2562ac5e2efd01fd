"""
Recover a JSON structure from free-form Reasoner output.
"""
import json
import logging
import re
from typing import Any, Optional

import json_repair

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*\n(.*?)```", re.IGNORECASE | re.DOTALL)


def load_json(text: str) -> Optional[Any]:
    """
    Parse the first usable JSON structure in a Reasoner response.

    Strategies, first success wins:
      1. Content of a ```json fenced block.
      2. The whole string.
      3. The span between the first '{' and the last '}'.
      4. json_repair on everything from the first '{' (truncated or
         slightly malformed objects).

    Args:
        text: Raw Reasoner output

    Returns:
        Parsed JSON value, or None when nothing could be recovered
    """
    if not text or not isinstance(text, str):
        return None

    match = _FENCED_JSON.search(text)
    if match:
        parsed = _try_parse(match.group(1))
        if parsed is not None:
            return parsed

    parsed = _try_parse(text)
    if parsed is not None:
        return parsed

    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        parsed = _try_parse(text[first : last + 1])
        if parsed is not None:
            return parsed

    if first != -1:
        repaired = json_repair.loads(text[first:])
        if isinstance(repaired, (dict, list)) and repaired:
            logger.info("Repaired malformed JSON in Reasoner output")
            return repaired

    logger.debug("No JSON structure recovered from: %r", text[:200])
    return None


def _try_parse(candidate: str) -> Optional[Any]:
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None
