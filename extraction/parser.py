import json
import re
from typing import Any, List


# Greedy: spans from the first "[" to the last "]", across newlines.
ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)


def parse_candidates(text: str) -> List[Any]:
    """Recover a JSON array from model output.

    The whole text is tried first. If that is not a JSON array, the first
    bracket-delimited span is tried instead, which handles arrays wrapped in
    prose or code fences. Anything unrecoverable yields an empty list.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        data = None

    if isinstance(data, list):
        return data

    match = ARRAY_PATTERN.search(text or "")
    if not match:
        return []

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return []

    return data if isinstance(data, list) else []
