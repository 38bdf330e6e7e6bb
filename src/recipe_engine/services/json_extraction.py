"""Extraction of JSON objects embedded in model prose."""

import json
import logging

from recipe_engine.errors import ParseError

_logger = logging.getLogger(__name__)


def extract_json_object(text: str) -> dict[str, object]:
    """Return the first balanced JSON object found in ``text``.

    Models often wrap the payload in prose or code fences, so leading and
    trailing text is ignored. Braces inside JSON strings do not count
    towards balancing.
    """
    start = text.find("{")
    if start == -1:
        raise ParseError("No JSON object found in model response")

    saw_balanced = False
    while start != -1:
        end = _matching_brace(text, start)
        if end is None:
            break
        saw_balanced = True
        candidate = text[start : end + 1]
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as exc:
            _logger.debug("Skipping undecodable block at %s: %s", start, exc)
        else:
            if isinstance(parsed, dict):
                return parsed
        start = text.find("{", start + 1)

    if saw_balanced:
        raise ParseError("Model response contained no decodable JSON object")
    raise ParseError("Model response contained an unterminated JSON object")


def _matching_brace(text: str, start: int) -> int | None:
    """Return the index of the brace closing the one at ``start``."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None
