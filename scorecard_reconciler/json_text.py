"""
Recover a JSON payload from a vision model's free-text reply.

Models are asked for bare JSON but still wrap it in code fences, add prose
around it, leave trailing commas, or get cut off mid-object. We try, in order:

  1. a ```json fenced block, else the outermost {...} span, else the whole text
  2. json.loads as-is
  3. slice to the first balanced value, closing any brackets left open
  4. the same slice with trailing commas removed

Only string-aware scanning is used; commas and brackets inside string
literals are left alone.
"""

from __future__ import annotations

import json
import logging
import re

from .exceptions import PayloadParseError

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*(.*?)```", re.IGNORECASE | re.DOTALL)
_BRACED_SPAN = re.compile(r"\{.*\}", re.DOTALL)
_CLOSERS = {"{": "}", "[": "]"}


def extract_json_from_text(text: str) -> object:
    """Parse the JSON payload embedded in ``text``.

    Raises:
        PayloadParseError: If the text is empty or no JSON can be recovered.
    """
    if not isinstance(text, str) or not text.strip():
        raise PayloadParseError("Empty response text")

    fenced = _FENCED_JSON.search(text)
    braced = _BRACED_SPAN.search(text)
    if fenced:
        candidate = fenced.group(1).strip()
    elif braced:
        candidate = braced.group(0).strip()
    else:
        candidate = text.strip()

    if not candidate:
        raise PayloadParseError("No JSON payload found in response")

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as initial_error:
        logger.debug("Direct JSON parse failed (%s); attempting repair", initial_error)
        sliced = _slice_to_likely_json(candidate)
        try:
            return json.loads(sliced)
        except json.JSONDecodeError:
            pass
        try:
            return json.loads(_strip_trailing_commas(sliced))
        except json.JSONDecodeError as final_error:
            raise PayloadParseError(
                f"Unable to parse JSON payload from response: {final_error.msg}",
                details={"snippet": candidate[:200]},
            ) from final_error


# ─── Repair Helpers ──────────────────────────────────────────────────


def _strip_trailing_commas(candidate: str) -> str:
    """Drop commas that directly precede a closing ``}`` or ``]``."""
    result: list[str] = []
    in_string = False
    escape_next = False
    index = 0

    while index < len(candidate):
        char = candidate[index]

        if in_string:
            result.append(char)
            if escape_next:
                escape_next = False
            elif char == "\\":
                escape_next = True
            elif char == '"':
                in_string = False
            index += 1
            continue

        if char == '"':
            in_string = True
        elif char == ",":
            lookahead = index + 1
            while lookahead < len(candidate) and candidate[lookahead].isspace():
                lookahead += 1
            if lookahead < len(candidate) and candidate[lookahead] in "}]":
                index = lookahead
                continue

        result.append(char)
        index += 1

    return "".join(result)


def _slice_to_likely_json(candidate: str) -> str:
    """Cut ``candidate`` down to its first JSON value and close what is open.

    Scanning stops at the bracket that balances the first opener, or just
    before a mismatched closer. Truncated replies get their missing closers
    appended in nesting order.
    """
    start = next((i for i, c in enumerate(candidate) if c in _CLOSERS), -1)
    if start == -1:
        return candidate

    segment = candidate[start:]
    stack: list[str] = []
    in_string = False
    escape_next = False
    end = -1

    for index, char in enumerate(segment):
        if in_string:
            if escape_next:
                escape_next = False
            elif char == "\\":
                escape_next = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in "}]" and stack:
            expected = stack.pop()
            if expected != char:
                end = max(index - 1, 0)
                stack.append(expected)
                break
            if not stack:
                end = index
                break

    sliced = segment if end == -1 else segment[: end + 1]
    if stack:
        sliced += "".join(reversed(stack))
    return _strip_trailing_commas(sliced)
