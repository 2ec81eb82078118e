"""Pull JSON payloads out of free-form model replies."""

from __future__ import annotations

import json
import re

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)\n?\s*```", re.DOTALL)


def extract_json(text: str) -> dict | list:
    """Extract the JSON value a model reply carries.

    Candidates are tried in order: the whole reply, the body of the first
    fenced code block, the outermost ``{...}`` span, the outermost ``[...]``
    span, and finally an object truncated by the token limit with its open
    brackets closed.
    """
    text = (text or "").strip()

    for candidate in _candidates(text):
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue

    repaired = _close_truncated(text)
    if repaired is not None:
        return repaired

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def extract_json_object(text: str) -> dict:
    """Like ``extract_json`` but the reply must hold an object."""
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _candidates(text: str) -> list[str]:
    found = [text]
    fence = _FENCE_RE.search(text)
    if fence:
        found.append(fence.group(1).strip())
    for opener, closer in (("{", "}"), ("[", "]")):
        start, end = text.find(opener), text.rfind(closer)
        if start != -1 and end > start:
            found.append(text[start : end + 1])
    return found


def _close_truncated(text: str) -> dict | None:
    """Close the brackets of an object cut off mid-reply."""
    start = text.find("{")
    if start == -1:
        return None
    candidate = text[start:].rstrip("` \n")

    # Drop a dangling partial token after the last complete string value
    last_quote = candidate.rfind('"')
    attempts = [candidate]
    if last_quote > 0:
        attempts.append(candidate[: last_quote + 1])

    for attempt in attempts:
        attempt = attempt.rstrip().rstrip(",")
        open_braces = attempt.count("{") - attempt.count("}")
        open_brackets = attempt.count("[") - attempt.count("]")
        if open_braces <= 0 and open_brackets <= 0:
            continue
        try:
            data = json.loads(attempt + "]" * max(0, open_brackets) + "}" * max(0, open_braces))
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    return None
