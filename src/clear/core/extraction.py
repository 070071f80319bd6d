"""Pure extraction helpers - prompt building and response parsing."""

import json
import re
from datetime import date

from clear.errors import ExtractionError

from .scoring import clamp_unit
from .tasks import TaskCandidate

FALLBACK_TEXT_LIMIT = 200
FALLBACK_SCORE = 0.5

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")


def build_extraction_prompt(text: str, current_date: date) -> str:
    """Compile the prompt sent to an LLM extractor."""
    return f"""You are a cognitive offloading assistant. Your job is to extract actionable tasks from the following raw text.

Current Date: {current_date.isoformat()}
Raw Text: "{text}"

Rules:
1. Identify distinct tasks.
2. Ignore pure noise or journaling unless it implies a task.
3. For each task, provide:
   - canonical_text: A clear, action-oriented title (e.g., "Buy milk").
   - pressure_score: 0.0 to 1.0 (based on urgency/anxiety in text).
   - leverage_score: 0.0 to 1.0 (based on potential impact).
   - scheduled_date: YYYY-MM-DD (IF a specific date/deadline is mentioned, otherwise null). Resolve "tomorrow", "next Friday" based on Current Date.

Return ONLY a JSON array of objects. No markdown formatting.
Example: [{{"canonical_text": "Buy milk", "pressure_score": 0.1, "leverage_score": 0.1}}]
"""


def _parse_date(raw) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw).strip()[:10])
    except ValueError:
        return None


def _parse_score(raw) -> float:
    try:
        return clamp_unit(raw or 0)
    except (TypeError, ValueError):
        return 0.0


def parse_extraction_response(response: str) -> list[TaskCandidate]:
    """
    Parse an LLM response into candidates.

    Markdown code fences are stripped. Entries without text are skipped and
    unparseable dates are dropped. Raises ExtractionError if the response is
    not a JSON array.
    """
    cleaned = _FENCE_RE.sub("", response or "").strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Extractor returned invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ExtractionError("Extractor did not return a JSON array")

    candidates = []
    for item in data:
        if not isinstance(item, dict):
            continue
        text = str(item.get("canonical_text") or "").strip()
        if not text:
            continue
        candidates.append(
            TaskCandidate(
                text=text,
                pressure=_parse_score(item.get("pressure_score")),
                leverage=_parse_score(item.get("leverage_score")),
                scheduled_date=_parse_date(item.get("scheduled_date")),
            )
        )
    return candidates


def fallback_candidate(content: str) -> TaskCandidate:
    """The single task created when extraction fails."""
    return TaskCandidate(
        text=content.strip()[:FALLBACK_TEXT_LIMIT],
        pressure=FALLBACK_SCORE,
        leverage=FALLBACK_SCORE,
    )


def split_lines(content: str) -> list[TaskCandidate]:
    """One candidate per non-empty line, list bullets removed."""
    candidates = []
    for line in content.splitlines():
        text = _BULLET_RE.sub("", line).strip()
        if text:
            candidates.append(
                TaskCandidate(text=text[:FALLBACK_TEXT_LIMIT], pressure=FALLBACK_SCORE, leverage=FALLBACK_SCORE)
            )
    return candidates
