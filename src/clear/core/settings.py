"""Per-user focus settings resolution - no I/O dependencies."""

from dataclasses import dataclass

from clear.errors import ValidationError

from .focus import MAX_SLOTS

DAILY_FOCUS_COUNT = "daily_focus_count"
DAILY_DIRECTIVE = "daily_directive"

DEFAULT_FOCUS_COUNT = 3
DEFAULT_DIRECTIVE = "Focus on what matters. Ignore the noise."


@dataclass(frozen=True)
class FocusSettings:
    """The two settings the decider reads."""

    focus_count: int = DEFAULT_FOCUS_COUNT
    directive: str = DEFAULT_DIRECTIVE

    @classmethod
    def from_mapping(cls, values: dict[str, str]) -> "FocusSettings":
        """
        Resolve settings from stored key/value strings.

        Bad or missing counts fall back to the default; out-of-range counts
        are clamped to 1-5. Unknown keys are ignored.
        """
        count = DEFAULT_FOCUS_COUNT
        raw = values.get(DAILY_FOCUS_COUNT)
        if raw is not None:
            try:
                count = max(1, min(MAX_SLOTS, int(str(raw).strip())))
            except ValueError:
                count = DEFAULT_FOCUS_COUNT
        directive = values.get(DAILY_DIRECTIVE) or DEFAULT_DIRECTIVE
        return cls(focus_count=count, directive=directive)


def validate_setting(key: str, value: str) -> str:
    """
    Validate a setting before it is stored and return the normalized value.

    Only daily_focus_count is checked; other keys pass through.
    """
    key = (key or "").strip()
    if not key:
        raise ValidationError("Setting key is required")
    if value is None:
        raise ValidationError(f"Value is required for {key}")

    if key == DAILY_FOCUS_COUNT:
        try:
            count = int(str(value).strip())
        except ValueError:
            raise ValidationError(f"{DAILY_FOCUS_COUNT} must be an integer, got {value!r}") from None
        if not 1 <= count <= MAX_SLOTS:
            raise ValidationError(f"{DAILY_FOCUS_COUNT} must be between 1 and {MAX_SLOTS}")
        return str(count)

    return str(value)


def with_defaults(values: dict[str, str]) -> dict[str, str]:
    """Stored settings overlaid on the recognized defaults."""
    merged = {
        DAILY_FOCUS_COUNT: str(DEFAULT_FOCUS_COUNT),
        DAILY_DIRECTIVE: DEFAULT_DIRECTIVE,
    }
    merged.update(values)
    return merged
