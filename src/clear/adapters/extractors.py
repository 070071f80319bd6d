"""Task extractor adapters."""

import logging
from datetime import date

from clear.core.extraction import build_extraction_prompt, parse_extraction_response, split_lines
from clear.core.tasks import TaskCandidate
from clear.errors import ExtractionError
from clear.ports.llm_service import LLMService

logger = logging.getLogger(__name__)


class LLMTaskExtractor:
    """
    Extractor backed by any LLMService.

    Implements TaskExtractor protocol. Any backend failure or unusable
    response surfaces as ExtractionError.
    """

    def __init__(self, llm: LLMService):
        self.llm = llm

    def extract(self, text: str, current_date: date) -> list[TaskCandidate]:
        prompt = build_extraction_prompt(text, current_date)
        try:
            candidates = parse_extraction_response(self.llm.generate(prompt))
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(str(e) or type(e).__name__) from e
        logger.debug(f"Extracted {len(candidates)} task(s)")
        return candidates


class LineExtractor:
    """
    Offline rule-based extractor: one task per line.

    Implements TaskExtractor protocol. Used when no LLM is configured.
    """

    def extract(self, text: str, current_date: date) -> list[TaskCandidate]:
        return split_lines(text)
