"""Context extractor agent: French contextual data from CVs and job postings."""

from __future__ import annotations

import time
from typing import Literal

import structlog

from cvmatch_agents.agents.base import BaseAgent
from cvmatch_agents.prompts.context_extractor import (
    CONTEXT_EXTRACTOR_SYSTEM,
    CONTEXT_EXTRACTOR_USER,
    CV_RULES,
    JOB_RULES,
)
from cvmatch_core.exceptions import CostLimitExceededError
from cvmatch_core.models.extraction import FrenchExtractedData
from cvmatch_core.state import MatchingState

logger = structlog.get_logger()

MIN_EXTRACTION_CHARS = 20


class ContextExtractorAgent(BaseAgent):
    """Extract FrenchExtractedData from the CV and the job."""

    agent_name = "context_extractor"

    async def run(self, state: MatchingState) -> MatchingState:
        """Extract context for both sides of the match."""
        self._log_start()
        start = time.monotonic()

        cv_text = state.cv.full_text() if state.cv else ""
        job_text = state.job.full_text() if state.job else state.config.job_text
        state.cv_context = await self.extract(cv_text, "cv", state)
        state.job_context = await self.extract(job_text, "job", state)

        self._log_end(
            time.monotonic() - start,
            {
                "cv_hard_skills": len(state.cv_context.hard_skills),
                "job_hard_skills": len(state.job_context.hard_skills),
            },
        )
        return state

    async def extract(
        self,
        text: str,
        kind: Literal["cv", "job"],
        state: MatchingState | None = None,
    ) -> FrenchExtractedData:
        """Extract contextual data; unusable input or LLM failure yields an empty record."""
        if len(text.strip()) < MIN_EXTRACTION_CHARS:
            logger.warning("extraction_text_too_short", kind=kind, chars=len(text.strip()))
            return FrenchExtractedData()

        is_cv = kind == "cv"
        system = CONTEXT_EXTRACTOR_SYSTEM.format(
            subject="de CV" if is_cv else "d'offres d'emploi",
            kind_rules=CV_RULES if is_cv else JOB_RULES,
        )
        user = CONTEXT_EXTRACTOR_USER.format(
            target="ce CV" if is_cv else "cette offre d'emploi",
            text=text,
        )
        try:
            return await self._call_llm(
                messages=[{"role": "user", "content": user}],
                model=self.settings.haiku_model,
                response_model=FrenchExtractedData,
                system=system,
                state=state,
                max_tokens=2000,
            )
        except CostLimitExceededError:
            raise
        except Exception as e:
            logger.error(
                "extraction_failed",
                kind=kind,
                error_type=type(e).__name__,
                error=str(e),
                text_length=len(text),
            )
            return FrenchExtractedData()
