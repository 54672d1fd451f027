"""Authenticity agent: rates how natural a CV reads."""

from __future__ import annotations

import time

from cvmatch_agents.agents.base import BaseAgent
from cvmatch_agents.prompts.authenticity import AUTHENTICITY_SYSTEM, AUTHENTICITY_USER
from cvmatch_core.exceptions import CostLimitExceededError
from cvmatch_core.models.extraction import FrenchExtractedData
from cvmatch_core.models.scoring import AuthenticityReport
from cvmatch_core.state import MatchingState


class AuthenticityAgent(BaseAgent):
    """Detect over-optimized CVs; failures fall back to a neutral score."""

    agent_name = "authenticity"

    async def run(self, state: MatchingState) -> MatchingState:
        """Analyze the parsed CV with its extracted context."""
        self._log_start()
        start = time.monotonic()

        cv_text = state.cv.full_text() if state.cv else ""
        context = state.cv_context or FrenchExtractedData()
        try:
            report = await self.analyze(cv_text, context, state)
        except CostLimitExceededError:
            raise
        except Exception as e:
            self._record_error(state, e, is_fatal=False)
            report = AuthenticityReport()

        state.authenticity = report
        self._log_end(
            time.monotonic() - start,
            {"global_score": round(report.global_score, 2), "issues": len(report.issues)},
        )
        return state

    async def analyze(
        self,
        cv_text: str,
        extracted: FrenchExtractedData,
        state: MatchingState | None = None,
    ) -> AuthenticityReport:
        """Ask the LLM for an authenticity report."""
        return await self._call_llm(
            messages=[
                {
                    "role": "user",
                    "content": AUTHENTICITY_USER.format(
                        cv_text=cv_text,
                        extracted_json=extracted.model_dump_json(indent=2),
                    ),
                }
            ],
            model=self.settings.haiku_model,
            response_model=AuthenticityReport,
            system=AUTHENTICITY_SYSTEM,
            state=state,
            max_tokens=1500,
        )
