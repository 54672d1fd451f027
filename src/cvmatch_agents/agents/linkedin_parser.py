"""LinkedIn parser agent: turns a pasted LinkedIn profile into CVData."""

from __future__ import annotations

import time

from cvmatch_agents.agents.base import BaseAgent
from cvmatch_agents.prompts.linkedin_parser import LINKEDIN_PARSER_SYSTEM, LINKEDIN_PARSER_USER
from cvmatch_agents.tools.text import clean_text, extract_keywords
from cvmatch_core.exceptions import CostLimitExceededError, FatalAgentError
from cvmatch_core.models.cv import CVData, LinkedInProfile
from cvmatch_core.state import MatchingState


class LinkedInParserAgent(BaseAgent):
    """Parse LinkedIn profile text into a CV with source 'linkedin'."""

    agent_name = "linkedin_parser"

    async def run(self, state: MatchingState) -> MatchingState:
        """Parse the inline CV text of the run config as a LinkedIn profile."""
        self._log_start()
        start = time.monotonic()
        state.cv = await self.parse_text(state.config.cv_text or "", state)
        self._log_end(time.monotonic() - start, {"experiences": len(state.cv.content.experiences)})
        return state

    async def parse_text(self, text: str, state: MatchingState | None = None) -> CVData:
        """Extract a LinkedInProfile and convert it to CVData."""
        raw_text = clean_text(text)
        if not raw_text:
            raise FatalAgentError("LinkedIn profile text is empty")

        try:
            profile = await self._call_llm(
                messages=[
                    {
                        "role": "user",
                        "content": LINKEDIN_PARSER_USER.format(profile_text=raw_text),
                    }
                ],
                model=self.settings.haiku_model,
                response_model=LinkedInProfile,
                system=LINKEDIN_PARSER_SYSTEM,
                state=state,
            )
        except CostLimitExceededError:
            raise
        except Exception as e:
            if state is not None:
                self._record_error(state, e, is_fatal=True)
            raise FatalAgentError(f"LinkedIn parsing failed: {e}") from e

        cv = profile.to_cv(raw_text)
        cv.content.extracted_keywords = extract_keywords(raw_text)
        return cv
