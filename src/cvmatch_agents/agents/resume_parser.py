"""Resume parser agent: turns a CV file or text into CVData."""

from __future__ import annotations

import time
from pathlib import Path

import structlog

from cvmatch_agents.agents.base import BaseAgent
from cvmatch_agents.agents.linkedin_parser import LinkedInParserAgent
from cvmatch_agents.prompts.cv_parser import CV_PARSER_SYSTEM, CV_PARSER_USER
from cvmatch_agents.tools.pdf_parser import load_document_text
from cvmatch_agents.tools.text import clean_text, extract_keywords
from cvmatch_core.exceptions import CostLimitExceededError, CVMatchError, FatalAgentError
from cvmatch_core.models.cv import CVContent, CVData
from cvmatch_core.state import MatchingState

logger = structlog.get_logger()


class ResumeParserAgent(BaseAgent):
    """Parse a CV (PDF, text file or raw text) into structured CVData."""

    agent_name = "resume_parser"

    async def run(self, state: MatchingState) -> MatchingState:
        """Load the CV named by the run config and parse it."""
        config = state.config
        self._log_start({"cv_path": str(config.cv_path) if config.cv_path else None})
        start = time.monotonic()

        try:
            raw_text = await self._load_text(config.cv_path, config.cv_text)
        except CVMatchError as e:
            self._record_error(state, e, is_fatal=True)
            raise FatalAgentError(f"Cannot read CV: {e}") from e

        if config.cv_source == "linkedin":
            linkedin = LinkedInParserAgent(self.settings, self.cost_tracker)
            cv = await linkedin.parse_text(raw_text, state)
        else:
            source = "upload" if config.cv_path else "text"
            name = config.cv_path.stem if config.cv_path else ""
            cv = await self.parse_text(raw_text, source=source, name=name, state=state)

        state.cv = cv
        self._log_end(
            time.monotonic() - start,
            {
                "source": cv.source,
                "experiences": len(cv.content.experiences),
                "skills_count": len(cv.content.skills),
            },
        )
        return state

    async def parse_text(
        self,
        text: str,
        source: str = "text",
        name: str = "",
        state: MatchingState | None = None,
    ) -> CVData:
        """Ask the LLM for the structured content of a CV text."""
        raw_text = clean_text(text)
        if not raw_text:
            raise FatalAgentError("CV text is empty")

        try:
            content = await self._call_llm(
                messages=[{"role": "user", "content": CV_PARSER_USER.format(cv_text=raw_text)}],
                model=self.settings.haiku_model,
                response_model=CVContent,
                system=CV_PARSER_SYSTEM,
                state=state,
            )
        except CostLimitExceededError:
            raise
        except Exception as e:
            if state is not None:
                self._record_error(state, e, is_fatal=True)
            raise FatalAgentError(f"CV parsing failed: {e}") from e

        if not content.extracted_keywords:
            content.extracted_keywords = extract_keywords(raw_text)

        return CVData(
            name=content.personal_info.name or name,
            source=source,  # type: ignore[arg-type]
            content=content,
            raw_text=raw_text,
        )

    @staticmethod
    async def _load_text(path: Path | None, text: str | None) -> str:
        """Read the CV file, or return the inline text."""
        if path is not None:
            return await load_document_text(path)
        return text or ""
