"""Job parser agent: extracts JobData from a job posting."""

from __future__ import annotations

import time

from pydantic import BaseModel, Field

from cvmatch_agents.agents.base import BaseAgent
from cvmatch_agents.prompts.job_parser import JOB_PARSER_SYSTEM, JOB_PARSER_USER
from cvmatch_agents.tools.text import clean_text, extract_keywords
from cvmatch_core.exceptions import CostLimitExceededError, FatalAgentError
from cvmatch_core.models.job import JobData, ParsedJob
from cvmatch_core.state import MatchingState

DEFAULT_JOB_TITLE = "Poste non précisé"


class JobExtraction(BaseModel):
    """Structured job posting as returned by the LLM."""

    title: str = Field(description="Job title")
    company: str = Field(default="", description="Hiring company if named")
    location: str | None = Field(default=None, description="Job location")
    requirements: list[str] = Field(default_factory=list, description="Requirement bullets")
    extracted_keywords: list[str] = Field(default_factory=list)
    parsed: ParsedJob = Field(default_factory=ParsedJob)


class JobParserAgent(BaseAgent):
    """Parse a job posting into structured JobData."""

    agent_name = "job_parser"

    async def run(self, state: MatchingState) -> MatchingState:
        """Parse the job text of the run config."""
        self._log_start({"job_chars": len(state.config.job_text)})
        start = time.monotonic()

        job = await self.parse_text(state.config.job_text, state)
        state.job = job

        self._log_end(
            time.monotonic() - start,
            {
                "title": job.title,
                "skills_count": len(job.required_skills()),
                "keywords": len(job.extracted_keywords),
            },
        )
        return state

    async def parse_text(self, text: str, state: MatchingState | None = None) -> JobData:
        """Ask the LLM for the structure of a job posting."""
        description = clean_text(text)
        if not description:
            raise FatalAgentError("Job posting text is empty")

        try:
            extraction = await self._call_llm(
                messages=[
                    {"role": "user", "content": JOB_PARSER_USER.format(job_text=description)}
                ],
                model=self.settings.haiku_model,
                response_model=JobExtraction,
                system=JOB_PARSER_SYSTEM,
                state=state,
            )
        except CostLimitExceededError:
            raise
        except Exception as e:
            if state is not None:
                self._record_error(state, e, is_fatal=True)
            raise FatalAgentError(f"Job parsing failed: {e}") from e

        return JobData(
            title=extraction.title.strip() or DEFAULT_JOB_TITLE,
            company=extraction.company,
            location=extraction.location,
            description=description,
            requirements=extraction.requirements,
            extracted_keywords=(
                [k.lower() for k in extraction.extracted_keywords]
                or extract_keywords(description)
            ),
            parsed=extraction.parsed,
        )
