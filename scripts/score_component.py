"""Score a CV file against job postings with the real local embedder (no LLM).

Usage: python scripts/score_component.py CV_FILE JOB_FILE [JOB_FILE ...]
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

os.environ.setdefault("CVM_ANTHROPIC_API_KEY", "unused")
os.environ["CVM_EMBEDDING_PROVIDER"] = "local"
os.environ["CVM_LOG_LEVEL"] = "WARNING"
os.environ["CVM_LOG_FORMAT"] = "console"

project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))
sys.path.insert(0, str(project_root))
os.chdir(project_root)


async def main(cv_path: Path, job_paths: list[Path]) -> None:
    """Print the five-factor score, sector keywords and ATS report per job."""
    from cvmatch_agents.observability import configure_logging
    from cvmatch_agents.scoring.ats import ATSAnalyzer
    from cvmatch_agents.scoring.factory import create_advanced_scorer
    from cvmatch_agents.scoring.sector import SectorKeywordScorer
    from cvmatch_agents.tools.pdf_parser import load_document_text
    from cvmatch_agents.tools.text import extract_keywords
    from cvmatch_core.config.settings import Settings
    from cvmatch_core.models.cv import CVData
    from cvmatch_core.models.job import JobData

    settings = Settings()  # type: ignore[call-arg]
    configure_logging(settings)

    scorer = create_advanced_scorer(settings, use_cache=False)
    sector_scorer = SectorKeywordScorer()
    ats = ATSAnalyzer()

    cv_text = await load_document_text(cv_path)
    cv = CVData(name=cv_path.stem, source="upload", raw_text=cv_text)
    print(f"=== CV: {cv_path.name} ({len(cv_text)} chars) ===")

    for job_path in job_paths:
        job_text = await load_document_text(job_path)
        title = next((line for line in job_text.splitlines() if line.strip()), job_path.stem)
        job = JobData(
            title=title.strip(),
            description=job_text,
            extracted_keywords=extract_keywords(job_text),
        )

        scoring = await scorer.score(cv, job)
        keywords = sector_scorer.score(job.full_text(), cv_text)
        report = ats.analyze(cv, job)

        print(f"\n--- {job_path.name}: {job.title} ---")
        print(f"  overall:    {scoring.overall:.3f}")
        print(f"  semantic:   {scoring.semantic_similarity:.3f}")
        print(f"  keywords:   {scoring.keyword_match:.3f}")
        print(f"  experience: {scoring.experience_relevance:.3f}")
        print(f"  skills:     {scoring.skills_level:.3f}")
        print(f"  sector:     {scoring.sector_alignment:.3f}")
        print(f"  missing:    {', '.join(scoring.missing_keywords[:10]) or '-'}")
        print(
            f"  sector keywords: {keywords.score}/100 "
            f"({keywords.sector_detected}, coverage {keywords.coverage}%)"
        )
        print(f"  ATS: {report.score}/100, match rate {report.match_rate}%")
        for check in report.criteria:
            print(f"    [{check.status}] {check.name}: {check.points:g}/{check.max_points:g}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(2)
    asyncio.run(main(Path(sys.argv[1]), [Path(p) for p in sys.argv[2:]]))
