"""ATS readiness checks and recruiter tips for a CV against a job."""

from __future__ import annotations

import re

import structlog

from cvmatch_agents.tools.text import extract_keywords
from cvmatch_core.constants import (
    ATS_CRITERIA_POINTS,
    MEASURABLE_RESULTS_PATTERN,
    MIN_MEASURABLE_RESULTS,
    NEGATIVE_PHRASES,
    OPTIMAL_WORD_COUNT,
)
from cvmatch_core.models.cv import CVData
from cvmatch_core.models.job import JobData
from cvmatch_core.models.scoring import ATSCheck, ATSReport

logger = structlog.get_logger()

_MEASURABLE_RE = re.compile(MEASURABLE_RESULTS_PATTERN, re.IGNORECASE)
_URL_RE = re.compile(r"https?://|www\.", re.IGNORECASE)
_DATE_FORMATS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("mm/yyyy", re.compile(r"^\d{1,2}[/.-]\d{4}$")),
    ("yyyy-mm", re.compile(r"^\d{4}[/.-]\d{1,2}$")),
    ("month yyyy", re.compile(r"^[a-zéû]+\.?\s+\d{4}$", re.IGNORECASE)),
    ("yyyy", re.compile(r"^\d{4}$")),
)


def match_rate(cv_keywords: list[str], job_keywords: list[str]) -> int:
    """Percentage of job keywords covered, matching substrings both ways."""
    common = [
        kw for kw in cv_keywords if any(job_kw in kw or kw in job_kw for job_kw in job_keywords)
    ]
    return min(100, round(len(common) / max(len(job_keywords), 1) * 100))


def date_format(value: str) -> str | None:
    """Name of the format a date string is written in, None if unrecognized."""
    stripped = value.strip()
    for name, pattern in _DATE_FORMATS:
        if pattern.match(stripped):
            return name
    return None


def _status(points: float, max_points: float) -> str:
    if points >= max_points:
        return "success"
    if points >= max_points / 2:
        return "warning"
    return "error"


class ATSAnalyzer:
    """Approximate how well an ATS would parse and rank a CV."""

    def analyze(self, cv: CVData, job: JobData) -> ATSReport:
        """Score the CV on five criteria and collect recruiter tips."""
        text = cv.full_text()
        cv_keywords = extract_keywords(text)
        job_keywords = extract_keywords(job.full_text())
        rate = match_rate(cv_keywords, job_keywords)

        criteria = [
            self._check_structure(cv),
            self._check_keywords(rate),
            self._check_dates(cv),
            self._check_sections(cv),
            self._check_length(text),
        ]
        score = round(sum(c.points for c in criteria))

        lowered = text.lower()
        missing = [
            kw for kw in job_keywords if not any(kw in c or c in kw for c in cv_keywords)
        ]
        missing = [kw for kw in missing if kw not in lowered][:10]

        report = ATSReport(
            score=min(100, score),
            match_rate=rate,
            criteria=criteria,
            tips=self.recruiter_tips(text, job),
            missing_keywords=missing,
        )
        logger.info("ats_analysis", score=report.score, match_rate=rate)
        return report

    def _check_structure(self, cv: CVData) -> ATSCheck:
        max_points = ATS_CRITERIA_POINTS["structure"]
        info = cv.content.personal_info
        present = [bool(info.name), bool(info.email), bool(info.phone)]
        points = max_points * sum(present) / len(present)
        labels = ("nom", "email", "téléphone")
        absent = [label for label, ok in zip(labels, present, strict=True) if not ok]
        return ATSCheck(
            name="structure",
            points=round(points, 2),
            max_points=max_points,
            status=_status(points, max_points),  # type: ignore[arg-type]
            message=(
                "Coordonnées complètes"
                if not absent
                else f"Coordonnées incomplètes : {', '.join(absent)} manquant(s)"
            ),
            suggestion="" if not absent else "Ajoutez vos coordonnées en tête de CV",
        )

    def _check_keywords(self, rate: int) -> ATSCheck:
        max_points = ATS_CRITERIA_POINTS["keywords"]
        points = max_points * rate / 100
        return ATSCheck(
            name="keywords",
            points=round(points, 2),
            max_points=max_points,
            status=_status(points, max_points * 0.8),  # type: ignore[arg-type]
            message=f"{rate}% des mots-clés de l'offre retrouvés dans le CV",
            suggestion="" if rate >= 80 else "Reprenez les termes exacts de l'offre",
        )

    def _check_dates(self, cv: CVData) -> ATSCheck:
        max_points = ATS_CRITERIA_POINTS["date_format"]
        experiences = cv.content.experiences
        if not experiences:
            return ATSCheck(
                name="date_format",
                points=0,
                max_points=max_points,
                status="error",
                message="Aucune expérience datée trouvée",
                suggestion="Indiquez les dates de début et de fin de chaque poste",
            )

        dates = [d for exp in experiences for d in (exp.start_date, exp.end_date) if d]
        undated = sum(1 for exp in experiences if not exp.start_date)
        formats = {date_format(d) for d in dates}
        if undated == 0 and len(formats) == 1 and None not in formats:
            points: float = max_points
            message = "Les dates sont au même format"
        elif undated == 0:
            points = max_points / 2
            message = "Les dates utilisent plusieurs formats"
        else:
            points = max_points * (len(experiences) - undated) / len(experiences) / 2
            message = f"{undated} expérience(s) sans date de début"
        return ATSCheck(
            name="date_format",
            points=round(points, 2),
            max_points=max_points,
            status=_status(points, max_points),  # type: ignore[arg-type]
            message=message,
            suggestion="" if points >= max_points else "Utilisez un format unique, ex. 03/2021",
        )

    def _check_sections(self, cv: CVData) -> ATSCheck:
        max_points = ATS_CRITERIA_POINTS["sections"]
        content = cv.content
        sections = {
            "résumé": bool(content.summary.strip()),
            "expérience": bool(content.experiences),
            "formation": bool(content.education),
            "compétences": bool(content.skills),
        }
        per_section = max_points / len(sections)
        points = per_section * sum(sections.values())
        absent = [name for name, ok in sections.items() if not ok]
        return ATSCheck(
            name="sections",
            points=points,
            max_points=max_points,
            status=_status(points, max_points),  # type: ignore[arg-type]
            message=(
                "Toutes les sections standard sont présentes"
                if not absent
                else f"Sections manquantes : {', '.join(absent)}"
            ),
            suggestion="" if not absent else "Utilisez des intitulés de section standard",
        )

    def _check_length(self, text: str) -> ATSCheck:
        max_points = ATS_CRITERIA_POINTS["length"]
        length = len(text)
        if 1000 <= length <= 5000:
            points = 10
        elif 500 <= length <= 6000:
            points = 8
        else:
            points = 5
        return ATSCheck(
            name="length",
            points=points,
            max_points=max_points,
            status=_status(points, max_points),  # type: ignore[arg-type]
            message=f"{length} caractères",
            suggestion="" if points == max_points else "Visez entre 1000 et 5000 caractères",
        )

    def recruiter_tips(self, text: str, job: JobData) -> list[ATSCheck]:
        """Qualitative tips a recruiter would give; they do not affect the score."""
        lowered = text.lower()
        tips: list[ATSCheck] = []

        measurable = len(_MEASURABLE_RE.findall(text))
        enough = measurable >= MIN_MEASURABLE_RESULTS
        tips.append(
            ATSCheck(
                name="measurable_results",
                points=0,
                max_points=0,
                status="success" if enough else "warning",
                message=f"{measurable} résultat(s) chiffré(s) trouvé(s)",
                suggestion=(
                    "" if enough else "Ajoutez au moins 5 réalisations chiffrées (%, €, délais)"
                ),
            )
        )

        negative = [p for p in NEGATIVE_PHRASES if p in lowered]
        tips.append(
            ATSCheck(
                name="resume_tone",
                points=0,
                max_points=0,
                status="warning" if negative else "success",
                message=(
                    f"Formulations passives : {', '.join(negative)}"
                    if negative
                    else "Ton positif, pas de formulation passive"
                ),
                suggestion="Préférez des verbes d'action : dirigé, livré, réduit" if negative else "",
            )
        )

        online = "linkedin" in lowered or bool(_URL_RE.search(text))
        tips.append(
            ATSCheck(
                name="web_presence",
                points=0,
                max_points=0,
                status="success" if online else "error",
                message="Présence en ligne indiquée" if online else "Aucun lien LinkedIn ou site",
                suggestion="" if online else "Ajoutez l'URL de votre profil LinkedIn",
            )
        )

        words = len(text.split())
        low, high = OPTIMAL_WORD_COUNT
        tips.append(
            ATSCheck(
                name="word_count",
                points=0,
                max_points=0,
                status="success" if low <= words <= high else "warning",
                message=f"{words} mots",
                suggestion=(
                    "Développez vos réalisations"
                    if words < low
                    else "Condensez votre CV"
                    if words > high
                    else ""
                ),
            )
        )

        has_title = job.title.lower() in lowered
        tips.append(
            ATSCheck(
                name="job_title",
                points=0,
                max_points=0,
                status="success" if has_title else "error",
                message=(
                    f"L'intitulé « {job.title} » figure dans le CV"
                    if has_title
                    else f"L'intitulé « {job.title} » est absent du CV"
                ),
                suggestion="" if has_title else "Reprenez l'intitulé exact du poste dans le résumé",
            )
        )
        return tips
