"""Shared constants and scoring tables for cvmatch."""

from __future__ import annotations

# LLM token pricing (USD per 1M tokens)
TOKEN_PRICES: dict[str, dict[str, float]] = {
    "claude-haiku-4-5-20251001": {"input": 0.80, "output": 4.00},
    "claude-sonnet-4-5-20250514": {"input": 3.00, "output": 15.00},
}

# Global matching score weights (sum to 1.0)
SCORING_WEIGHTS: dict[str, float] = {
    "semantic_similarity": 0.30,
    "keyword_match": 0.25,
    "experience_relevance": 0.20,
    "skills_level": 0.15,
    "sector_alignment": 0.10,
}

# --- Weighted keyword extraction ---

POSITION_MULTIPLIERS: dict[str, float] = {
    "titre": 3.0,
    "debut": 2.0,
    "milieu": 1.2,
    "fin": 1.0,
}

TYPE_MULTIPLIERS: dict[str, float] = {
    "technique": 2.5,
    "sectoriel": 1.8,
    "comportemental": 1.2,
}

RARITY_MULTIPLIERS: dict[str, float] = {
    "rare": 3.0,
    "intermediaire": 1.5,
    "commune": 0.8,
}

TECHNICAL_TERMS: tuple[str, ...] = (
    "javascript", "python", "react", "nodejs", "docker", "kubernetes",
    "aws", "azure", "sql", "mongodb", "git", "jenkins", "agile", "scrum",
)

BEHAVIORAL_TERMS: tuple[str, ...] = (
    "leadership", "communication", "gestion", "organisation", "autonomie",
    "rigueur", "creativite", "adaptabilite", "esprit equipe",
)

RARE_TERMS: tuple[str, ...] = (
    "blockchain", "machine learning", "devops", "cybersecurite",
    "intelligence artificielle", "data science", "cloud architect",
)

COMMON_TERMS: tuple[str, ...] = (
    "microsoft office", "communication", "gestion", "organisation",
    "html", "css", "javascript basique",
)

FRENCH_STOPWORDS: frozenset[str] = frozenset({
    "avec", "dans", "pour", "sur", "par", "de", "du", "des", "le", "la",
    "les", "un", "une", "et", "ou", "mais", "donc", "car", "comme", "si",
    "que", "qui", "quoi", "dont", "où", "nous", "vous", "leur", "leurs",
    "cette", "ces", "sont", "être", "avoir", "plus", "tout", "tous",
    "toute", "toutes", "votre", "notre", "aussi", "entre", "chez", "sans",
    "sous", "très", "afin", "ainsi", "elle", "elles", "ils", "lors",
})

# --- Sector keyword scoring ---

SECTOR_KEYWORDS: dict[str, tuple[str, ...]] = {
    "tech_fullstack": (
        "javascript", "typescript", "react", "nextjs", "nodejs", "express",
        "api", "rest", "graphql", "database", "sql", "postgresql", "mongodb",
        "docker", "aws", "cloud", "devops", "git", "agile", "scrum",
        "frontend", "backend", "fullstack", "html", "css", "jest", "testing",
        "microservices", "ci/cd", "kubernetes", "redis", "elasticsearch",
    ),
    "data_science": (
        "python", "r", "machine learning", "deep learning", "tensorflow",
        "pytorch", "scikit-learn", "pandas", "numpy", "matplotlib", "seaborn",
        "jupyter", "statistics", "analytics", "big data", "spark", "hadoop",
        "sql", "visualization", "tableau", "powerbi", "nlp",
        "computer vision", "mlops", "kubeflow", "mlflow", "data mining",
        "predictive modeling",
    ),
    "finance_banking": (
        "risk management", "credit risk", "market risk", "operational risk",
        "basel", "solvency", "ifrs", "gaap", "compliance", "audit",
        "regulatory", "quantitative analysis", "derivatives",
        "portfolio management", "trading", "investment", "financial modeling",
        "valuation", "stress testing", "capital adequacy", "liquidity risk",
        "aml", "kyc", "mifid", "gdpr", "corep", "finrep", "srep", "bddf",
        "asset management", "gestion d'actifs", "gestion de fonds",
        "banque privée", "financement", "investissement", "consolidation",
        "reporting", "contrôle de gestion", "comptabilité",
    ),
    "insurance_sector": (
        "assurance", "insurance", "iard", "vie", "prévoyance", "santé",
        "mutuelle", "sinistre", "souscription", "actuariat", "courtage",
        "réassurance", "dommages", "responsabilité civile", "retraite",
        "épargne", "risques divers", "protection sociale", "solvabilité 2",
        "solvency ii",
    ),
    "project_management_banking": (
        "moa", "moe", "pmo", "chef de projet", "project manager",
        "product owner", "business analyst", "scrum master", "agile",
        "cycle en v", "cahier des charges", "spécifications", "recette",
        "homologation", "uat", "conduite du changement", "pilotage",
        "budget", "planning", "risques", "comité de pilotage", "copil",
        "coproj", "ateliers", "expression de besoin", "user stories",
        "backlog", "jira", "confluence",
    ),
    "crm_salesforce": (
        "salesforce", "crm", "apex", "visualforce", "lightning", "lwc",
        "soql", "sosl", "sales cloud", "service cloud", "marketing cloud",
        "commerce cloud", "experience cloud", "trailhead", "certified",
        "administrator", "developer", "consultant", "architect", "workflow",
        "process builder", "flow", "trigger", "class", "test", "deployment",
        "copado", "jira", "agile",
    ),
    "marketing_digital": (
        "seo", "sem", "google ads", "facebook ads", "social media",
        "content marketing", "email marketing", "analytics", "conversion",
        "roi", "cpc", "ctr", "growth hacking", "a/b testing",
        "google analytics", "tag manager", "automation", "crm",
        "lead generation", "brand management", "influencer marketing",
        "affiliate marketing", "performance marketing",
    ),
    "project_management": (
        "project management", "agile", "scrum", "kanban", "prince2", "pmp",
        "waterfall", "gantt", "milestone", "stakeholder", "budget",
        "timeline", "risk management", "resource planning",
        "team management", "communication", "leadership", "coordination",
        "planning", "delivery", "quality assurance", "change management",
        "jira",
    ),
    "mobile_development": (
        "ios", "android", "swift", "kotlin", "objective-c", "java",
        "react native", "flutter", "dart", "xamarin", "ionic", "mobile ui",
        "responsive design", "app store", "google play",
        "push notifications", "core data", "realm", "firebase",
        "mobile testing", "testflight", "crashlytics",
    ),
}

FUZZY_WORD_THRESHOLD = 0.6
FUZZY_MATCH_WEIGHT = 0.7
WEAK_MATCH_THRESHOLD = 0.8
SECTOR_ALIGNMENT_BONUS = 1.1

# --- Semantic scoring ---

BANKING_INSURANCE_CONCEPTS: dict[str, tuple[str, ...]] = {
    "risk_management": (
        "risque", "risk management", "contrôle des risques", "var",
        "stress test", "bâle", "basel", "solvabilité", "credit risk",
        "market risk", "operational risk",
    ),
    "financial_control": (
        "contrôleur de gestion", "contrôle de gestion", "finance", "budget",
        "consolidation", "reporting financier", "analyse financière",
        "comptabilité",
    ),
    "data_analytics": (
        "data analyst", "business analyst", "data science", "analytics",
        "machine learning", "reporting", "kpi", "dashboard", "bi",
    ),
    "project_management": (
        "chef de projet", "project manager", "amoa", "scrum master", "agile",
        "gestion de projet", "coordination", "pilotage", "management",
    ),
    "insurance_actuarial": (
        "actuaire", "actuariat", "tarification", "provisionnement",
        "solvency ii", "assurance vie", "iard", "souscription", "sinistre",
    ),
    "banking_operations": (
        "banque", "bancaire", "crédit", "front office", "back office",
        "conseiller clientèle", "commercial banque", "compliance",
    ),
    "technology_fintech": (
        "développeur", "senior", "lead developer", "fintech",
        "digital banking", "core banking", "api", "cloud", "cybersécurité",
    ),
    "management_leadership": (
        "manager", "directeur", "responsable", "head", "senior manager",
        "leadership", "équipe", "strategy", "transformation",
    ),
}

CONCEPT_MATCH_THRESHOLD = 0.3
MAX_SEMANTIC_MATCHES = 8
MAX_CONCEPT_BONUS = 10.0

# --- Skills level ---

SKILL_LEVEL_FACTORS: dict[str | None, float] = {
    "expert": 1.0,
    "advanced": 0.9,
    "intermediate": 0.75,
    "beginner": 0.5,
    None: 0.8,
}

# --- Multi-dimensional matching ---

SIMILAR_SKILL_THRESHOLD = 0.85
TRANSFERABLE_SKILL_THRESHOLD = 0.7

SENIORITY_LEVELS: tuple[str, ...] = ("Junior", "Confirmé", "Senior", "Expert")

SOFT_SKILL_FAMILIES: dict[str, tuple[str, ...]] = {
    "leadership": ("management", "encadrement", "direction"),
    "communication": ("relationnel", "présentation", "négociation"),
    "créativité": ("innovation", "imagination", "originalité"),
    "rigueur": ("précision", "méthode", "organisation"),
}

TECH_SKILL_FAMILIES: dict[str, tuple[str, ...]] = {
    "React": ("Vue.js", "Angular", "Svelte"),
    "Django": ("Spring", "Rails", "Express.js"),
    "PostgreSQL": ("MySQL", "Oracle", "SQL Server"),
    "Docker": ("Kubernetes", "Vagrant", "LXC"),
}

# (regex, Bac+N level)
DIPLOMA_EQUIVALENCES: tuple[tuple[str, int], ...] = (
    (r"master|bac\s*\+\s*5|ingénieur|ingenieur", 5),
    (r"licence|bachelor|bac\s*\+\s*3", 3),
    (r"bts|dut|bac\s*\+\s*2", 2),
)

MULTI_DIMENSIONAL_WEIGHTS: dict[str, dict[str, float]] = {
    "default": {
        "technical": 0.35,
        "experience": 0.25,
        "education": 0.10,
        "soft_skills": 0.10,
        "cultural": 0.10,
        "authenticity": 0.10,
    },
    "tech": {
        "technical": 0.40,
        "experience": 0.25,
        "education": 0.05,
        "soft_skills": 0.10,
        "cultural": 0.10,
        "authenticity": 0.10,
    },
    "finance": {
        "technical": 0.30,
        "experience": 0.25,
        "education": 0.20,
        "soft_skills": 0.10,
        "cultural": 0.05,
        "authenticity": 0.10,
    },
}

# Sector keyword families mapped to the coarse weighting profiles above
SECTOR_WEIGHT_PROFILE: dict[str, str] = {
    "tech_fullstack": "tech",
    "data_science": "tech",
    "mobile_development": "tech",
    "crm_salesforce": "tech",
    "finance_banking": "finance",
    "insurance_sector": "finance",
    "project_management_banking": "finance",
}

# --- ATS readiness ---

ATS_CRITERIA_POINTS: dict[str, int] = {
    "structure": 25,
    "keywords": 30,
    "date_format": 15,
    "sections": 20,
    "length": 10,
}

MEASURABLE_RESULTS_PATTERN = (
    r"\d+%|\d+\+|\$\d+|\d+\s?€|increased|improved|reduced|saved|managed|led"
    r"|achieved|generated|grew|delivered|augment\w*|réduit|dirigé|géré"
)
MIN_MEASURABLE_RESULTS = 5

NEGATIVE_PHRASES: tuple[str, ...] = (
    "responsible for",
    "duties included",
    "helped with",
    "chargé de",
    "participé à",
)

OPTIMAL_WORD_COUNT = (200, 800)

# --- TF-IDF vector scoring ---

VECTOR_STOPWORDS: frozenset[str] = frozenset({
    "le", "de", "un", "à", "être", "et", "en", "avoir", "que", "pour", "dans",
    "ce", "son", "une", "sur", "avec", "ne", "se", "pas", "tout", "pouvoir",
    "par", "plus", "dire", "me", "on", "mon", "lui", "nous", "comme", "mais",
    "faire", "ses", "tu", "ou", "cette", "ainsi", "leur",
    "the", "and", "or", "but", "in", "at", "to", "for", "of", "with", "by",
    "a", "an", "is", "are", "was", "were",
})
MIN_TOKEN_LENGTH = 3
MAX_COMMON_TERMS = 10

# --- Domain skill scoring ---

DOMAIN_SKILL_TERMS: dict[str, tuple[str, ...]] = {
    "banking": (
        "solvabilité", "bâle", "capital adequacy", "tier 1", "tier 2", "corep",
        "finrep", "srep", "icaap", "ilaap", "crr", "crd", "prudentiel",
        "supervisory review", "core banking", "swift", "sepa", "target2", "psd2",
        "crédit", "loan", "mortgage", "retail banking", "corporate banking",
        "investment banking", "private banking",
    ),
    "insurance": (
        "solvency ii", "actuariat", "actuarial", "provisionnement", "underwriting",
        "claims", "sinistres", "tarification", "réassurance", "reinsurance",
        "cat modelling", "vie", "non-vie", "iard", "prévoyance",
        "asset liability management", "alm",
    ),
    "risk": (
        "risk management", "credit risk", "market risk", "operational risk",
        "liquidity risk", "concentration risk", "var", "value at risk",
        "expected shortfall", "stress testing", "backtesting", "scenario analysis",
        "monte carlo", "risk appetite", "risk framework", "rating", "scoring",
        "pd", "lgd", "ead", "irb", "standardised approach",
    ),
    "it": (
        "core banking system", "cbs", "temenos", "finastra", "sap banking",
        "oracle flexcube", "misys", "swift integration", "api banking",
        "open banking", "blockchain", "cryptocurrency", "fintech",
        "regulatory reporting", "data governance", "cybersécurité",
        "fraud detection", "aml systems", "sql server", "oracle database",
        "mainframe", "cobol", "java banking", "python finance",
    ),
    "management": (
        "change management", "transformation digitale", "stakeholder management",
        "project portfolio", "governance", "compliance management", "audit",
        "contrôle interne", "risk governance", "comité", "board reporting",
        "management reporting", "kpi", "balanced scorecard",
        "performance management", "équipe", "leadership", "coaching", "formation",
    ),
    "finance": (
        "comptabilité", "ifrs", "gaap", "consolidation", "budget", "forecasting",
        "planning financier", "cash management", "trésorerie", "alm", "trading",
        "fixed income", "equity", "derivatives", "portfolio management",
        "asset management", "valuation", "mark to market", "fair value",
        "hedge accounting", "transfer pricing",
    ),
}
DOMAIN_TERM_SIMILARITY_THRESHOLD = 0.7
MAX_MISSING_PER_DOMAIN = 2
MAX_MISSING_COMPETENCIES = 5

# --- Hybrid scoring ---

HYBRID_MODE_WEIGHTS: dict[str, dict[str, float]] = {
    "fast": {"vector": 0.4, "keyword": 0.35, "embedding": 0.15, "semantic": 0.1},
    "balanced": {"vector": 0.25, "keyword": 0.3, "embedding": 0.3, "semantic": 0.15},
    "comprehensive": {"vector": 0.2, "keyword": 0.25, "embedding": 0.35, "semantic": 0.2},
}
HYBRID_CONTEXT_WEIGHTS: dict[str, dict[str, float]] = {
    "management": {"vector": 0.2, "keyword": 0.35, "embedding": 0.25, "semantic": 0.2},
    "finance": {"vector": 0.25, "keyword": 0.4, "embedding": 0.25, "semantic": 0.1},
    "it": {"vector": 0.3, "keyword": 0.25, "embedding": 0.35, "semantic": 0.1},
    "banking": {"vector": 0.2, "keyword": 0.35, "embedding": 0.3, "semantic": 0.15},
    "insurance": {"vector": 0.2, "keyword": 0.35, "embedding": 0.3, "semantic": 0.15},
}

PROFILE_CONTEXT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "management": ("manager", "directeur", "chef", "responsable", "head", "senior"),
    "finance": ("finance", "comptable", "contrôle", "audit", "budget", "analyste"),
    "it": ("développeur", "data", "senior", "lead", "tech", "informatique"),
    "banking": ("banque", "crédit", "commercial", "conseiller", "compliance"),
    "insurance": ("assurance", "actuaire", "souscription", "sinistre"),
}
# Checked in order: the first level with a marker present wins.
EXPERIENCE_LEVEL_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("senior", ("senior", "expert", "lead")),
    ("junior", ("junior", "stagiaire", "débutant")),
    ("expert", ("chief", "directeur", "head")),
)

JOB_SECTOR_HINTS: dict[str, tuple[str, ...]] = {
    "finance_banking": (
        "risk", "banking", "finance", "investment", "credit", "basel",
        "regulatory", "financial",
    ),
    "tech_fullstack": (
        "javascript", "react", "node", "api", "fullstack", "developer", "frontend",
        "backend", "programming",
    ),
    "data_science": (
        "data", "machine learning", "python", "analytics", "model", "ai", "science",
        "algorithm", "statistical",
    ),
}
SECTOR_TRANSFERABILITY: dict[str, dict[str, float]] = {
    "finance_banking": {
        "data_science": 0.6, "tech_fullstack": 0.5, "project_management": 0.4,
        "finance_banking": 1.0,
    },
    "data_science": {
        "finance_banking": 0.6, "tech_fullstack": 0.7, "project_management": 0.4,
        "data_science": 1.0,
    },
    "tech_fullstack": {
        "finance_banking": 0.5, "data_science": 0.7, "project_management": 0.5,
        "tech_fullstack": 1.0,
    },
    "project_management": {
        "finance_banking": 0.3, "data_science": 0.3, "tech_fullstack": 0.4,
        "project_management": 1.0,
    },
    "marketing_digital": {
        "finance_banking": 0.1, "data_science": 0.2, "tech_fullstack": 0.3,
        "project_management": 0.4, "marketing_digital": 1.0,
    },
}
DEFAULT_TRANSFERABILITY = 0.2
SPECIALIZED_SECTORS: tuple[str, ...] = ("data_science", "finance_banking")

# --- Workspace ---

DOSSIER_STATUSES: tuple[str, ...] = ("draft", "inProgress", "submitted", "won", "lost")
CLIENT_STATUSES: tuple[str, ...] = ("prospect", "active", "inactive")
INVITATION_STATUSES: tuple[str, ...] = ("pending", "accepted", "expired", "cancelled")

DOSSIER_STATUS_DISPLAY: dict[str, str] = {
    "draft": "draft",
    "inProgress": "in_progress",
    "submitted": "sent",
    "won": "completed",
    "lost": "completed",
}

DEFAULT_CANDIDATE_NAME = "Candidat"
DEFAULT_CANDIDATE_TITLE = "Non spécifié"
