"""
src/tools/job_analysis.py - target job analysis tool

The model reads the job description and fills in the structured fields below;
the executor normalises them (dedupe, trim) and hands them back so the analysis
sits in the conversation for the optimisation step.
"""


from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from config import ExperienceLevel
from tools.registry import ToolDescriptor


class JobAnalysisInput(BaseModel):

    jobDescription: str = Field(description="The full job description text")
    jobTitle: str = Field(description="The job title")
    company: str = Field(default="", description="Company name if mentioned")
    keyRequirements: List[str] = Field(default_factory=list, description="Key job requirements and qualifications")
    requiredSkills: List[str] = Field(default_factory=list, description="Required technical and soft skills")
    preferredSkills: List[str] = Field(default_factory=list, description="Preferred or nice-to-have skills")
    keywords: List[str] = Field(default_factory=list, description="Important keywords and phrases from the job description")
    experienceLevel: ExperienceLevel = Field(description="Required experience level")
    industryFocus: Optional[str] = Field(default=None, description="Industry or domain focus")
    workLocation: Optional[str] = Field(default=None, description="Work location if specified")


def _dedupe(items: List[str]) -> List[str]:
    """Trim entries and drop case-insensitive duplicates, keeping first occurrence."""

    seen = set()
    out = []

    for item in items:
        cleaned = item.strip()
        key = cleaned.lower()
        if cleaned and key not in seen:
            seen.add(key)
            out.append(cleaned)

    return out


def analyze_job(args: JobAnalysisInput) -> Dict[str, Any]:

    logger.info(f"[tools] analyze_job: {args.jobTitle!r} ({len(args.jobDescription)} chars)")

    analysis = {
        "jobTitle": args.jobTitle.strip(),
        "company": args.company.strip(),
        "keyRequirements": _dedupe(args.keyRequirements),
        "requiredSkills": _dedupe(args.requiredSkills),
        "preferredSkills": _dedupe(args.preferredSkills),
        "keywords": _dedupe(args.keywords),
        "experienceLevel": args.experienceLevel.value,
        "industryFocus": args.industryFocus,
        "workLocation": args.workLocation,
    }
    overview = {
        "requirementsCount": len(analysis["keyRequirements"]),
        "skillsCount": len(analysis["requiredSkills"]) + len(analysis["preferredSkills"]),
        "keywordsCount": len(analysis["keywords"]),
    }

    return {"jobAnalysis": analysis, "overview": overview}


TOOL = ToolDescriptor(
    name="analyze_job",
    description="Analyze job description to extract key requirements, skills, and keywords for resume optimization.",
    input_schema=JobAnalysisInput,
    executor=analyze_job,
)
