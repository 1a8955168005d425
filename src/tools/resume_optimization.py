"""
src/tools/resume_optimization.py - resume optimisation tool

The model passes the rewritten resume plus the job keywords it targeted. We
record the result and measure how many keywords the optimised text actually
covers, using RapidFuzz partial matching so "Kubernetes (EKS)" still counts for
"kubernetes".
"""


from typing import Any, Dict, List

from loguru import logger
from pydantic import BaseModel, Field
from rapidfuzz import fuzz

from tools.registry import ToolDescriptor
from tools.resume_extraction import ResumeData


KEYWORD_MATCH_THRESHOLD = 85


class ResumeOptimizationInput(BaseModel):

    optimizedResume: ResumeData = Field(description="The resume rewritten for the target job; facts unchanged")
    targetJobTitle: str = Field(default="", description="Title of the target job")
    targetKeywords: List[str] = Field(default_factory=list, description="Job keywords the rewrite should cover")


def _resume_corpus(resume: ResumeData) -> List[str]:
    """Flatten the searchable text of a resume into chunks."""

    chunks: List[str] = []

    if resume.summary:
        chunks.append(resume.summary)
    for exp in resume.experience:
        chunks.append(exp.title)
        if exp.description:
            chunks.append(exp.description)
        chunks.extend(exp.achievements)
    chunks.extend(s.name for s in resume.skills)

    return [c for c in chunks if c]


def keyword_coverage(resume: ResumeData, keywords: List[str]) -> Dict[str, Any]:
    """
    Split `keywords` into covered and missing against the resume text.

    A keyword is covered when any chunk scores >= KEYWORD_MATCH_THRESHOLD
    with partial_ratio (case-insensitive).
    """

    corpus = [c.lower() for c in _resume_corpus(resume)]
    covered, missing = [], []

    for kw in keywords:
        needle = kw.strip().lower()
        if not needle:
            continue
        hit = any(fuzz.partial_ratio(needle, chunk) >= KEYWORD_MATCH_THRESHOLD for chunk in corpus)
        (covered if hit else missing).append(kw.strip())

    total = len(covered) + len(missing)
    ratio = round(len(covered) / total, 2) if total else 0.0

    return {"covered": covered, "missing": missing, "ratio": ratio}


def optimize_resume(args: ResumeOptimizationInput) -> Dict[str, Any]:

    coverage = keyword_coverage(args.optimizedResume, args.targetKeywords)
    logger.info(
        f"[tools] optimize_resume: target={args.targetJobTitle!r}, "
        f"keywords covered {len(coverage['covered'])}/{len(coverage['covered']) + len(coverage['missing'])}"
    )

    return {
        "optimizedResumeData": args.optimizedResume.model_dump(exclude_none=True),
        "targetJob": args.targetJobTitle,
        "keywordCoverage": coverage,
    }


TOOL = ToolDescriptor(
    name="optimize_resume",
    description=(
        "Record the optimized resume for the target job and report which job keywords it covers. "
        "Keep all facts (dates, companies, titles, education) unchanged."
    ),
    input_schema=ResumeOptimizationInput,
    executor=optimize_resume,
)
