"""
src/tools/resume_extraction.py - structured resume extraction tool

Defines the resume data shape shared by the extraction and optimisation tools
and the PDF export.
"""


from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from tools.registry import ToolDescriptor


class ContactInfo(BaseModel):

    name: str = Field(description="Full name")
    email: str = Field(default="", description="Email address")
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None
    github: Optional[str] = None


class Experience(BaseModel):

    title: str = Field(description="Job title")
    company: str = Field(description="Company name")
    startDate: str = Field(description="Start date")
    endDate: Optional[str] = Field(default=None, description='End date or "Present"')
    location: Optional[str] = None
    description: Optional[str] = None
    achievements: List[str] = Field(default_factory=list, description="Key achievements or responsibilities")


class Education(BaseModel):

    degree: str
    institution: str
    graduationDate: Optional[str] = None
    location: Optional[str] = None
    gpa: Optional[str] = None
    honors: List[str] = Field(default_factory=list)


class Skill(BaseModel):

    name: str
    category: str = Field(description="Skill category (technical, soft, language, etc.)")
    level: Optional[str] = None


class ResumeData(BaseModel):

    contactInfo: ContactInfo
    summary: Optional[str] = None
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)


class ResumeExtractionInput(ResumeData):

    resumeText: str = Field(description="The full resume text to extract information from")


def extract_resume_data(args: ResumeExtractionInput) -> Dict[str, Any]:

    logger.info(f"[tools] extract_resume_data: {len(args.resumeText)} chars")

    resume = ResumeData.model_validate(args.model_dump(exclude={"resumeText"}))
    overview = {
        "hasContactInfo": bool(resume.contactInfo.name),
        "hasSummary": bool(resume.summary),
        "experienceCount": len(resume.experience),
        "educationCount": len(resume.education),
        "skillsCount": len(resume.skills),
    }

    return {"resumeData": resume.model_dump(exclude_none=True), "overview": overview}


TOOL = ToolDescriptor(
    name="extract_resume_data",
    description="Extract and structure resume information from resume text.",
    input_schema=ResumeExtractionInput,
    executor=extract_resume_data,
)
