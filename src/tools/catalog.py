"""
src/tools/catalog.py

The default tool set offered to the resume optimizer model.
"""


from tools import job_analysis, resume_extraction, resume_optimization
from tools.registry import ToolRegistry


def build_default_registry() -> ToolRegistry:
    """Registry with the job analysis, resume extraction and resume optimisation tools."""

    return ToolRegistry([
        job_analysis.TOOL,
        resume_extraction.TOOL,
        resume_optimization.TOOL,
    ])
