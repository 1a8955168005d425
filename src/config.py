"""
src/config.py
"""


import os
from enum import Enum
from typing import Dict, Optional


class StreamFormat(str, Enum):

    NDJSON = "ndjson"
    SSE = "sse"

class ExperienceLevel(str, Enum):

    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    EXECUTIVE = "executive"


# Model
OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
DEFAULT_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
MODEL_TEMPERATURE: float = 0.2
MODEL_TIMEOUT_S: float = float(os.getenv("OPENAI_TIMEOUT_S", "60"))

# Run limits
STEP_BUDGET: int = 10                       # Max model turns per run
RUN_TIMEOUT_S: float = float(os.getenv("RUN_TIMEOUT_S", "300"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR: Optional[str] = os.getenv("LOG_DIR")

# Tools whose call is worth a dedicated progress message
MILESTONE_MESSAGES: Dict[str, str] = {
    "analyze_job": "Analyzing target job requirements...",
    "extract_resume_data": "Extracting resume data...",
    "optimize_resume": "Optimizing resume for target job...",
}

START_MESSAGE = "Starting resume optimization for target job..."
DONE_MESSAGE = "Resume optimization completed!"

# Streaming
STREAM_MEDIA_TYPES: Dict[str, str] = {
    "ndjson": "application/x-ndjson",
    "sse": "text/event-stream",
}
# EOF
