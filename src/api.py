"""
src/api.py

FastAPI boundary for the resume optimizer.
- POST /api/optimize-resume: streams progress/complete/error frames (NDJSON or SSE)
- GET /api/tools: tool inventory
- GET /: health check

Run with: uvicorn api:app --app-dir src
"""


from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from config import LOG_DIR, STREAM_MEDIA_TYPES, StreamFormat
from logger import setup_logger
from orchestrator.agent import ResumeOptimizerAgent
from orchestrator.models import OptimizationRequest
from orchestrator.streaming import stream_run


class OptimizeRequestBody(BaseModel):

    resumeText: str = Field(min_length=1)
    jobDescription: str = Field(min_length=1)

    @field_validator("resumeText", "jobDescription")
    @classmethod
    def _not_blank(cls, v: str) -> str:

        if not v.strip():
            raise ValueError("must not be blank")

        return v


@lru_cache(maxsize=1)
def get_agent() -> ResumeOptimizerAgent:
    """One agent per process; the tool registry inside it is read-only."""

    return ResumeOptimizerAgent()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown"""
    setup_logger(LOG_DIR)
    logger.info("[api] Resume optimizer API starting")

    yield

    logger.info("[api] Resume optimizer API stopped")


app = FastAPI(
    title="Resume Optimizer Agent",
    description="Streams a tool-calling resume optimization run",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def reject_bad_request(request: Request, exc: RequestValidationError):
    """Invalid requests never reach the agent. Body problems read as missing fields."""

    errors = exc.errors()
    logger.warning(f"[api] Rejected request: {errors}")

    query_errors = [e for e in errors if tuple(e.get("loc", ()))[:1] == ("query",)]
    if query_errors:
        e = query_errors[0]
        param = ".".join(str(p) for p in tuple(e["loc"])[1:])
        error = f"Invalid query parameter '{param}': {e.get('msg')}"
    else:
        error = "Missing resumeText or jobDescription"

    return JSONResponse(status_code=400, content={"success": False, "error": error})


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "service": "Resume Optimizer Agent"}


@app.get("/api/tools")
def tools(agent: ResumeOptimizerAgent = Depends(get_agent)):

    return agent.tool_inventory()


@app.post("/api/optimize-resume")
def optimize_resume(
    body: OptimizeRequestBody,
    format: StreamFormat = Query(StreamFormat.NDJSON),
    agent: ResumeOptimizerAgent = Depends(get_agent),
):
    logger.info(
        f"[api] Received optimization request "
        f"(resume={len(body.resumeText)} chars, job={len(body.jobDescription)} chars)"
    )
    request = OptimizationRequest(source_text=body.resumeText, target_description=body.jobDescription)

    return StreamingResponse(
        stream_run(agent, request, format),
        media_type=STREAM_MEDIA_TYPES[format.value],
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
