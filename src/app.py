"""
src/app.py

Local gradio UI: paste or upload a resume, paste the job description, watch the
agent's progress stream in, then download the optimized resume.
"""


import json
import tempfile
from pathlib import Path
from typing import Optional

import gradio as gr
from loguru import logger

from config import LOG_DIR, STEP_BUDGET
from context.documents import load_document_text
from logger import setup_logger
from orchestrator.agent import ResumeOptimizerAgent
from orchestrator.models import OptimizationRequest
from orchestrator.streaming import stream_events
from tools.exports import export_resume_pdf


APP_TITLE = "Resume Optimizer (Local Demo)"
APP_DESC = (
    "Paste your resume (or upload a PDF/TXT) and the job description. "
    f"The agent analyzes the job, extracts your resume and rewrites it in at most {STEP_BUDGET} model turns."
)

_AGENT: Optional[ResumeOptimizerAgent] = None
_EXPORT_DIR: Optional[tempfile.TemporaryDirectory] = None


def _agent() -> ResumeOptimizerAgent:

    global _AGENT
    if _AGENT is None:
        _AGENT = ResumeOptimizerAgent()

    return _AGENT


def _export_path() -> Path:
    """Fresh PDF path inside one temp directory per process, removed at exit."""

    global _EXPORT_DIR
    if _EXPORT_DIR is None:
        _EXPORT_DIR = tempfile.TemporaryDirectory(prefix="resume-optimizer-")

    with tempfile.NamedTemporaryFile(
        dir=_EXPORT_DIR.name, prefix="optimized_resume_", suffix=".pdf", delete=False,
    ) as f:
        return Path(f.name)


def _progress_line(event) -> str:

    if event.type == "progress":
        tools = f"  [{', '.join(event.tools_used)}]" if event.tools_used else ""
        return f"{event.step}/{event.total_steps}  {event.message}{tools}"
    if event.type == "complete":
        return f"Done in {event.execution_time_ms / 1000:.1f}s"

    return f"Error: {event.error}"


def handle_optimize(resume_text: str, resume_file, job_description: str):
    """
    Generator for the Optimize button.
    Yields (progress log, result JSON, cover letter, PDF path) after each event.
    """

    if resume_file is not None:
        try:
            resume_text = load_document_text(getattr(resume_file, "name", resume_file))
        except (OSError, ValueError) as e:
            yield f"Error: {e}", "", "", None
            return

    if not (resume_text or "").strip() or not (job_description or "").strip():
        yield "Error: resume text and job description are both required.", "", "", None
        return

    request = OptimizationRequest(source_text=resume_text, target_description=job_description)
    lines = []

    for event in stream_events(_agent(), request):
        lines.append(_progress_line(event))
        log = "\n".join(lines)

        if event.type != "complete":
            yield log, "", "", None
            continue

        payload = event.payload or {}
        resume = payload.get("optimizedResumeData")
        pdf_path = None
        if resume:
            try:
                pdf_path = export_resume_pdf(resume, _export_path())
            except ValueError as e:
                logger.warning(f"[app] PDF export skipped: {e}")
                lines.append(f"PDF export skipped: {e}")
                log = "\n".join(lines)

        result_json = json.dumps(resume if resume else payload, indent=2, ensure_ascii=False)
        yield log, result_json, payload.get("coverLetter", ""), pdf_path


def app():
    with gr.Blocks(title=APP_TITLE) as demo:
        gr.Markdown(f"# {APP_TITLE}")
        gr.Markdown(APP_DESC)

        with gr.Row():
            with gr.Column():
                resume_text = gr.Textbox(label="Resume text", lines=14, placeholder="Paste your resume here")
                resume_file = gr.File(label="...or upload a resume", file_types=[".pdf", ".txt", ".md"])
            job_description = gr.Textbox(label="Job description", lines=18, placeholder="Paste the job posting here")

        run = gr.Button("Optimize", variant="primary")
        progress = gr.Textbox(label="Progress", lines=6, interactive=False)

        with gr.Tab("Optimized resume"):
            out = gr.Code(label="Result", language="json")
            pdf = gr.File(label="PDF")
        with gr.Tab("Cover letter"):
            cover_letter = gr.Textbox(label="Cover letter", lines=16)

        run.click(
            fn=handle_optimize,
            inputs=[resume_text, resume_file, job_description],
            outputs=[progress, out, cover_letter, pdf],
        )

    return demo


if __name__ == "__main__":

    setup_logger(LOG_DIR)
    app().launch()

# EOF
