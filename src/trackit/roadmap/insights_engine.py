# trackit/roadmap/insights_engine.py

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from openai import OpenAI

from trackit.config import Settings, get_settings
from trackit.roadmap.models import Project

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a strategy advisor for an engineering director. "
    "Return ONLY a valid JSON object with exactly three fields:\n"
    "1. 'summary': an executive summary of current project health (string).\n"
    "2. 'risks': the critical risks identified (array of strings).\n"
    "3. 'recommendations': strategic next steps (array of strings).\n"
    "Do not include markdown or any text outside the JSON object."
)


@dataclass(frozen=True)
class DirectorInsight:
    summary: str
    risks: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


FALLBACK_INSIGHT = DirectorInsight(
    summary="Unable to generate insights at this time.",
    risks=["System connectivity issues"],
    recommendations=["Manually review recent updates"],
)


def fallback_insight() -> DirectorInsight:
    return DirectorInsight(
        summary=FALLBACK_INSIGHT.summary,
        risks=list(FALLBACK_INSIGHT.risks),
        recommendations=list(FALLBACK_INSIGHT.recommendations),
    )


# -----------------------------
# Prompt
# -----------------------------

def build_insight_prompt(project: Project) -> str:
    updates_text = "\n".join(
        f"[{u.timestamp.isoformat()}] Status: {u.status.value}. "
        f"Manager: {u.manager_name}. Milestone: {u.milestone}. Update: {u.content}"
        for u in project.updates
    ) or "(no updates submitted yet)"

    return (
        f'Analyze the following project updates for the project "{project.name}" '
        f"(Description: {project.description}).\n"
        f"Owner: {project.owner}. Planned window: {project.start_date} to {project.end_date}.\n"
        "Provide a strategic summary, key risks, and recommendations for a Director-level audience.\n\n"
        f"Updates:\n{updates_text}"
    )


# -----------------------------
# Response parsing
# -----------------------------

def _as_str_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def parse_insight(text: str) -> DirectorInsight:
    """
    Parse the model output into a DirectorInsight.

    Tolerates JSON wrapped in markdown fences or extra prose; raises
    ValueError when no usable object is found.
    """
    text = (text or "").strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", text, re.DOTALL)
        if not match:
            raise ValueError(f"No JSON object in model response: {text[:200]!r}")
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed JSON in model response: {e}") from e

    if not isinstance(data, dict) or not str(data.get("summary") or "").strip():
        raise ValueError("Model response is missing 'summary'.")

    return DirectorInsight(
        summary=str(data["summary"]).strip(),
        risks=_as_str_list(data.get("risks")),
        recommendations=_as_str_list(data.get("recommendations")),
    )


# -----------------------------
# Main entry point
# -----------------------------

def generate_director_insights(
    project: Project,
    client=None,
    settings: Optional[Settings] = None,
) -> DirectorInsight:
    """
    Ask the LLM for a director-level read of one project.

    Never raises: any failure (no key, network, malformed output) is
    logged and the fixed placeholder insight is returned instead.
    """
    settings = settings or get_settings()

    if client is None:
        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY not set; returning placeholder insights")
            return fallback_insight()
        client = OpenAI(api_key=settings.openai_api_key)

    try:
        response = client.chat.completions.create(
            model=settings.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_insight_prompt(project)},
            ],
            temperature=settings.temperature,
            response_format={"type": "json_object"},
        )
        return parse_insight(response.choices[0].message.content)
    except Exception as e:
        logger.warning(f"Insight generation failed for project {project.id}: {e}", exc_info=True)
        return fallback_insight()
