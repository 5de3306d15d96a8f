"""
Job Enrichment Service - LLM-drafted descriptive text for job postings

An optional helper for employers: given a title and company it drafts a
description and a short list of required skills, and it can produce sample
listings for a search query. Output is descriptive text only. Match
scores always come from the deterministic Scorer, never from the model.

Failures (no API key, API error, unparseable output) raise
CollaboratorUnavailable; there is no retry and no silent placeholder text.

Usage:
    from openai import AsyncOpenAI

    enricher = JobEnricher(openai_client=AsyncOpenAI())
    draft = await enricher.draft_job_details("Electrician", "Acme Build")
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from openai import AsyncOpenAI

from workbridge.config import get_settings
from workbridge.errors import CollaboratorUnavailable

logger = logging.getLogger(__name__)

MAX_SKILLS = 7
MAX_GENERATED_JOBS = 10

JOB_DETAILS_PROMPT = """Create a detailed job description and a list of required skills for the job title "{title}" at company "{company}".
The description should be professional and at least 100 words. Provide 5-7 key skills.

Return ONLY valid JSON in this exact format:
{{"description": "...", "required_skills": ["...", "..."]}}"""

SAMPLE_JOBS_PROMPT = """Generate a list of {count} realistic, diverse job listings for skilled trades. The query is: {query}.
Include realistic locations, countries and salary ranges (salary_min <= salary_max, annual, local currency).

Return ONLY valid JSON in this exact format:
{{"jobs": [{{"employer_name": "...", "title": "...", "description": "...", "required_skills": ["..."],
"location": "...", "country": "...", "salary_min": 50000, "salary_max": 70000}}]}}"""


@dataclass
class JobDraft:
    """
    Model-drafted text for a job posting.

    Attributes:
        description: Drafted description
        required_skills: Up to 7 skill tags
    """
    description: str
    required_skills: List[str] = field(default_factory=list)


@dataclass
class SampleJob:
    employer_name: str
    title: str
    description: str
    required_skills: List[str]
    location: str
    country: str
    salary_min: int
    salary_max: int


def _clean_skills(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    skills = [str(s).strip() for s in raw if str(s).strip()]
    return skills[:MAX_SKILLS]


def _load_json(content: Optional[str]) -> dict:
    if not content:
        raise ValueError("empty response")
    content = content.strip()

    # Handle markdown code blocks
    if content.startswith("```"):
        lines = content.split("\n")
        content = "\n".join(lines[1:-1])

    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("response is not a JSON object")
    return data


class JobEnricher:
    """
    OpenAI-backed drafting of job text.

    Attributes:
        client: Async OpenAI client
        model: Chat model (default: gpt-4o-mini)
    """

    def __init__(self, openai_client: Any, model: str = "gpt-4o-mini"):
        self.client = openai_client
        self.model = model

    async def _complete(self, prompt: str, temperature: float) -> dict:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": "You write job postings for skilled trades. Return only valid JSON."
                    },
                    {"role": "user", "content": prompt}
                ],
                response_format={"type": "json_object"},
                temperature=temperature,
                max_tokens=2000,
            )
            return _load_json(response.choices[0].message.content)
        except Exception as e:
            logger.error(f"Enrichment call failed: {e}")
            raise CollaboratorUnavailable("Job enrichment is unavailable") from e

    async def draft_job_details(self, title: str, company: str) -> JobDraft:
        """
        Draft a description and required skills for a job.

        Raises:
            CollaboratorUnavailable: if the model call fails or returns garbage
        """
        data = await self._complete(
            JOB_DETAILS_PROMPT.format(title=title[:200], company=company[:200]),
            temperature=0.4,
        )
        description = str(data.get("description") or "").strip()
        if not description:
            logger.error("Enrichment returned no description")
            raise CollaboratorUnavailable("Job enrichment returned no description")
        return JobDraft(description=description, required_skills=_clean_skills(data.get("required_skills")))

    async def generate_sample_jobs(self, query: str, count: int = 5) -> List[SampleJob]:
        """
        Generate sample listings for a query. Malformed items are dropped.

        Raises:
            CollaboratorUnavailable: if the model call fails
        """
        count = max(1, min(count, MAX_GENERATED_JOBS))
        data = await self._complete(SAMPLE_JOBS_PROMPT.format(count=count, query=query[:200]), temperature=0.8)

        items = data.get("jobs")
        if not isinstance(items, list):
            items = []

        jobs = []
        for item in items[:count]:
            try:
                salary_min = int(item.get("salary_min", 0))
                salary_max = int(item.get("salary_max", 0))
                title = str(item["title"]).strip()
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed generated job: {e}")
                continue
            if not title or salary_min < 0 or salary_min > salary_max:
                logger.warning(f"Skipping generated job with invalid fields: {title!r}")
                continue
            jobs.append(SampleJob(
                employer_name=str(item.get("employer_name", "")).strip(),
                title=title,
                description=str(item.get("description", "")).strip(),
                required_skills=_clean_skills(item.get("required_skills")),
                location=str(item.get("location", "")).strip(),
                country=str(item.get("country", "")).strip(),
                salary_min=salary_min,
                salary_max=salary_max,
            ))
        return jobs


def get_enricher() -> JobEnricher:
    """FastAPI dependency. Raises CollaboratorUnavailable when no API key is configured."""
    settings = get_settings()
    if not settings.openai_api_key:
        raise CollaboratorUnavailable("Job enrichment is not configured")
    return JobEnricher(AsyncOpenAI(api_key=settings.openai_api_key), model=settings.enrichment_model)
