"""
LLM service for categorizing extracted contact data.

Runs once per email after a crawl finishes. Any failure leaves the record as
it was; a reply without usable JSON yields neutral placeholder labels.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from ...config import Settings, settings as default_settings
from ...errors import EnrichmentError
from ...logging_config import setup_logging
from ...models import PersonalDataRecord

logger = setup_logging("llm_service")

SYSTEM_PROMPT = (
    "You are a helpful assistant that categorizes contact data. Return only valid JSON."
)

CATEGORIZATION_PROMPT = """Analyze this contact data extracted from a website and categorize it.

DATA:
{payload}

Respond with ONLY valid JSON:
{{
    "industries": ["industry1"],
    "seniority": ["Executive|Senior|Mid-level|Junior"],
    "departments": ["department1"],
    "names": ["cleaned person names, if any"],
    "confidence": 0.0-1.0
}}"""

PLACEHOLDER_LABEL = "Unknown"


@dataclass
class Categorization:
    industries: List[str] = field(default_factory=list)
    seniority: List[str] = field(default_factory=list)
    departments: List[str] = field(default_factory=list)
    names: List[str] = field(default_factory=list)
    confidence: Optional[float] = None


def default_categorization() -> Categorization:
    return Categorization(
        industries=[PLACEHOLDER_LABEL],
        seniority=[PLACEHOLDER_LABEL],
        departments=[PLACEHOLDER_LABEL],
        confidence=0.0,
    )


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return the first well-formed JSON object embedded in ``text``."""
    if not text:
        return None
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def _labels(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        label = str(item).strip() if item is not None else ""
        if label and label not in out:
            out.append(label)
    return out


def parse_categorization(text: str) -> Categorization:
    data = extract_json_object(text)
    if data is None:
        logger.warning("No JSON object in categorization reply, using defaults")
        return default_categorization()

    try:
        confidence = float(data.get("confidence"))
        confidence = min(1.0, max(0.0, confidence))
    except (TypeError, ValueError):
        confidence = 0.0

    return Categorization(
        industries=_labels(data.get("industries")),
        seniority=_labels(data.get("seniority")),
        departments=_labels(data.get("departments")),
        names=_labels(data.get("names")),
        confidence=confidence,
    )


def categorization_payload(record: PersonalDataRecord) -> Dict[str, Any]:
    return {
        "names": record.names,
        "jobTitles": record.job_titles,
        "companies": record.companies,
        "addresses": record.addresses,
        "socialMedia": record.social_media,
        "keywords": record.keywords,
    }


class CategorizationService:
    """Service for interacting with the categorization model."""

    def __init__(self, settings: Settings = None, client: AsyncOpenAI = None):
        self.settings = settings or default_settings
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self.settings.openrouter_api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.openrouter_api_key,
                base_url=self.settings.openrouter_base_url,
                timeout=self.settings.enrichment_timeout_s,
                max_retries=self.settings.enrichment_max_retries,
            )
        return self._client

    async def _complete(self, payload: Dict[str, Any]) -> str:
        response = await self._get_client().chat.completions.create(
            model=self.settings.enrichment_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": CATEGORIZATION_PROMPT.format(payload=json.dumps(payload, indent=2)),
                },
            ],
            response_format={"type": "json_object"},
            max_tokens=self.settings.enrichment_max_tokens,
            temperature=0.1,
        )
        if not response.choices or response.choices[0].message.content is None:
            raise EnrichmentError("Empty categorization response")
        return response.choices[0].message.content

    async def categorize(self, record: PersonalDataRecord) -> Optional[Categorization]:
        """Categorize one accumulated record.

        Returns:
            The categorization, or None when the call failed (record left as is)
        """
        if not self.enabled:
            logger.warning("OPENROUTER_API_KEY not set, skipping categorization")
            return None
        try:
            text = await self._complete(categorization_payload(record))
        except Exception as e:
            logger.error(
                "Categorization failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return None
        return parse_categorization(text)

    async def enrich_records(self, records: Dict[str, PersonalDataRecord]) -> int:
        """Categorize each record once, in place. Returns how many were labelled."""
        enriched = 0
        for record in records.values():
            result = await self.categorize(record)
            if result is None:
                continue
            record.apply_categorization(
                industries=result.industries,
                seniority=result.seniority,
                departments=result.departments,
                confidence=result.confidence,
                names=result.names,
            )
            enriched += 1
        logger.info("Categorization finished", extra={"records": len(records), "enriched": enriched})
        return enriched

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
