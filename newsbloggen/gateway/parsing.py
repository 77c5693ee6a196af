from __future__ import annotations

import json
import re
from typing import List

from ..errors import SchemaError
from ..markup import extract_media_refs, strip_code_fences, unwrap_document
from ..models import Article, Source
from ..utils.logging import get_logger

logger = get_logger("nbg.gateway.parsing")

EXPECTED_TAGS = 5
EXPECTED_MEDIA = (2, 3)
EXPECTED_SOURCES = (4, 5)


def _parse_sources(raw_sources) -> List[Source]:
    if raw_sources is None:
        return []
    if not isinstance(raw_sources, list):
        raise SchemaError("'sources' must be a list")
    sources: List[Source] = []
    for item in raw_sources:
        if not isinstance(item, dict):
            raise SchemaError(f"Each source must be an object, got: {type(item).__name__}")
        label = str(item.get("title") or "").strip()
        if not label:
            logger.debug("Dropping source without a title: %s", item)
            continue
        sources.append(Source(label=label, locator=str(item.get("url") or "").strip()))
    return sources


def parse_draft_response(raw: str) -> Article:
    """Parse and validate the draft JSON reply.

    Expected object with keys:
      - title: non-empty string
      - content: non-empty HTML string
      - tags: non-empty list of strings
      - sources: list of {title, url}
    """
    if not raw or not raw.strip():
        raise SchemaError("Empty AI response")

    match = re.search(r"\{[\s\S]*\}", raw)
    if not match:
        raise SchemaError("No JSON object found in AI response")

    try:
        obj = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Malformed JSON in AI response: {exc}") from exc
    if not isinstance(obj, dict):
        raise SchemaError("AI response is not a JSON object")

    title = obj.get("title")
    if not isinstance(title, str) or not title.strip():
        raise SchemaError("Missing 'title'")

    content = obj.get("content")
    if not isinstance(content, str) or not content.strip():
        raise SchemaError("Missing 'content'")
    body = unwrap_document(strip_code_fences(content))

    tags_val = obj.get("tags")
    if not isinstance(tags_val, list) or not tags_val:
        raise SchemaError("'tags' must be a non-empty list")
    if not all(isinstance(t, str) for t in tags_val):
        raise SchemaError("'tags' must contain only strings")
    tags = [t.strip() for t in tags_val if t.strip()]
    if not tags:
        raise SchemaError("'tags' must be a non-empty list")

    sources = _parse_sources(obj.get("sources"))

    # Soft expectations from the prompt; the model is not bound by them
    if len(tags) != EXPECTED_TAGS:
        logger.warning("Draft returned %d tags (expected %d)", len(tags), EXPECTED_TAGS)
    media = extract_media_refs(body)
    if not EXPECTED_MEDIA[0] <= len(media) <= EXPECTED_MEDIA[1]:
        logger.warning("Draft embeds %d images (expected %d-%d)", len(media), *EXPECTED_MEDIA)
    if not EXPECTED_SOURCES[0] <= len(sources) <= EXPECTED_SOURCES[1]:
        logger.warning("Draft cites %d sources (expected %d-%d)", len(sources), *EXPECTED_SOURCES)

    return Article(title=title.strip(), body=body, tags=tuple(tags), sources=tuple(sources))


def parse_markup_response(raw: str) -> str:
    """Validate a refine/translate reply and return the replacement body."""
    if not raw or not raw.strip():
        raise SchemaError("Empty AI response")
    body = unwrap_document(strip_code_fences(raw))
    if not body.strip():
        raise SchemaError("AI response contains no content")
    return body
