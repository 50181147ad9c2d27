"""Extract and validate the structured intent in a model reply.

Extraction strategy: everything before the first ``{`` is narrative noise and
is dropped, as are trailing code-fence markers. What remains is the normalized
text, which must decode to a JSON object with a ``type`` of ``command``,
``question`` or ``answer`` and the matching non-empty field.
"""

import json
import logging

from pydantic import ValidationError

from aia.errors import ParseError, ParseErrorKind
from aia.models import INTENT_ADAPTER, ParsedIntent

log = logging.getLogger(__name__)

CODE_FENCE = "```"


def normalize_reply(raw: str) -> str:
    """Return the candidate JSON payload within a raw reply."""
    start = raw.find("{")
    if start == -1:
        raise ParseError(ParseErrorKind.MISSING_PAYLOAD, raw, "no JSON object in reply")
    text = raw[start:].strip()
    while text.endswith(CODE_FENCE):
        text = text[: -len(CODE_FENCE)].rstrip()
    return text


def parse_reply(raw: str) -> tuple[str, ParsedIntent]:
    """Parse a raw reply into (normalized_text, intent)."""
    normalized = normalize_reply(raw)

    try:
        data = json.loads(normalized)
    except json.JSONDecodeError as e:
        raise ParseError(ParseErrorKind.INVALID_JSON, raw, str(e)) from e
    if not isinstance(data, dict):
        raise ParseError(
            ParseErrorKind.INVALID_SHAPE, raw, f"expected an object, got {type(data).__name__}"
        )

    try:
        intent = INTENT_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise ParseError(
            ParseErrorKind.INVALID_SHAPE, raw, f"{e.error_count()} validation error(s)"
        ) from e

    log.debug("parsed %s intent", intent.type)
    return normalized, intent
