"""
Best-effort readers for free-text model output and loosely shaped tool payloads.
"""
import json
import re
from typing import Any, Optional
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: Optional[str]) -> Optional[dict]:
    """
    Pull the outermost JSON object out of a model response.

    Takes the greedy span between the first '{' and the last '}', so
    prose or Markdown fences around the object are ignored. Returns None
    when there is no span, it does not decode, or it is not an object.
    """
    if not text:
        return None

    match = _JSON_OBJECT.search(_CODE_FENCE.sub("", text))
    if not match:
        logger.warning("No JSON object found in model response")
        return None

    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed JSON in model response: {e}")
        return None

    if not isinstance(value, dict):
        return None
    return value


def tool_output_text(data: Any) -> str:
    """Text of a text-generation tool payload: `text`, then `content`, then the raw payload"""
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        for key in ("text", "content"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return json.dumps(data)


def _lookup(data: Any, path: str) -> Any:
    current = data
    for key in path.split("."):
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, list) and key.isdigit():
            index = int(key)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def first_present(data: Any, *paths: str) -> Any:
    """
    Return the first non-empty value found at any of the dotted key paths.

    Numeric path segments index into lists, e.g.
    "response.generatedSamples.0.video.uri".
    """
    for path in paths:
        value = _lookup(data, path)
        if value:
            return value
    return None
