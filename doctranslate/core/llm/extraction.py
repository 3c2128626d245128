"""
Structured output extraction from LLM responses.

Models asked for JSON still sometimes wrap it in reasoning blocks or
markdown code fences; this module strips those before parsing.
"""

import json
import re
from typing import Any, Dict, Optional

from ..exceptions import LLMResponseError

_THINK_BLOCK = re.compile(r'<think>.*?</think>', re.DOTALL | re.IGNORECASE)
_ORPHAN_THINK_CLOSE = re.compile(r'^.*?</think>\s*', re.DOTALL | re.IGNORECASE)
_CODE_FENCE = re.compile(r'^```[a-zA-Z]*\s*(.*?)\s*```$', re.DOTALL)


def remove_think_blocks(response: str) -> str:
    """
    Remove all <think>...</think> blocks from response.

    Also handles an orphan closing tag (when the server truncates the
    opening tag) by dropping everything up to and including it.
    """
    response = _THINK_BLOCK.sub('', response)
    response = _ORPHAN_THINK_CLOSE.sub('', response)
    return response.strip()


def strip_code_fence(response: str) -> str:
    match = _CODE_FENCE.match(response.strip())
    if match:
        return match.group(1)
    return response


def extract_json_object(response: Optional[str], service: Optional[str] = None) -> Dict[str, Any]:
    """
    Parse the JSON object contained in an LLM response.

    Args:
        response: Raw text response from the LLM
        service: Provider name used in error context

    Returns:
        Parsed JSON object

    Raises:
        LLMResponseError: If no JSON object can be parsed
    """
    if not response or not response.strip():
        raise LLMResponseError("Model returned an empty response", service=service)

    cleaned = strip_code_fence(remove_think_blocks(response.strip()))

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        # Fall back to the outermost {...} span
        start = cleaned.find('{')
        end = cleaned.rfind('}')
        if start == -1 or end <= start:
            raise LLMResponseError(
                "Model response does not contain a JSON object",
                service=service,
                context={'preview': cleaned[:200]}
            )
        try:
            parsed = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as e:
            raise LLMResponseError(
                f"Model response is not valid JSON: {e.msg}",
                service=service,
                context={'preview': cleaned[:200]}
            ) from e

    if not isinstance(parsed, dict):
        raise LLMResponseError(
            f"Expected a JSON object, got {type(parsed).__name__}",
            service=service
        )
    return parsed


def require_field(payload: Dict[str, Any], field: str, expected_type, service: Optional[str] = None):
    """Fetch a typed field from a parsed model payload"""
    if field not in payload:
        raise LLMResponseError(f"Model response is missing '{field}'", service=service,
                               context={'fields': sorted(payload)})
    value = payload[field]
    if expected_type is float and isinstance(value, int) and not isinstance(value, bool):
        value = float(value)
    if not isinstance(value, expected_type):
        raise LLMResponseError(
            f"Field '{field}' has type {type(value).__name__}, expected {expected_type.__name__}",
            service=service
        )
    return value
