import logging
import re
from typing import Any

from embedgen.config import DEFAULT_MICROCONTROLLER_NAME, DEFAULT_STEPS
from embedgen.utils.types import AIResponse

logger = logging.getLogger(__name__)

_STEP_SEPARATORS = re.compile(r"[\n,]+")


def _asDict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _normalizeSteps(steps: Any) -> list:
    if isinstance(steps, list):
        return list(steps)
    if isinstance(steps, str) and steps:
        split = [step.strip() for step in _STEP_SEPARATORS.split(steps)]
        return [step for step in split if step]
    return list(DEFAULT_STEPS)


def normalizeAIResponse(ai_response: Any) -> AIResponse:
    """
    Coerce whatever JSON the model returned into an AIResponse.

    A reply carrying an "error" field short-circuits to an error result. Otherwise
    code, circuit and metadata are copied when present, with per-field defaults, and
    steps always ends up as a list. Never raises: anything unexpected becomes an error
    result so callers can render it inline.
    """
    try:
        if not isinstance(ai_response, dict):
            raise TypeError(
                f"Expected a JSON object from the model, got {type(ai_response).__name__}"
            )

        if ai_response.get("error"):
            error = ai_response["error"]
            return {"error": error, "steps": [f"Error: {error}"]}

        parsed: AIResponse = {}

        if ai_response.get("code"):
            parsed["code"] = ai_response["code"]

        if ai_response.get("circuit"):
            circuit = _asDict(ai_response["circuit"])
            parsed["circuit"] = {
                "components": circuit.get("components") or [],
                "connections": circuit.get("connections") or [],
            }

        if ai_response.get("metadata"):
            metadata = _asDict(ai_response["metadata"])
            parsed["metadata"] = {
                "functionality": metadata.get("functionality") or "",
                "microcontroller": metadata.get("microcontroller") or DEFAULT_MICROCONTROLLER_NAME,
                "sensors": metadata.get("sensors") or [],
                "actuators": metadata.get("actuators") or [],
            }

        parsed["steps"] = _normalizeSteps(ai_response.get("steps"))
        return parsed
    except Exception as e:
        logger.exception("Error parsing AI response")
        return {"error": str(e), "steps": [f"Error: {e}"]}
