"""
LLM helpers shared by the analyzers.

Builds PhiData agents over OpenAI chat models and recovers JSON from their
replies.
"""

import json
import re
import logging
from typing import Any, Dict, List, Optional

from phi.agent import Agent
from phi.model.openai import OpenAIChat

from .config import LLM_CONFIG

logger = logging.getLogger(__name__)

# Reasoning models reject a custom temperature
FIXED_TEMPERATURE_MODELS = ("o1", "gpt-5")

FENCED_JSON_PATTERN = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def get_model_config(model_name: str, temperature: float = 0) -> Dict[str, Any]:
    """OpenAIChat keyword arguments for a model name."""
    name = model_name.lower()
    config: Dict[str, Any] = {"id": model_name}
    if not any(prefix in name for prefix in FIXED_TEMPERATURE_MODELS):
        config["temperature"] = temperature
    if "gpt-4" in name:
        config["response_format"] = {"type": "json_object"}
    return config


def build_agent(
    name: str,
    role: str,
    instructions: List[str],
    model_name: Optional[str] = None,
    api_key: Optional[str] = None
) -> Agent:
    """Build a PhiData agent that answers with bare JSON."""
    model_name = model_name or LLM_CONFIG["model"]
    model_config = get_model_config(model_name, temperature=LLM_CONFIG["temperature"])
    if api_key:
        model_config["api_key"] = api_key

    return Agent(
        name=name,
        role=role,
        model=OpenAIChat(**model_config),
        instructions=instructions,
        show_tool_calls=False,
        markdown=False,
    )


def response_text(response: Any) -> str:
    """Pull the text content out of an agent run response."""
    if hasattr(response, "content") and response.content is not None:
        return str(response.content)
    if hasattr(response, "messages") and response.messages:
        last_msg = response.messages[-1]
        return str(last_msg.content if hasattr(last_msg, "content") else last_msg)
    return str(response)


def _load_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_json_from_response(text: str) -> Optional[Dict[str, Any]]:
    """
    Recover a JSON object from a model reply.

    Tries the reply (or its fenced code block) as-is, then the span between
    the first '{' and the last '}'.
    """
    if not text:
        return None

    fenced = FENCED_JSON_PATTERN.search(text)
    if fenced:
        text = fenced.group(1).strip()

    data = _load_object(text)
    if data is None:
        start, end = text.find("{"), text.rfind("}")
        if start != -1 and end > start:
            data = _load_object(text[start:end + 1])
    return data


def run_json_agent(agent: Agent, prompt: str, max_retries: Optional[int] = None) -> Dict[str, Any]:
    """
    Run an agent until it returns a JSON object.

    Raises:
        ValueError: If no attempt produced valid JSON
    """
    max_retries = max_retries or LLM_CONFIG["max_retries"]
    last_error: Optional[Exception] = None

    for attempt in range(max_retries):
        try:
            logger.info(f"LLM attempt {attempt + 1}/{max_retries}")
            text = response_text(agent.run(prompt))
            logger.debug(f"Raw LLM response: {text[:500]}...")

            data = extract_json_from_response(text)
            if data is None:
                raise ValueError("Could not extract valid JSON from LLM response")
            return data

        except Exception as e:
            last_error = e
            logger.warning(f"LLM attempt {attempt + 1} failed: {e}")

    raise ValueError(f"LLM call failed after {max_retries} attempts: {last_error}")
