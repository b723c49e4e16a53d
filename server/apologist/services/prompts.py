import json
import logging
from functools import lru_cache

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = """You are a Christian apologetics AI assistant.
Help defend the Christian faith with biblical wisdom, historical evidence, and logical reasoning.
Use the provided context from the apologetics database when it is relevant and cite the
specific verses you reference. Be respectful and loving in your approach, and acknowledge
when a question has no definitive answer."""


@lru_cache(maxsize=8)
def load_system_prompt(profile_path: str) -> str:
    """Load the apologist persona prompt, falling back to the built-in one."""
    try:
        with open(profile_path, "r", encoding="utf-8") as f:
            profile = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load apologist profile %s: %s", profile_path, e)
        return DEFAULT_SYSTEM_PROMPT

    prompt = profile.get("system_prompt") if isinstance(profile, dict) else None
    if not isinstance(prompt, str) or not prompt.strip():
        logger.warning("Apologist profile %s has no system_prompt", profile_path)
        return DEFAULT_SYSTEM_PROMPT
    return prompt
