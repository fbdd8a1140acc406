from nextgen.ai.config import load_ai_config
from nextgen.ai.types import AIClient, AIConfigurationError

from nextgen.ai.providers.gemini_provider import GeminiProvider
from nextgen.ai.providers.openai_provider import OpenAIProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "gemini":
        return GeminiProvider(model=cfg.primary_model)

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.primary_model)

    raise AIConfigurationError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
