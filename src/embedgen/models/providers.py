from typing import Dict, Type

from embedgen.models.BaseModel import BaseModel
from embedgen.models.GeminiModel import GeminiModel
from embedgen.models.OpenAIModel import OpenAIModel

MODEL_PROVIDERS: Dict[str, Type[BaseModel]] = {
    "gemini": GeminiModel,
    "openai": OpenAIModel,
}


def buildModel(provider: str) -> BaseModel:
    try:
        model_class = MODEL_PROVIDERS[provider]
    except KeyError:
        raise ValueError(f"unsupported provider: {provider}") from None
    return model_class()
