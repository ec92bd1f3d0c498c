from langchain_google_genai import ChatGoogleGenerativeAI

from embedgen.config import (
    GEMINI_API_KEY_ENV,
    GEMINI_MODEL,
    LLM_MAX_RETRIES,
    MAX_OUTPUT_TOKENS,
    TEMPERATURE,
    TOP_K,
    TOP_P,
)
from embedgen.models.BaseModel import BaseModel


class GeminiModel(BaseModel):
    """
    Implementation of BaseModel for Google Gemini using langchain_google_genai.
    """

    api_key_env = GEMINI_API_KEY_ENV

    def __init__(self, model_name=GEMINI_MODEL, temperature=TEMPERATURE):
        super().__init__(model_name, temperature)
        self.llm = ChatGoogleGenerativeAI(
            model=self.model_name,
            google_api_key=self.api_key,
            temperature=self.temperature,
            top_p=TOP_P,
            top_k=TOP_K,
            max_output_tokens=MAX_OUTPUT_TOKENS,
            max_retries=LLM_MAX_RETRIES,
        )

    def getModel(self):
        return self.llm
