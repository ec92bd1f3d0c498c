from langchain_openai import ChatOpenAI

from embedgen.config import (
    LLM_MAX_RETRIES,
    MAX_OUTPUT_TOKENS,
    OPENAI_API_KEY_ENV,
    OPENAI_MODEL,
    TEMPERATURE,
    TOP_P,
)
from embedgen.models.BaseModel import BaseModel


class OpenAIModel(BaseModel):
    """
    Implementation of BaseModel for OpenAI LLMs using langchain_openai.ChatOpenAI.
    OpenAI has no top-k sampling, so only temperature, top-p and the token cap apply.
    """

    api_key_env = OPENAI_API_KEY_ENV

    def __init__(self, model_name=OPENAI_MODEL, temperature=TEMPERATURE):
        super().__init__(model_name, temperature)
        self.llm = ChatOpenAI(
            model=self.model_name,
            temperature=self.temperature,
            top_p=TOP_P,
            max_tokens=MAX_OUTPUT_TOKENS,
            max_retries=LLM_MAX_RETRIES,
            api_key=self.api_key,
        )

    def getModel(self):
        return self.llm
