import asyncio
import json
import logging
from typing import Any, Optional

from google.api_core.exceptions import GoogleAPIError
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai.chat_models import ChatGoogleGenerativeAIError
from openai import OpenAIError, RateLimitError

from embedgen.agents.BaseAgent import BaseAgent
from embedgen.config import LLM_PROVIDER, MOCK_PROJECT_RESPONSE, USE_MOCK_LLM
from embedgen.models.BaseModel import BaseModel
from embedgen.models.providers import buildModel
from embedgen.utils.errors import EmptyResponseError, MalformedResponseError, TransportError
from embedgen.utils.helpers import stripCodeFences

logger = logging.getLogger(__name__)


class ProjectAgent(BaseAgent):
    """
    Sends a rendered project prompt to the LLM exactly once and returns the reply
    parsed as JSON. The result is not checked against any schema here, see
    utils/normalizer.py for that.

    There are no retries: a missing credential, a provider failure, an empty reply
    or unparseable JSON each raise their own GatewayError subclass.
    """

    def __init__(self, model: Optional[BaseModel] = None, provider: Optional[str] = None):
        self.model = model
        self.provider = provider or LLM_PROVIDER

    def _mock(self, prompt: str) -> str:
        return MOCK_PROJECT_RESPONSE

    async def run(self, prompt: str) -> Any:
        if USE_MOCK_LLM:
            text = self._mock(prompt)
        else:
            text = await self._complete(prompt)
        return self.parseResponseText(text)

    async def _complete(self, prompt: str) -> str:
        # building the model checks the credential, so this fails before any request
        model = self.model or buildModel(self.provider)
        chain = model.getModel() | StrOutputParser()

        try:
            return await asyncio.to_thread(chain.invoke, prompt)
        except RateLimitError as e:
            logger.error("RateLimitError: %s", e)
            raise TransportError(f"OpenAI quota exceeded with message: {e}") from e
        except OpenAIError as e:
            logger.error("OpenAI API Error: %s", e)
            raise TransportError(f"Encountered OpenAI error with message {e}") from e
        except (ChatGoogleGenerativeAIError, GoogleAPIError) as e:
            logger.error("Gemini API Error: %s", e)
            raise TransportError(f"Encountered Gemini error with message {e}") from e
        # errors that are not provider failures propagate as-is to the caller

    @staticmethod
    def parseResponseText(text: Optional[str]) -> Any:
        if not text or not text.strip():
            raise EmptyResponseError("No text response from the model.")

        cleaned = stripCodeFences(text)
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse JSON response: %s", e)
            raise MalformedResponseError("Failed to parse AI response as JSON.") from e
