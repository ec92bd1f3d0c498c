from abc import ABC as AbstractBaseClass, abstractmethod
from typing import Any


class BaseAgent(AbstractBaseClass):
    @abstractmethod
    def _mock(self, prompt: str) -> str:
        """
        Generate a mock response for the given prompt.

        This method should return a mocked result formatted as expected by the agent.
        It is intended for use when API calls should be avoided, such as when
        USE_MOCK_LLM is set to True in the configuration, to prevent unnecessary
        expenditure of API credits.
        """
        pass

    @abstractmethod
    async def run(self, prompt: str) -> Any:
        """
        Sends the prompt to the language model and returns the agent's result.
        Failures are raised as GatewayError subclasses rather than returned.
        """
        pass
