import os
from abc import ABC as AbstractBaseClass
from abc import abstractmethod

from embedgen.utils.errors import MissingCredentialError


class BaseModel(AbstractBaseClass):
    """
    Abstract base class for LLM providers.
    Subclasses name the environment variable holding their credential in api_key_env;
    construction fails immediately when it is not set.
    """

    api_key_env: str = ""

    def __init__(self, model_name, temperature):
        self.model_name = model_name
        self.temperature = temperature
        self.api_key = self._readApiKey()

    def _readApiKey(self) -> str:
        api_key = os.getenv(self.api_key_env)
        if not api_key:
            raise MissingCredentialError(f"{self.api_key_env} is not configured")
        return api_key

    @abstractmethod
    def getModel(self):
        """
        Should return a BaseChatModel that you can call like so:

        ```python
        model = DerivedModel(model_name, temperature)
        llm = model.getModel()
        llm.invoke()
        ```
        """
        pass
