import json

from langchain_core.prompts import PromptTemplate

from embedgen.config import EMPTY_CIRCUIT, PROJECT_GENERATION_PROMPT, REPROMPT_PROMPT
from embedgen.utils.types import AICallContext, AICallParams, RequestType

PROMPT_TEMPLATES = {
    RequestType.PROJECT_GENERATION: PromptTemplate(
        template=PROJECT_GENERATION_PROMPT, input_variables=["user_prompt"]
    ),
    RequestType.REPROMPT: PromptTemplate(
        template=REPROMPT_PROMPT,
        input_variables=[
            "original_prompt",
            "current_code",
            "circuit_config",
            "metadata",
            "user_prompt",
        ],
    ),
}


def renderPrompt(params: AICallParams) -> str:
    """
    Render the final instruction text for one model call.

    Initial generation only needs the user's request. A reprompt also embeds the
    previous request, code, circuit and metadata so the model can produce an update;
    anything missing from the context is rendered as an empty value.
    """
    template = PROMPT_TEMPLATES[params.type]

    if params.type == RequestType.PROJECT_GENERATION:
        return template.format(user_prompt=params.prompt)

    context = params.context or AICallContext()
    return template.format(
        original_prompt=context.original_prompt or "",
        current_code=context.current_code or "",
        circuit_config=json.dumps(context.current_circuit or EMPTY_CIRCUIT, indent=2),
        metadata=json.dumps(context.metadata or {}, indent=2),
        user_prompt=params.prompt,
    )
