import copy

from embedgen.utils.types import AIResponse, ProjectState


def mergeAIResponse(state: ProjectState, response: AIResponse) -> ProjectState:
    """
    Fold one normalized response into the project and return the new project.
    The input state is left untouched.

    - code: replaced when present
    - circuit: replaced wholesale when present, components are not reconciled by id
    - metadata: shallow-merged field by field
    - steps: the model's steps are appended, skipping entries already in the log
    """
    merged = ProjectState(
        code=state.code,
        circuit=copy.deepcopy(state.circuit),
        metadata=copy.deepcopy(state.metadata),
        steps=list(state.steps),
    )

    if response.get("code"):
        merged.code = response["code"]

    # the reprompt template asks for "only new or modified" components, but each
    # response is still authoritative for the whole circuit
    if response.get("circuit"):
        merged.circuit = copy.deepcopy(response["circuit"])

    if response.get("metadata"):
        merged.metadata = {**merged.metadata, **copy.deepcopy(response["metadata"])}

    for step in response.get("steps") or []:
        if step not in merged.steps:
            merged.steps.append(step)

    return merged


def appendStep(state: ProjectState, step: str) -> ProjectState:
    # workflow progress markers repeat across turns, so they are never de-duplicated
    return ProjectState(
        code=state.code,
        circuit=copy.deepcopy(state.circuit),
        metadata=copy.deepcopy(state.metadata),
        steps=[*state.steps, step],
    )
