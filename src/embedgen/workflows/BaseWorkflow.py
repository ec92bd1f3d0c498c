from abc import ABC as AbstractBaseClass
from abc import abstractmethod
from typing import Any, Dict, Optional

from embedgen.utils.helpers import utcTimestamp
from embedgen.utils.types import EventCallback, WorkflowState


class BaseWorkflow(AbstractBaseClass):
    @abstractmethod
    async def run(self, state: WorkflowState, updateCallback: EventCallback) -> WorkflowState:
        """
        Runs the end-to-end workflow once while updating the upstream workflow orchestrator.
        Args:
            state: WorkflowState represents the stored memory provided by the orchestrator, your workflow will edit the state and return it
            updateCallback: this is the method that is used to update the orchestrator with what is currently happening (e.g. "I am still running")
        """
        pass

    @staticmethod
    async def emitSubstage(
        updateCallback: EventCallback,
        event_type: str,
        workflow_name: str,
        substage: str,
        step_index: int,
        meta: Optional[Dict[str, Any]] = None,
    ):
        payload = {
            "type": event_type,
            "workflow": workflow_name,
            "substage": substage,
            "step_index": step_index,
            "ts": utcTimestamp(),
        }
        if event_type == "substage_completed":
            payload["meta"] = meta or {}
        await updateCallback(event_type, payload)
