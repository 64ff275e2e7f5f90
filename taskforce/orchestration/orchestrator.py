"""
Task orchestrator.

Owns the state of one run at a time and drives the orchestrator graph:
    idle -> decomposing -> executing(i) -> summarizing -> done
with failed reachable from every non-terminal stage. Observers read the
current snapshot or subscribe to be called on every transition.
"""

import logging
import sys
import uuid
from typing import Any, Callable, Dict, List, Optional

from taskforce.orchestration.graph.build import create_orchestrator_graph
from taskforce.orchestration.graph.config import OrchestratorConfig, DEFAULT_CONFIG
from taskforce.orchestration.nodes.common import agent_message
from taskforce.orchestration.schemas import (
    RunStage,
    SubTask,
    TaskStatus,
    append_messages,
)
from taskforce.shared.contracts.run_snapshot import RunSnapshot
from taskforce.shared.errors import InvalidTransition
from taskforce.shared.llm.client import CompletionClient
from taskforce.shared.logging.config import log_state_transition
from taskforce.shared.logging.debug_logger import get_or_create_logger, remove_logger


logger = logging.getLogger(__name__)

Subscriber = Callable[[RunSnapshot], None]


def _idle_state() -> Dict[str, Any]:
    return {
        "run_id": None,
        "goal": None,
        "stage": RunStage.IDLE.value,
        "cursor": 0,
        "subtasks": [],
        "final_report": None,
        "error": None,
        "messages": [],
    }


class TaskOrchestrator:
    """
    Sequential decompose -> execute -> summarize state machine.

    The orchestrator is the only writer of run state. At most one completion
    call is outstanding and at most one sub-task is in progress at a time.

    Args:
        client: Completion client used by every stage
        config: Optional configuration. Uses DEFAULT_CONFIG if not provided.
    """

    def __init__(
        self,
        client: CompletionClient,
        config: Optional[OrchestratorConfig] = None,
    ):
        self._config = config or DEFAULT_CONFIG
        self._graph = create_orchestrator_graph(client, self._config)
        self._subscribers: List[Subscriber] = []
        self._state: Dict[str, Any] = _idle_state()
        self._pending_state: Optional[Dict[str, Any]] = None
        self._snapshot = RunSnapshot.from_state(self._state)

    @property
    def snapshot(self) -> RunSnapshot:
        """Current read-only view of the run."""
        return self._snapshot

    @property
    def stage(self) -> RunStage:
        return self._snapshot.stage

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback fired with the new snapshot on every transition.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def start(self, goal: str) -> RunSnapshot:
        """
        Run the whole pipeline for a goal.

        Does nothing if a run is in progress or has not been reset yet.

        Args:
            goal: The user's goal (non-empty text)

        Returns:
            The snapshot after the run ends (or the current one if ignored)

        Raises:
            ValueError: If the goal is empty
        """
        if not self.begin(goal):
            return self._snapshot
        return await self.run()

    def begin(self, goal: str) -> bool:
        """
        Move an idle orchestrator to decomposing without calling the service.

        The graph is driven afterwards by run(). Callers that schedule the
        run in the background use this so the returned snapshot already
        shows the new run.

        Returns:
            True if a run was begun, False if the orchestrator was not idle

        Raises:
            ValueError: If the goal is empty
        """
        if goal is None or not goal.strip():
            raise ValueError("goal must be non-empty text")

        if self._snapshot.stage != RunStage.IDLE:
            logger.warning(
                f"[run={self._snapshot.run_id}] [graph=orchestrator] "
                f"Start ignored | stage={self._snapshot.stage.value}"
            )
            return False

        run_id = str(uuid.uuid4())
        initial_state = {
            **_idle_state(),
            "run_id": run_id,
            "goal": goal.strip(),
            "stage": RunStage.DECOMPOSING.value,
            "messages": append_messages(
                [], [agent_message("orchestrator", "Analyzing the request and creating a plan...")]
            ),
        }

        logger.info(f"[run={run_id}] [graph=orchestrator] Run starting | goal_chars={len(initial_state['goal'])}")
        self._apply(initial_state)
        self._pending_state = initial_state
        return True

    async def run(self) -> RunSnapshot:
        """
        Drive a begun run through the graph until it ends.

        Returns:
            The snapshot after the run ends (or the current one if no run
            was begun)
        """
        initial_state, self._pending_state = self._pending_state, None
        if initial_state is None:
            logger.warning(
                f"[run={self._snapshot.run_id}] [graph=orchestrator] "
                f"Run ignored | nothing begun, stage={self._snapshot.stage.value}"
            )
            return self._snapshot

        run_id = initial_state["run_id"]
        _log = f"[run={run_id}] [graph=orchestrator] "
        recursion_limit = self._config.recursion_limit or sys.maxsize

        try:
            async for values in self._graph.astream(
                initial_state,
                config={"recursion_limit": recursion_limit},
                stream_mode="values",
            ):
                self._apply(values)
        except Exception as e:
            logger.exception(f"{_log}Run aborted by unexpected error: {e}")
            self._fail(f"The run stopped unexpectedly: {e}")

        if self._snapshot.is_running:
            # Graph ended without reaching a terminal stage
            self._fail("The run ended before reaching a final stage")

        logger.info(
            f"{_log}Run finished | stage={self._snapshot.stage.value}, "
            f"subtasks={len(self._snapshot.subtasks)}, error={self._snapshot.error}"
        )
        if self._config.trace_dir:
            get_or_create_logger(run_id, self._config.trace_dir).log_run_summary(
                self._snapshot.stage.value, self._snapshot.error
            )
            remove_logger(run_id)

        return self._snapshot

    def reset(self) -> RunSnapshot:
        """
        Discard the finished run and return to idle.

        Raises:
            InvalidTransition: If a run is in progress
        """
        if self._snapshot.is_running:
            raise InvalidTransition(
                f"Cannot reset while the run is {self._snapshot.stage.value}"
            )

        run_id = self._snapshot.run_id
        if run_id is not None:
            logger.info(f"[run={run_id}] [graph=orchestrator] Run reset")
            remove_logger(run_id)

        self._apply(_idle_state())
        return self._snapshot

    def _fail(self, error: str) -> None:
        """Move the run to failed, failing the in-progress sub-task if any."""
        subtasks = []
        for raw in self._state.get("subtasks") or []:
            task = SubTask.model_validate(raw)
            if task.status == TaskStatus.IN_PROGRESS:
                task = task.mark_failed(error)
            subtasks.append(task.model_dump(mode="json"))

        self._apply(
            {
                **self._state,
                "stage": RunStage.FAILED.value,
                "subtasks": subtasks,
                "error": error,
                "messages": append_messages(
                    self._state.get("messages") or [], [agent_message("orchestrator", error)]
                ),
            }
        )

    def _apply(self, state: Dict[str, Any]) -> None:
        """Adopt a new state and notify subscribers if anything observable changed."""
        snapshot = RunSnapshot.from_state(state)
        if snapshot == self._snapshot:
            return

        previous_stage = self._snapshot.stage
        self._state = dict(state)
        self._snapshot = snapshot

        if snapshot.stage != previous_stage:
            log_state_transition(
                "stage_changed",
                self._state,
                extra={"from": previous_stage.value, "to": snapshot.stage.value},
            )

        if self._config.trace_dir and snapshot.run_id:
            get_or_create_logger(snapshot.run_id, self._config.trace_dir).log_transition(
                snapshot.stage.value, snapshot.cursor, len(snapshot.subtasks)
            )

        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception(
                    f"[run={snapshot.run_id}] [graph=orchestrator] Subscriber raised; continuing"
                )
