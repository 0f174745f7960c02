"""
Response Coordinator

Drives one inbound request through the interaction state machine:

    RECEIVED -> AUTHENTICATED -> HANDSHAKE                          (PONG)
                              -> COMMAND -> DISPATCHING -> REPLIED  (immediate)
                              -> COMMAND -> ACKNOWLEDGED
                                   -> BACKGROUND_DISPATCHING
                                   -> FOLLOWUP_SENT | FOLLOWUP_FAILED (deferred)
    RECEIVED | AUTHENTICATED -> REJECTED

Policy:
- Authentication and body errors are the only rejections.
- Everything after authentication becomes "200 + content"; dispatch and handler
  failures are logged and replaced with the configured apology text.
- Deferred work runs as a detached asyncio task per request. Tasks are never
  cancelled. Concurrency is unbounded unless `max_background_tasks` is set.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from .classifier import InteractionKind, classify
from .dispatcher import DispatchError, HandlerError, InteractionDispatcher
from .schemas import Interaction, deferred_response, message_response, pong_response
from .security import authenticate
from .sender import FollowupDeliveryError, FollowupSender

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong :frowning2: Please try again later"


class DeserializationError(Exception):
    """Request body is not a valid interaction."""
    pass


class ResponseMode(str, Enum):
    IMMEDIATE = "immediate"
    DEFERRED = "deferred"


class RejectionReason(str, Enum):
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"


class CoordinatorState(str, Enum):
    RECEIVED = "received"
    AUTHENTICATED = "authenticated"
    HANDSHAKE = "handshake"
    COMMAND = "command"
    DISPATCHING = "dispatching"
    REPLIED = "replied"
    ACKNOWLEDGED = "acknowledged"
    BACKGROUND_DISPATCHING = "background_dispatching"
    FOLLOWUP_SENT = "followup_sent"
    FOLLOWUP_FAILED = "followup_failed"
    REJECTED = "rejected"


_TRANSITIONS: dict[CoordinatorState, frozenset] = {
    CoordinatorState.RECEIVED: frozenset({CoordinatorState.AUTHENTICATED, CoordinatorState.REJECTED}),
    CoordinatorState.AUTHENTICATED: frozenset(
        {CoordinatorState.HANDSHAKE, CoordinatorState.COMMAND, CoordinatorState.REJECTED}
    ),
    CoordinatorState.COMMAND: frozenset({CoordinatorState.DISPATCHING, CoordinatorState.ACKNOWLEDGED}),
    CoordinatorState.DISPATCHING: frozenset({CoordinatorState.REPLIED}),
    CoordinatorState.ACKNOWLEDGED: frozenset({CoordinatorState.BACKGROUND_DISPATCHING}),
    CoordinatorState.BACKGROUND_DISPATCHING: frozenset(
        {CoordinatorState.FOLLOWUP_SENT, CoordinatorState.FOLLOWUP_FAILED}
    ),
}


class StateTrace:
    """One-directional walk through CoordinatorState for a single request."""

    def __init__(self) -> None:
        self.states: list[CoordinatorState] = [CoordinatorState.RECEIVED]
        self.interaction_id: Optional[str] = None

    @property
    def current(self) -> CoordinatorState:
        return self.states[-1]

    def advance(self, state: CoordinatorState) -> None:
        if state not in _TRANSITIONS.get(self.current, frozenset()):
            raise RuntimeError(f"Illegal transition {self.current.value} -> {state.value}")
        self.states.append(state)
        logger.debug(
            f"Interaction state -> {state.value}",
            extra={"interaction_id": self.interaction_id, "state": state.value},
        )


@dataclass(frozen=True)
class RawRequest:
    """Headers plus untouched body bytes, as handed over by the transport."""
    headers: Mapping[str, Any]
    body: bytes


@dataclass(frozen=True)
class Reply:
    """
    Tagged outcome of `handle`.

    Either `body` (HTTP 200 JSON) or `rejection` (mapped to 401/400 by the transport).
    """

    body: Optional[dict[str, Any]] = None
    rejection: Optional[RejectionReason] = None
    detail: str = ""
    trace: tuple = field(default_factory=tuple)

    @property
    def is_ok(self) -> bool:
        return self.rejection is None

    @classmethod
    def success(cls, body: dict[str, Any], trace: StateTrace) -> "Reply":
        return cls(body=body, trace=tuple(trace.states))

    @classmethod
    def reject(cls, reason: RejectionReason, detail: str, trace: StateTrace) -> "Reply":
        return cls(rejection=reason, detail=detail, trace=tuple(trace.states))


def parse_interaction(body: Union[bytes, str]) -> Interaction:
    """
    Deserialize the request body.

    Raises:
        DeserializationError: Not JSON, or not an interaction
    """
    try:
        return Interaction.model_validate(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError, TypeError) as e:
        raise DeserializationError(str(e)) from e


class ResponseCoordinator:
    """
    Answers interactions under the immediate or deferred protocol.

    One instance per process. Holds no per-request state besides the set of
    outstanding background tasks.
    """

    def __init__(
        self,
        public_key: bytes,
        dispatcher: InteractionDispatcher,
        followup_sender: FollowupSender,
        error_message: str = DEFAULT_ERROR_MESSAGE,
        max_background_tasks: int = 0,
    ):
        self.public_key = public_key
        self.dispatcher = dispatcher
        self.followup_sender = followup_sender
        self.error_message = error_message
        self.max_background_tasks = max_background_tasks

        self._background_tasks: set[asyncio.Task] = set()
        self._slots: Optional[asyncio.Semaphore] = None

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle(self, request: RawRequest, mode: ResponseMode = ResponseMode.IMMEDIATE) -> Reply:
        if ResponseMode(mode) is ResponseMode.DEFERRED:
            return await self.handle_deferred(request)
        return await self.handle_immediate(request)

    async def handle_immediate(self, request: RawRequest) -> Reply:
        """Run the handler inline and reply with its content."""
        trace = StateTrace()
        interaction, early_reply = self._admit(request, trace)
        if early_reply is not None:
            return early_reply

        trace.advance(CoordinatorState.DISPATCHING)
        content = await self._dispatch_or_apologize(interaction)
        trace.advance(CoordinatorState.REPLIED)

        return Reply.success(message_response(content).to_body(), trace)

    async def handle_deferred(self, request: RawRequest) -> Reply:
        """
        Acknowledge now, run the handler in the background, then send a follow-up.

        The acknowledgment is returned before the handler starts executing.
        """
        trace = StateTrace()
        interaction, early_reply = self._admit(request, trace)
        if early_reply is not None:
            return early_reply

        trace.advance(CoordinatorState.ACKNOWLEDGED)
        reply = Reply.success(deferred_response().to_body(), trace)

        self._spawn(self._run_background(interaction, trace))
        return reply

    # ------------------------------------------------------------------
    # Background work
    # ------------------------------------------------------------------

    @property
    def pending_background_tasks(self) -> int:
        return len(self._background_tasks)

    async def drain(self) -> None:
        """Wait for every outstanding background task. Does not cancel anything."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        # Strong reference until done; the loop only keeps weak ones
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    def _background_slots(self) -> Optional[asyncio.Semaphore]:
        if self.max_background_tasks <= 0:
            return None
        # Created lazily so it binds to the running loop
        if self._slots is None:
            self._slots = asyncio.Semaphore(self.max_background_tasks)
        return self._slots

    async def _run_background(self, interaction: Interaction, trace: StateTrace) -> None:
        slots = self._background_slots()
        if slots is None:
            await self._dispatch_and_follow_up(interaction, trace)
            return
        async with slots:
            await self._dispatch_and_follow_up(interaction, trace)

    async def _dispatch_and_follow_up(self, interaction: Interaction, trace: StateTrace) -> None:
        trace.advance(CoordinatorState.BACKGROUND_DISPATCHING)
        content = await self._dispatch_or_apologize(interaction)

        try:
            await self.followup_sender.send(interaction.token, content)
        except FollowupDeliveryError as e:
            trace.advance(CoordinatorState.FOLLOWUP_FAILED)
            logger.error(
                f"Failed to make follow-up response: {e}",
                exc_info=True,
                extra={"interaction_id": interaction.id, "command_name": interaction.command_name},
            )
            return
        except Exception as e:
            trace.advance(CoordinatorState.FOLLOWUP_FAILED)
            logger.error(
                f"Unexpected error sending follow-up: {e}",
                exc_info=True,
                extra={"interaction_id": interaction.id, "command_name": interaction.command_name},
            )
            return

        trace.advance(CoordinatorState.FOLLOWUP_SENT)

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------

    def _admit(self, request: RawRequest, trace: StateTrace) -> tuple[Optional[Interaction], Optional[Reply]]:
        """
        Authenticate, deserialize and classify.

        Returns (interaction, None) for a command, or (None, reply) when the
        request ends here (rejection or handshake).
        """
        verdict = authenticate(request.headers, request.body, self.public_key)
        if not verdict.authenticated:
            trace.advance(CoordinatorState.REJECTED)
            logger.warning(
                f"Invalid interaction request: {verdict.detail}",
                extra={"auth_failure": verdict.failure.value},
            )
            return None, Reply.reject(RejectionReason.UNAUTHORIZED, verdict.detail, trace)
        trace.advance(CoordinatorState.AUTHENTICATED)

        try:
            interaction = parse_interaction(request.body)
        except DeserializationError as e:
            trace.advance(CoordinatorState.REJECTED)
            logger.error(
                f"Deserialization failure: {e}",
                extra={"request_body": request.body[:1024]},
            )
            return None, Reply.reject(RejectionReason.BAD_REQUEST, "Invalid interaction payload", trace)
        trace.interaction_id = interaction.id

        if classify(interaction) is InteractionKind.HANDSHAKE:
            trace.advance(CoordinatorState.HANDSHAKE)
            return None, Reply.success(pong_response().to_body(), trace)

        trace.advance(CoordinatorState.COMMAND)
        return interaction, None

    async def _dispatch_or_apologize(self, interaction: Interaction) -> str:
        """Dispatch; any failure is logged with the interaction and becomes the apology text."""
        try:
            content = await self.dispatcher.dispatch(interaction)
            logger.info(
                "Interaction handled",
                extra={
                    "interaction_id": interaction.id,
                    "command_name": interaction.command_name,
                    "output_length": len(content),
                },
            )
        except DispatchError as e:
            logger.error(
                f"Failed to handle interaction: {e}. Request:\n{interaction!r}",
                exc_info=True,
                extra={
                    "interaction_id": interaction.id,
                    "command_name": interaction.command_name,
                    "error_kind": e.kind.value,
                },
            )
            return self.error_message
        except HandlerError as e:
            logger.error(
                f"Failed to handle interaction: {e}. Request:\n{interaction!r}",
                exc_info=True,
                extra={
                    "interaction_id": interaction.id,
                    "command_name": interaction.command_name,
                    "error_kind": "handler_error",
                },
            )
            return self.error_message
        except Exception as e:
            logger.error(
                f"Unexpected error handling interaction: {e}. Request:\n{interaction!r}",
                exc_info=True,
                extra={"interaction_id": interaction.id, "command_name": interaction.command_name},
            )
            return self.error_message

        return content
