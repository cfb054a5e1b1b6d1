"""Command aggregate: one request/response exchange with asynchronous settlement."""

import threading
import uuid
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

from domain.base.exceptions import (
    CommandCancelledError,
    CommandStateError,
    HttpResponseError,
)
from domain.http.request import HttpRequest

if TYPE_CHECKING:
    from domain.http.error_info import ErrorInfo
    from infrastructure.xml.decoder import XmlDecoder

T = TypeVar("T")

DEFAULT_SIGNATURE_MISMATCH_CODES = frozenset({"SignatureDoesNotMatch"})


class CommandState(str, Enum):
    """Lifecycle of a command."""

    BUILT = "built"
    SIGNED = "signed"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (CommandState.SUCCEEDED, CommandState.FAILED, CommandState.CANCELLED)


@dataclass(frozen=True)
class ResponseDecoding(Generic[T]):
    """How a command turns a response into a result or an ``ErrorInfo``.

    Decoders are given as factories so every command owns fresh instances.
    A ``success`` of ``None`` means the operation has no response body and
    settles with ``None``. ``error_factory`` builds the exception a failed
    command settles with, letting providers map error codes to subclasses.
    """

    error: Callable[[], "XmlDecoder[ErrorInfo]"]
    success: Optional[Callable[[], "XmlDecoder[T]"]] = None
    request_id_header: Optional[str] = None
    request_token_header: Optional[str] = None
    signature_mismatch_codes: frozenset[str] = field(
        default=DEFAULT_SIGNATURE_MISMATCH_CODES
    )
    error_factory: Callable[
        ["ErrorInfo", int, Optional[HttpRequest]], HttpResponseError
    ] = HttpResponseError

    def is_signature_mismatch(self, code: Optional[str]) -> bool:
        return code is not None and code in self.signature_mismatch_codes


class Command(Generic[T]):
    """Pairs a request with its future and decoding strategy.

    Transitions: built -> signed -> dispatched -> succeeded | failed, with
    cancelled reachable before the worker picks the command up. A command
    settles exactly once; settling it again raises ``CommandStateError``.
    """

    def __init__(
        self,
        request: HttpRequest,
        decoding: ResponseDecoding[T],
        command_id: Optional[str] = None,
    ) -> None:
        self.command_id = command_id or uuid.uuid4().hex
        self.decoding = decoding
        self.future: Future = Future()
        self._request = request
        self._state = CommandState.BUILT
        self._cancel_requested = False
        self._lock = threading.RLock()

    @property
    def request(self) -> HttpRequest:
        return self._request

    @property
    def state(self) -> CommandState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state.is_terminal

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested

    def mark_signed(self, signed_request: HttpRequest) -> None:
        """Record the signed copy of the request."""
        with self._lock:
            self._transition(CommandState.BUILT, CommandState.SIGNED)
            self._request = signed_request

    def mark_dispatched(self) -> None:
        with self._lock:
            self._transition(CommandState.SIGNED, CommandState.DISPATCHED)

    def begin(self) -> bool:
        """Called by the worker before sending; False if cancelled meanwhile."""
        with self._lock:
            if self.future.set_running_or_notify_cancel():
                return True
            self._state = CommandState.CANCELLED
            return False

    def succeed(self, value: T) -> None:
        with self._lock:
            self._ensure_open()
            if self._cancel_requested:
                self._settle_cancelled()
                return
            self._state = CommandState.SUCCEEDED
            self.future.set_result(value)

    def fail(self, error: BaseException) -> None:
        with self._lock:
            self._ensure_open()
            if self._cancel_requested:
                self._settle_cancelled()
                return
            self._state = CommandState.FAILED
            self.future.set_exception(error)

    def cancel(self) -> bool:
        """Cancel the command.

        Before the worker starts, the request is never sent. Afterwards the
        transport call may still complete but its outcome is discarded.
        Returns False when the command had already settled.
        """
        with self._lock:
            if self._state.is_terminal:
                return False
            if self.future.cancel():
                self._state = CommandState.CANCELLED
                return True
            self._cancel_requested = True
            return True

    def result(self, timeout: Optional[float] = None) -> T:
        """Block until settled; raise the failure if there was one."""
        return self.future.result(timeout=timeout)

    def exception(self, timeout: Optional[float] = None) -> Optional[BaseException]:
        return self.future.exception(timeout=timeout)

    def add_done_callback(self, fn: Callable[["Command[T]"], Any]) -> None:
        """Register ``fn(command)`` to run once the command settles."""
        self.future.add_done_callback(lambda _future: fn(self))

    def _transition(self, expected: CommandState, target: CommandState) -> None:
        if self._state is not expected:
            raise CommandStateError(
                f"Cannot move command from {self._state.value} to {target.value}",
                details={"command_id": self.command_id, "state": self._state.value},
            )
        self._state = target

    def _ensure_open(self) -> None:
        if self._state.is_terminal:
            raise CommandStateError(
                f"Command already settled as {self._state.value}",
                details={"command_id": self.command_id},
            )

    def _settle_cancelled(self) -> None:
        self._state = CommandState.CANCELLED
        self.future.set_exception(
            CommandCancelledError(
                "Command cancelled after dispatch; outcome discarded",
                details={"command_id": self.command_id},
            )
        )

    def __repr__(self) -> str:
        return f"Command({self._request.method} {self._request.uri}, state={self._state.value})"
