"""
Asynchronous command dispatch.

The dispatcher signs a request, hands it to a worker thread and returns the
command at once. The worker sends the request, streams the response body
through a decoder and settles the command's future. Every path through a
worker settles the command exactly once.
"""

import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Optional, TypeVar

from domain.base.exceptions import DecodingError, InfrastructureError, TransportError
from domain.base.ports.logging_port import LoggingPort, NullLogger
from domain.base.ports.signer_port import RequestSigner
from domain.base.ports.transport_port import HttpTransport
from domain.command.aggregate import Command, ResponseDecoding
from domain.http.error_info import ErrorInfo
from domain.http.request import HttpRequest
from domain.http.response import HttpResponse
from infrastructure.logging.wire import INBOUND, OUTBOUND, WireLogger
from infrastructure.xml.parser import decode

T = TypeVar("T")


class CommandDispatcher:
    """Executes signed commands on a thread pool and settles their futures."""

    def __init__(
        self,
        transport: HttpTransport,
        signer: RequestSigner,
        max_workers: int = 10,
        executor: Optional[Executor] = None,
        logger: Optional[LoggingPort] = None,
        wire: Optional[WireLogger] = None,
    ) -> None:
        self._transport = transport
        self._signer = signer
        self._logger = logger or NullLogger()
        self._wire = wire or WireLogger()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="cloudwire-dispatch"
        )
        self._pending: set[Command] = set()
        self._pending_lock = threading.Lock()

    @property
    def signer(self) -> RequestSigner:
        return self._signer

    def submit(self, request: HttpRequest, decoding: ResponseDecoding[T]) -> Command[T]:
        """Build, sign and dispatch a command; returns before the response arrives."""
        return self.dispatch(Command(request, decoding))

    def dispatch(self, command: Command[T]) -> Command[T]:
        """Sign and dispatch an already built command."""
        if command.done:
            self._logger.debug("%s already settled; not dispatched", command)
            return command

        try:
            command.mark_signed(self._signer.sign(command.request))
        except Exception as e:
            self._logger.error("Signing failed for %s: %s", command, e)
            command.fail(e)
            return command

        command.mark_dispatched()
        self._track(command)
        try:
            self._executor.submit(self._run, command)
        except RuntimeError as e:
            command.fail(InfrastructureError(f"Dispatcher is shut down: {e}"))
        self._logger.debug("Dispatched %s", command)
        return command

    def execute(
        self,
        request: HttpRequest,
        decoding: ResponseDecoding[T],
        timeout: Optional[float] = None,
    ) -> T:
        """Submit and wait for the result, raising the failure if the command failed."""
        return self.submit(request, decoding).result(timeout=timeout)

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting commands; optionally cancel those not yet sent.

        The transport is closed afterwards.
        """
        if cancel_pending:
            with self._pending_lock:
                pending = list(self._pending)
            for command in pending:
                command.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
        self._transport.close()

    def __enter__(self) -> "CommandDispatcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    def _track(self, command: Command) -> None:
        with self._pending_lock:
            self._pending.add(command)
        command.add_done_callback(self._untrack)

    def _untrack(self, command: Command) -> None:
        with self._pending_lock:
            self._pending.discard(command)

    def _run(self, command: Command) -> None:
        if not command.begin():
            self._logger.debug("%s cancelled before it was sent", command)
            return

        request = command.request
        self._wire.headers(OUTBOUND, f"{request.method} {request.uri}", request.headers.items())
        if request.body:
            self._wire.output(request.body)

        try:
            response = self._transport.send(request)
        except Exception as e:
            self._logger.warning("Transport failure for %s: %s", command, e)
            command.fail(e)
            return

        try:
            self._handle_response(command, response)
        except Exception as e:
            self._logger.exception("Unexpected failure handling response for %s", command)
            if not command.done:
                command.fail(e)
        finally:
            response.close()

    def _handle_response(self, command: Command, response: HttpResponse) -> None:
        self._wire.headers(
            INBOUND,
            f"HTTP {response.status_code} {response.reason or ''}",
            response.headers.items(),
        )
        body = response.iter_content()
        if self._wire.enabled:
            body = self._wire.tap(body)

        if response.is_success:
            self._settle_success(command, response, body)
        else:
            self._settle_failure(command, response, body)

    def _settle_success(self, command: Command, response: HttpResponse, body) -> None:
        factory = command.decoding.success
        if factory is None:
            command.succeed(None)
            return
        try:
            result = decode(body, factory())
        except (DecodingError, TransportError) as e:
            self._logger.error(
                "Could not decode %d response for %s: %s",
                response.status_code,
                command,
                e,
                extra={"command_id": command.command_id},
            )
            command.fail(e)
            return
        command.succeed(result)

    def _settle_failure(self, command: Command, response: HttpResponse, body) -> None:
        decoding = command.decoding
        request_id = (
            response.first_header(decoding.request_id_header)
            if decoding.request_id_header
            else None
        )
        request_token = (
            response.first_header(decoding.request_token_header)
            if decoding.request_token_header
            else None
        )

        error_info: Optional[ErrorInfo] = None
        if response.has_body:
            try:
                error_info = decode(body, decoding.error())
            except Exception as e:
                self._logger.warning(
                    "Error parsing XML error response (status %d) for %s: %s",
                    response.status_code,
                    command,
                    e,
                    exc_info=True,
                )

        if error_info is None:
            error_info = ErrorInfo(request_id=request_id, request_token=request_token)
        else:
            updates: dict[str, Any] = {}
            if request_id:
                updates["request_id"] = request_id
            if request_token:
                updates["request_token"] = request_token
            if decoding.is_signature_mismatch(error_info.code):
                updates["string_to_sign"] = self._string_to_sign(command)
            error_info = error_info.model_copy(update=updates)

        command.fail(decoding.error_factory(error_info, response.status_code, command.request))

    def _string_to_sign(self, command: Command) -> Optional[str]:
        try:
            return self._signer.string_to_sign(command.request)
        except Exception as e:
            self._logger.warning("Could not recompute string to sign for %s: %s", command, e)
            return None
