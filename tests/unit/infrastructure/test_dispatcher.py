"""Tests for the command dispatcher."""

import io
from unittest.mock import Mock

import pytest

from domain.base.exceptions import (
    CommandCancelledError,
    CommandStateError,
    DecodingError,
    HttpResponseError,
    InfrastructureError,
    TransportError,
)
from domain.command.aggregate import Command, CommandState, ResponseDecoding
from domain.http.request import HttpRequest
from domain.http.response import HttpResponse
from infrastructure.http.dispatcher import CommandDispatcher
from infrastructure.logging.wire import WireLogger
from providers.aws.s3.decoders import ErrorDecoder, ListBucketDecoder
from tests.fixtures.http_fakes import FakeTransport, StaticSigner, xml_response

LISTING = (
    b"<ListBucketResult><Name>b</Name><IsTruncated>false</IsTruncated>"
    b"<Contents><Key>3366</Key><Size>136</Size></Contents></ListBucketResult>"
)

SIGNATURE_MISMATCH = (
    b"<Error><Code>SignatureDoesNotMatch</Code><Message>mismatch</Message>"
    b"<RequestId>BODYID</RequestId></Error>"
)

DECODING = ResponseDecoding(
    error=ErrorDecoder,
    success=ListBucketDecoder,
    request_id_header="x-amz-request-id",
    request_token_header="x-amz-id-2",
)


def make_request():
    return HttpRequest("GET", "https://s3.amazonaws.com/b/")


@pytest.mark.unit
class TestCommandDispatcher:
    """Test signing, dispatch and settlement."""

    @pytest.fixture
    def logger(self):
        return Mock()

    def dispatcher(self, transport, signer=None, executor=None, logger=None, wire=None):
        return CommandDispatcher(
            transport,
            signer or StaticSigner(),
            executor=executor,
            logger=logger,
            wire=wire,
        )

    def test_success_decodes_body(self, manual_executor):
        transport = FakeTransport([xml_response(200, LISTING)])
        dispatcher = self.dispatcher(transport, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)
        assert command.state is CommandState.DISPATCHED
        manual_executor.run_all()

        result = command.result(timeout=1)
        assert result.size() == 1
        assert command.state is CommandState.SUCCEEDED
        assert transport.sent[0].first_header("Authorization") == "static"

    def test_execute_on_thread_pool(self):
        transport = FakeTransport([xml_response(200, io.BytesIO(LISTING))])

        with self.dispatcher(transport) as dispatcher:
            result = dispatcher.execute(make_request(), DECODING, timeout=5)

        assert result.bucket_name == "b"
        assert transport.closed

    def test_bodyless_strategy_settles_with_none(self, manual_executor):
        transport = FakeTransport([HttpResponse(204)])
        dispatcher = self.dispatcher(transport, executor=manual_executor)

        command = dispatcher.submit(make_request(), ResponseDecoding(error=ErrorDecoder))
        manual_executor.run_all()

        assert command.result(timeout=1) is None

    def test_decoding_failure_after_success_fails_command(self, manual_executor, logger):
        transport = FakeTransport([xml_response(200, b"<ListBucketResult><Name>b</Name>")])
        dispatcher = self.dispatcher(transport, executor=manual_executor, logger=logger)

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        assert command.state is CommandState.FAILED
        assert isinstance(command.exception(timeout=1), DecodingError)
        logger.error.assert_called()

    def test_signature_mismatch_enriched_with_string_to_sign(self, manual_executor):
        signer = StaticSigner("GET\n\n\nTue, 27 Mar 2007 19:36:42 +0000\n/b/")
        transport = FakeTransport(
            [
                xml_response(
                    403,
                    SIGNATURE_MISMATCH,
                    {"x-amz-request-id": "HEADERID", "x-amz-id-2": "TOKEN"},
                )
            ]
        )
        dispatcher = self.dispatcher(transport, signer=signer, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        with pytest.raises(HttpResponseError) as exc_info:
            command.result(timeout=1)
        info = exc_info.value.error_info
        assert exc_info.value.status_code == 403
        assert info.code == "SignatureDoesNotMatch"
        assert info.string_to_sign == signer.string_to_sign(command.request)
        assert info.request_id == "HEADERID"
        assert info.request_token == "TOKEN"

    def test_body_identifiers_used_when_headers_absent(self, manual_executor):
        transport = FakeTransport([xml_response(403, SIGNATURE_MISMATCH)])
        dispatcher = self.dispatcher(transport, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        assert command.exception(timeout=1).error_info.request_id == "BODYID"

    def test_other_errors_not_enriched(self, manual_executor):
        body = b"<Error><Code>NoSuchBucket</Code><Message>gone</Message></Error>"
        transport = FakeTransport([xml_response(404, body)])
        dispatcher = self.dispatcher(transport, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        info = command.exception(timeout=1).error_info
        assert info.code == "NoSuchBucket"
        assert info.string_to_sign is None

    def test_undecodable_error_body_degrades(self, manual_executor, logger):
        transport = FakeTransport(
            [xml_response(500, b"<html>oops", {"x-amz-request-id": "HEADERID"})]
        )
        dispatcher = self.dispatcher(transport, executor=manual_executor, logger=logger)

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        error = command.exception(timeout=1)
        assert isinstance(error, HttpResponseError)
        assert error.error_info.is_degraded
        assert error.error_info.request_id == "HEADERID"
        logger.warning.assert_called()

    def test_absent_error_body_degrades(self, manual_executor):
        transport = FakeTransport(
            [HttpResponse(503, headers={"x-amz-id-2": "TOKEN"})]
        )
        dispatcher = self.dispatcher(transport, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        info = command.exception(timeout=1).error_info
        assert info.is_degraded
        assert info.request_token == "TOKEN"

    def test_error_factory_builds_exception(self, manual_executor):
        factory = Mock(return_value=HttpResponseError(Mock(code=None, request_id=None, request_token=None), 400))
        transport = FakeTransport([HttpResponse(400)])
        dispatcher = self.dispatcher(transport, executor=manual_executor)
        decoding = ResponseDecoding(error=ErrorDecoder, error_factory=factory)

        command = dispatcher.submit(make_request(), decoding)
        manual_executor.run_all()

        assert command.exception(timeout=1) is factory.return_value
        factory.assert_called_once()
        assert factory.call_args[0][1] == 400

    def test_transport_failure_surfaces_without_decoding(self, manual_executor):
        failure = TransportError("connection refused", url="https://s3.amazonaws.com/b/")
        transport = FakeTransport([failure])
        dispatcher = self.dispatcher(transport, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        assert command.exception(timeout=1) is failure

    def test_stream_failure_while_decoding_fails_command(self, manual_executor):
        def broken_body():
            yield LISTING[:20]
            raise TransportError("connection reset")

        transport = FakeTransport([xml_response(200, broken_body())])
        dispatcher = self.dispatcher(transport, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        assert isinstance(command.exception(timeout=1), TransportError)

    def test_signing_failure_fails_command(self, manual_executor):
        signer = Mock()
        signer.sign.side_effect = ValueError("no credentials")
        transport = FakeTransport()
        dispatcher = self.dispatcher(transport, signer=signer, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)

        assert command.state is CommandState.FAILED
        assert manual_executor.queue == []
        assert transport.sent == []

    def test_cancel_before_dispatch_never_calls_transport(self, manual_executor):
        transport = FakeTransport([xml_response(200, LISTING)])
        dispatcher = self.dispatcher(transport, executor=manual_executor)

        command = dispatcher.submit(make_request(), DECODING)
        assert command.cancel()
        manual_executor.run_all()

        assert command.state is CommandState.CANCELLED
        assert transport.sent == []

    def test_dispatch_skips_command_cancelled_while_built(self, manual_executor):
        transport = FakeTransport([xml_response(200, LISTING)])
        signer = StaticSigner()
        dispatcher = self.dispatcher(transport, signer=signer, executor=manual_executor)
        command = Command(make_request(), DECODING)
        assert command.cancel()

        returned = dispatcher.dispatch(command)
        manual_executor.run_all()

        assert returned is command
        assert command.state is CommandState.CANCELLED
        assert signer.signed == 0
        assert manual_executor.queue == []
        assert transport.sent == []

    def test_cancel_after_send_discards_outcome(self, manual_executor):
        transport = FakeTransport()
        dispatcher = self.dispatcher(transport, executor=manual_executor)
        command = dispatcher.submit(make_request(), DECODING)

        def send_then_cancel(request):
            command.cancel()
            return xml_response(200, LISTING)

        transport.send = send_then_cancel
        manual_executor.run_all()

        assert command.state is CommandState.CANCELLED
        assert isinstance(command.exception(timeout=1), CommandCancelledError)

    def test_shutdown_cancels_pending_commands(self, manual_executor):
        transport = FakeTransport()
        dispatcher = self.dispatcher(transport, executor=manual_executor)
        command = dispatcher.submit(make_request(), DECODING)

        dispatcher.shutdown(cancel_pending=True)
        manual_executor.run_all()

        assert command.state is CommandState.CANCELLED
        assert transport.sent == []
        assert transport.closed

    def test_submit_after_shutdown_fails_command(self):
        transport = FakeTransport()
        dispatcher = self.dispatcher(transport)
        dispatcher.shutdown()

        command = dispatcher.submit(make_request(), DECODING)

        assert isinstance(command.exception(timeout=1), InfrastructureError)

    def test_settles_exactly_once(self, manual_executor):
        transport = FakeTransport([xml_response(200, LISTING)])
        dispatcher = self.dispatcher(transport, executor=manual_executor)
        callback = Mock()

        command = dispatcher.submit(make_request(), DECODING)
        command.add_done_callback(callback)
        manual_executor.run_all()

        callback.assert_called_once_with(command)
        with pytest.raises(CommandStateError):
            command.succeed(None)

    def test_wire_failure_does_not_affect_settlement(self, manual_executor):
        broken = Mock()
        broken.debug.side_effect = OSError("disk full")
        transport = FakeTransport([xml_response(200, LISTING)])
        dispatcher = self.dispatcher(transport, executor=manual_executor, wire=WireLogger(broken))

        command = dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        assert command.result(timeout=1).size() == 1

    def test_wire_sees_request_and_body(self, manual_executor):
        sink = Mock()
        transport = FakeTransport([xml_response(200, LISTING)])
        dispatcher = self.dispatcher(transport, executor=manual_executor, wire=WireLogger(sink))

        dispatcher.submit(make_request(), DECODING)
        manual_executor.run_all()

        logged = " ".join(str(call) for call in sink.debug.call_args_list)
        assert "GET https://s3.amazonaws.com/b/" in logged
        assert "3366" in logged
