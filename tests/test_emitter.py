from io import BytesIO

import pytest
from emitter import (
	EmissionState,
	HTTPBodyBlob,
	HTTPBodyFile,
	HTTPBodyStream,
	HTTPResponse,
	InvalidHeaderName,
	InvalidHeaderValue,
	MemorySink,
	ResponseEmitter,
	StreamSink,
	UnimplementedStatusCode,
	extend,
)
from emitter.http.status import HTTP_PROTOCOLS, HTTP_STATUS

RESPONSE_CONTENT = b"it worked!"
HEADER_KEY = "Content-Range"
HEADER_VALUE = "bytes 21010-47021/47022"
PROTOCOLS = ("", *HTTP_PROTOCOLS)


def response(status: int = 200, protocol: str = "1.1") -> HTTPResponse:
	return HTTPResponse(status=status, protocol=protocol)


@pytest.mark.parametrize("protocol", PROTOCOLS)
@pytest.mark.parametrize("status", sorted(HTTP_STATUS))
def test_sets_the_status_line(protocol: str, status: int):
	sink = extend(response(status, protocol)).withBody(HTTPBodyBlob()).send(MemorySink())
	version = protocol or "1.1"
	assert sink.statusLine == f"HTTP/{version} {status} {HTTP_STATUS[status]}"
	assert sink.status == status


@pytest.mark.parametrize("protocol", PROTOCOLS)
def test_unimplemented_status_writes_nothing(protocol: str):
	sink = MemorySink()
	emitter = extend(response(999999, protocol).withHeader(HEADER_KEY, HEADER_VALUE))
	with pytest.raises(UnimplementedStatusCode):
		emitter.send(sink)
	assert sink.isEmpty
	assert emitter.state is EmissionState.Failed


def test_table_phrase_overrides_the_response_phrase():
	sink = extend(response().withStatus(404, "Gone Fishing")).send(MemorySink())
	assert sink.statusLine == "HTTP/1.1 404 Not Found"


def test_permanent_redirect_records_its_own_code():
	sink = extend(response(308)).send(MemorySink())
	assert sink.status == 308


def test_sends_the_response():
	emitter = (
		extend(response())
		.withBody(HTTPBodyBlob(RESPONSE_CONTENT))
		.withHeader(HEADER_KEY, HEADER_VALUE)
	)
	sink = emitter.send(MemorySink())
	assert sink.statusLine == "HTTP/1.1 200 OK"
	assert sink.headerLines() == [f"{HEADER_KEY}: {HEADER_VALUE}"]
	assert bytes(sink.body) == RESPONSE_CONTENT
	assert sink.ended
	assert emitter.state is EmissionState.Done


def test_repeated_values_share_one_line():
	sink = (
		extend(response())
		.withHeader("Cache-Control", "no-cache")
		.withAddedHeader("Cache-Control", "no-store")
		.send(MemorySink())
	)
	assert sink.headerLines() == ["Cache-Control: no-cache, no-store"]


def test_invalid_header_name():
	sink = MemorySink()
	emitter = (
		extend(response())
		.withBody(HTTPBodyBlob(RESPONSE_CONTENT))
		.withHeader(HEADER_KEY + "\n", HEADER_VALUE)
	)
	with pytest.raises(InvalidHeaderName):
		emitter.send(sink)
	assert sink.statusLine == "HTTP/1.1 200 OK"
	assert sink.headerLines() == []
	assert sink.body == b""


def test_invalid_header_value():
	sink = MemorySink()
	emitter = (
		extend(response())
		.withBody(HTTPBodyBlob(RESPONSE_CONTENT))
		.withHeader(HEADER_KEY, "bytes 0-10/20\n")
	)
	with pytest.raises(InvalidHeaderValue):
		emitter.send(sink)
	assert sink.statusLine == "HTTP/1.1 200 OK"
	assert sink.headerLines() == []
	assert sink.body == b""
	assert not sink.ended


def test_headers_before_the_invalid_one_stay_written():
	sink = MemorySink()
	emitter = (
		extend(response())
		.withHeader("X-First", "1")
		.withHeader("X Second", "2")
		.withHeader("X-Third", "3")
	)
	with pytest.raises(InvalidHeaderName):
		emitter.send(sink)
	assert sink.headerLines() == ["X-First: 1"]


def test_body_is_streamed_in_order(monkeypatch):
	monkeypatch.setattr("emitter.config.CHUNK_SIZE", 3)
	body = HTTPBodyStream(_ for _ in ["it ", "wor", "ked", "!"])
	sink = extend(response()).withBody(body).send(MemorySink())
	assert bytes(sink.body) == RESPONSE_CONTENT


def test_body_errors_propagate():
	class Broken:
		def read(self, size: int = -1) -> bytes:
			raise OSError("connection reset")

	sink = MemorySink()
	emitter = extend(response()).withBody(Broken())
	with pytest.raises(OSError):
		emitter.send(sink)
	assert emitter.state is EmissionState.Failed
	assert not sink.ended


def test_sends_to_a_stream():
	out = BytesIO()
	extend(
		HTTPResponse.Create(RESPONSE_CONTENT, contentType="text/plain")
	).send(StreamSink(out))
	assert out.getvalue() == (
		b"HTTP/1.1 200 OK\r\n"
		b"Content-Type: text/plain\r\n"
		b"Content-Length: 10\r\n"
		b"\r\n" + RESPONSE_CONTENT
	)


def test_accessors_pass_through():
	r = (
		HTTPResponse(status=201, protocol="2.0", reason="Made")
		.withHeader(HEADER_KEY, HEADER_VALUE)
		.withBody(HTTPBodyBlob(RESPONSE_CONTENT))
	)
	e = extend(r)
	assert e.getStatusCode() == r.getStatusCode()
	assert e.getProtocolVersion() == r.getProtocolVersion()
	assert e.getReasonPhrase() == r.getReasonPhrase()
	assert e.getHeaders() == r.getHeaders()
	assert e.getHeader(HEADER_KEY.lower()) == r.getHeader(HEADER_KEY)
	assert e.getHeaderLine(HEADER_KEY) == r.getHeaderLine(HEADER_KEY)
	assert e.hasHeader(HEADER_KEY) == r.hasHeader(HEADER_KEY)
	assert e.getBody() is r.getBody()


def test_mutators_return_new_emitters():
	r = response()
	e = extend(r)
	for changed in (
		e.withHeader("A", "1"),
		e.withAddedHeader("A", "1"),
		e.withoutHeader("A"),
		e.withBody(HTTPBodyBlob()),
		e.withStatus(404),
		e.withProtocolVersion("2.0"),
	):
		assert isinstance(changed, ResponseEmitter)
		assert changed is not e
		assert changed.response is not r
	assert e.response is r
	assert r.getHeaders() == {}
	assert r.getStatusCode() == 200


def test_extending_twice_does_not_nest():
	r = response(404).withHeader(HEADER_KEY, HEADER_VALUE)
	once, twice = extend(r), extend(extend(r))
	assert twice.response is r
	assert twice.getHeaders() == once.getHeaders()
	assert twice.getStatusCode() == once.getStatusCode()
	assert twice.send(MemorySink()).statusLine == "HTTP/1.1 404 Not Found"



def test_file_body_is_closed_when_the_sink_fails(tmp_path):
	class BrokenPipe(MemorySink):
		def writeBytes(self, data: bytes) -> None:
			raise BrokenPipeError("client went away")

	path = tmp_path / "body.bin"
	path.write_bytes(b"x" * 10)
	body = HTTPBodyFile(path)
	emitter = extend(response()).withBody(body)
	with pytest.raises(BrokenPipeError):
		emitter.send(BrokenPipe())
	assert not body.isOpen
	assert body.read() == b""


def test_caller_streams_are_left_open():
	body = BytesIO(RESPONSE_CONTENT)
	sink = extend(response()).withBody(body).send(MemorySink())
	assert bytes(sink.body) == RESPONSE_CONTENT
	assert not body.closed


# EOF
