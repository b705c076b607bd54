from io import BytesIO

import pytest
from emitter import HTTPResponse, extend
from emitter.http.validation import HeadersAlreadySent
from emitter.sink import MemorySink, StreamSink


def test_memory_sink_records_everything():
	sink = MemorySink()
	assert sink.isEmpty
	sink.writeStatusLine("HTTP/1.1 201 Created", 201)
	sink.writeHeaderLine("A: 1")
	sink.writeHeaderLine("A: 2")
	sink.writeBytes(b"x")
	sink.end()
	assert sink.status == 201
	assert sink.headerLines() == ["A: 1", "A: 2"]
	assert bytes(sink.body) == b"x"
	assert sink.ended


def test_stream_sink_frames_the_response():
	out = BytesIO()
	sink = StreamSink(out)
	sink.writeStatusLine("HTTP/1.1 200 OK", 200)
	sink.writeHeaderLine("Content-Type: text/plain")
	assert out.getvalue() == b""
	sink.writeBytes(b"it ")
	sink.writeBytes(b"worked!")
	sink.end()
	assert sink.status == 200
	assert out.getvalue() == (
		b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nit worked!"
	)


def test_stream_sink_without_body():
	out = BytesIO()
	sink = StreamSink(out)
	sink.writeStatusLine("HTTP/1.0 204 No Content", 204)
	sink.end()
	assert out.getvalue() == b"HTTP/1.0 204 No Content\r\n\r\n"


def test_stream_sink_rejects_late_headers():
	sink = StreamSink(BytesIO())
	sink.writeStatusLine("HTTP/1.1 200 OK", 200)
	sink.writeBytes(b"body")
	with pytest.raises(HeadersAlreadySent):
		sink.writeHeaderLine("X-Late: 1")
	with pytest.raises(HeadersAlreadySent):
		sink.writeStatusLine("HTTP/1.1 500 Internal Server Error", 500)


def test_stream_sink_needs_a_status_line_first():
	with pytest.raises(RuntimeError):
		StreamSink(BytesIO()).writeHeaderLine("X-Early: 1")



def test_stream_sink_writes_non_latin1_headers_as_utf8():
	out = BytesIO()
	extend(
		HTTPResponse()
		.withHeader("X-名", "1")
		.withHeader("Content-Disposition", "attachment; filename=\"€.txt\"")
		.withHeader("X-Latin", "café")
	).send(StreamSink(out))
	head = out.getvalue()
	assert "X-名: 1\r\n".encode("utf8") in head
	assert 'filename="€.txt"\r\n'.encode("utf8") in head
	assert "X-Latin: café\r\n".encode("latin1") in head
	assert head.endswith(b"\r\n\r\n")


# EOF
