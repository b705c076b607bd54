from abc import ABC, abstractmethod
from typing import BinaryIO
from mypy_extensions import mypyc_attr

from .http.validation import HeadersAlreadySent
from .utils.io import asHead

# -----------------------------------------------------------------------------
#
# OUTPUT SINK
#
# -----------------------------------------------------------------------------


# NOTE: Sinks are meant to be implemented by transports outside of this
# package, which must still work when the package is compiled with MyPyC.
@mypyc_attr(allow_interpreted_subclasses=True)
class OutputSink(ABC):
	"""The primitive that actually transmits a response. Each call adds to
	what was already written, nothing is ever replaced."""

	@abstractmethod
	def writeStatusLine(self, line: str, code: int) -> None:
		"""Writes the status line, `code` being the status code it holds."""

	@abstractmethod
	def writeHeaderLine(self, line: str) -> None:
		"""Writes a `Name: value` header line."""

	@abstractmethod
	def writeBytes(self, data: bytes) -> None:
		"""Writes a chunk of the body."""

	def end(self) -> None:
		"""Called once the whole body has been written."""


@mypyc_attr(allow_interpreted_subclasses=True)
class MemorySink(OutputSink):
	"""Records everything that is written, used to inspect what a response
	looks like on the wire."""

	__slots__ = ["statusLine", "status", "headers", "body", "ended"]

	def __init__(self) -> None:
		self.statusLine: str | None = None
		self.status: int | None = None
		self.headers: list[str] = []
		self.body: bytearray = bytearray()
		self.ended: bool = False

	def writeStatusLine(self, line: str, code: int) -> None:
		self.statusLine = line
		self.status = code

	def writeHeaderLine(self, line: str) -> None:
		self.headers.append(line)

	def writeBytes(self, data: bytes) -> None:
		self.body += data

	def end(self) -> None:
		self.ended = True

	def headerLines(self) -> list[str]:
		"""Returns the header lines written so far, in order."""
		return list(self.headers)

	@property
	def isEmpty(self) -> bool:
		return self.statusLine is None and not self.headers and not self.body

	def __str__(self) -> str:
		return f"MemorySink({self.statusLine} {self.headers} {len(self.body)} bytes)"


@mypyc_attr(allow_interpreted_subclasses=True)
class StreamSink(OutputSink):
	"""Writes the response to a binary stream (a socket file, stdout, etc).
	The head is held back until the first body bytes or the end of the
	response, so that it is written in one go."""

	__slots__ = ["stream", "status", "lines", "flushed"]

	def __init__(self, stream: BinaryIO):
		self.stream: BinaryIO = stream
		self.status: int | None = None
		self.lines: list[str] = []
		self.flushed: bool = False

	def writeStatusLine(self, line: str, code: int) -> None:
		if self.flushed:
			raise HeadersAlreadySent("Status line written after the response head")
		self.status = code
		if self.lines:
			self.lines[0] = line
		else:
			self.lines.append(line)

	def writeHeaderLine(self, line: str) -> None:
		if self.flushed:
			raise HeadersAlreadySent("Header written after the response head")
		if not self.lines:
			raise RuntimeError("Header written before the status line")
		self.lines.append(line)

	def writeBytes(self, data: bytes) -> None:
		self.flushHead()
		if data:
			self.stream.write(data)

	def end(self) -> None:
		self.flushHead()
		self.stream.flush()

	def flushHead(self) -> bool:
		"""Writes the pending head, returns `False` when already written."""
		if self.flushed:
			return False
		self.stream.write(asHead(self.lines))
		self.lines.clear()
		self.flushed = True
		return True


# EOF
