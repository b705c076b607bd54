import sys
from enum import Enum
from typing import BinaryIO, cast

from . import config
from .http.model import HTTPBodyFile, TBody, THeaders, THeaderValue, TResponse
from .http.status import statusLine
from .http.validation import (
	InvalidHeaderName,
	InvalidHeaderValue,
	UnimplementedStatusCode,
	validateHeader,
)
from .sink import OutputSink, StreamSink
from .utils.logging import debug, error, event, warning


class EmissionState(Enum):
	"""The steps an emission goes through, `Failed` being terminal."""

	Idle = 0
	StatusLineSent = 1
	HeadersValidated = 2
	HeadersSent = 3
	BodySent = 4
	Done = 5
	Failed = 10


# -----------------------------------------------------------------------------
#
# EMITTER
#
# -----------------------------------------------------------------------------


class ResponseEmitter:
	"""Decorates a response so that it can be sent to an output sink. The
	emitter reads exactly like the response it wraps, and every `with*`
	method returns a new emitter wrapping the new response."""

	__slots__ = ["response", "state"]

	@staticmethod
	def Extend(response: TResponse) -> "ResponseEmitter":
		"""Wraps the given response, unwrapping it first if it is already
		an emitter."""
		if isinstance(response, ResponseEmitter):
			response = response.response
		return ResponseEmitter(response)

	def __init__(self, response: TResponse):
		self.response: TResponse = response
		self.state: EmissionState = EmissionState.Idle

	# =========================================================================
	# ACCESSORS
	# =========================================================================

	def getBody(self) -> TBody:
		return self.response.getBody()

	def getHeader(self, name: str) -> list[str]:
		return self.response.getHeader(name)

	def getHeaderLine(self, name: str) -> str:
		return self.response.getHeaderLine(name)

	def getHeaders(self) -> THeaders:
		return self.response.getHeaders()

	def getProtocolVersion(self) -> str:
		return self.response.getProtocolVersion()

	def getReasonPhrase(self) -> str:
		return self.response.getReasonPhrase()

	def getStatusCode(self) -> int:
		return self.response.getStatusCode()

	def hasHeader(self, name: str) -> bool:
		return self.response.hasHeader(name)

	# =========================================================================
	# MUTATORS
	# =========================================================================

	def withAddedHeader(self, name: str, value: THeaderValue) -> "ResponseEmitter":
		return ResponseEmitter(self.response.withAddedHeader(name, value))

	def withBody(self, body: TBody) -> "ResponseEmitter":
		return ResponseEmitter(self.response.withBody(body))

	def withHeader(self, name: str, value: THeaderValue) -> "ResponseEmitter":
		return ResponseEmitter(self.response.withHeader(name, value))

	def withoutHeader(self, name: str) -> "ResponseEmitter":
		return ResponseEmitter(self.response.withoutHeader(name))

	def withProtocolVersion(self, version: str) -> "ResponseEmitter":
		return ResponseEmitter(self.response.withProtocolVersion(version))

	def withStatus(self, code: int, reasonPhrase: str = "") -> "ResponseEmitter":
		return ResponseEmitter(self.response.withStatus(code, reasonPhrase))

	# =========================================================================
	# EMISSION
	# =========================================================================

	def send(self, sink: OutputSink | None = None) -> OutputSink:
		"""Sends the status line, then each header once validated, then the
		body. The first invalid header stops the emission: the headers
		before it stay written, nothing after it is.

		Raises `UnimplementedStatusCode`, `InvalidHeaderName` or
		`InvalidHeaderValue`, and lets any error from the sink or the body
		through as is."""
		output: OutputSink = (
			StreamSink(cast(BinaryIO, sys.stdout.buffer)) if sink is None else sink
		)
		debug(
			"Sending response",
			status=self.getStatusCode(),
			protocol=self.getProtocolVersion(),
		)
		try:
			self._sendStatusLine(output)
			headers = self._sendHeaders(output)
			written = self._sendBody(output)
			output.end()
		except BaseException:
			self.state = EmissionState.Failed
			raise
		self.state = EmissionState.Done
		if config.LOG_RESPONSES:
			event(
				"emitter.sent",
				self.getStatusCode(),
				headers=headers,
				bytes=written,
			)
		return output

	def _sendStatusLine(self, output: OutputSink) -> None:
		status = self.getStatusCode()
		try:
			line = statusLine(self.getProtocolVersion(), status)
		except UnimplementedStatusCode:
			error("Unimplemented status code", status)
			raise
		output.writeStatusLine(line, status)
		self.state = EmissionState.StatusLineSent

	def _sendHeaders(self, output: OutputSink) -> int:
		count: int = 0
		for name, values in self.getHeaders().items():
			try:
				line = validateHeader(name, values)
			except (InvalidHeaderName, InvalidHeaderValue) as e:
				warning(
					"Rejected header",
					reason=e.message,
					name=name,
					index=count,
				)
				raise
			self.state = EmissionState.HeadersValidated
			output.writeHeaderLine(f"{name}: {line}")
			count += 1
		self.state = EmissionState.HeadersSent
		return count

	def _sendBody(self, output: OutputSink) -> int:
		body = self.getBody()
		written: int = 0
		try:
			while chunk := body.read(config.CHUNK_SIZE):
				output.writeBytes(chunk)
				written += len(chunk)
		finally:
			# Files are opened by the body itself, other streams belong
			# to the caller.
			if isinstance(body, HTTPBodyFile):
				body.close()
		self.state = EmissionState.BodySent
		return written

	def __str__(self) -> str:
		return f"ResponseEmitter({self.state.name} {self.response})"


def extend(response: TResponse) -> ResponseEmitter:
	"""Adds the `send` capability to the given response."""
	return ResponseEmitter.Extend(response)


# EOF
