import inspect
from pathlib import Path
from typing import (
	Any,
	BinaryIO,
	Iterable,
	Iterator,
	Protocol,
	TypeAlias,
	Union,
	runtime_checkable,
)

from ..utils.io import DEFAULT_ENCODING, asBytes, isReadable
from .status import HTTP_DEFAULT_PROTOCOL, HTTP_STATUS
from .validation import headerLine

THeaderValue: TypeAlias = Union[str, int, Iterable[str]]
THeaders: TypeAlias = dict[str, list[str]]

# -----------------------------------------------------------------------------
#
# INTERFACES
#
# -----------------------------------------------------------------------------


@runtime_checkable
class TBody(Protocol):
	"""A readable stream of bytes, as returned by `open(..., "rb")`."""

	def read(self, size: int = -1) -> bytes: ...


@runtime_checkable
class TResponse(Protocol):
	"""The immutable response interface the emitter decorates. Every `with*`
	method returns a new response and leaves the original untouched."""

	def getProtocolVersion(self) -> str: ...

	def getStatusCode(self) -> int: ...

	def getReasonPhrase(self) -> str: ...

	def getHeaders(self) -> THeaders: ...

	def getHeader(self, name: str) -> list[str]: ...

	def getHeaderLine(self, name: str) -> str: ...

	def hasHeader(self, name: str) -> bool: ...

	def getBody(self) -> TBody: ...

	def withProtocolVersion(self, version: str) -> "TResponse": ...

	def withStatus(self, code: int, reasonPhrase: str = "") -> "TResponse": ...

	def withHeader(self, name: str, value: THeaderValue) -> "TResponse": ...

	def withAddedHeader(self, name: str, value: THeaderValue) -> "TResponse": ...

	def withoutHeader(self, name: str) -> "TResponse": ...

	def withBody(self, body: TBody) -> "TResponse": ...


# -----------------------------------------------------------------------------
#
# BODY
#
# -----------------------------------------------------------------------------


class HTTPBodyBlob:
	"""A body held in memory."""

	__slots__ = ["payload", "offset"]

	def __init__(self, payload: bytes = b""):
		self.payload: bytes = payload
		self.offset: int = 0

	@property
	def length(self) -> int:
		return len(self.payload)

	def read(self, size: int = -1) -> bytes:
		start = self.offset
		end = len(self.payload) if size is None or size < 0 else start + size
		chunk = self.payload[start:end]
		self.offset = start + len(chunk)
		return chunk

	def __repr__(self) -> str:
		return f"HTTPBodyBlob({self.length} bytes)"


class HTTPBodyFile:
	"""A body read from a file, opened on the first read and closed once
	exhausted."""

	__slots__ = ["path", "_file", "_done"]

	def __init__(self, path: Path | str):
		self.path: Path = Path(path)
		self._file: BinaryIO | None = None
		self._done: bool = False

	@property
	def length(self) -> int:
		return self.path.stat().st_size

	@property
	def isOpen(self) -> bool:
		return self._file is not None

	def read(self, size: int = -1) -> bytes:
		if self._done:
			return b""
		if self._file is None:
			self._file = open(self.path, "rb")
		chunk = self._file.read(size)
		if (not chunk and size != 0) or size is None or size < 0:
			self.close()
		return chunk

	def close(self) -> None:
		if self._file is not None:
			self._file.close()
			self._file = None
		self._done = True

	def __repr__(self) -> str:
		return f"HTTPBodyFile({self.path})"


class HTTPBodyStream:
	"""A body produced by an iterator of `str` or `bytes` chunks."""

	__slots__ = ["stream", "buffer"]

	def __init__(self, stream: Iterable[str | bytes]):
		self.stream: Iterator[str | bytes] = iter(stream)
		self.buffer: bytearray = bytearray()

	def read(self, size: int = -1) -> bytes:
		unbounded = size is None or size < 0
		while unbounded or len(self.buffer) < size:
			chunk = next(self.stream, None)
			if chunk is None:
				break
			self.buffer += asBytes(chunk)
		if unbounded:
			res = bytes(self.buffer)
			self.buffer.clear()
		else:
			res = bytes(self.buffer[:size])
			del self.buffer[:size]
		return res

	def __repr__(self) -> str:
		return "HTTPBodyStream()"


def asBody(value: Any) -> TBody:
	"""Coerces the given content into a readable body."""
	if value is None:
		return HTTPBodyBlob()
	elif isinstance(value, str):
		return HTTPBodyBlob(value.encode(DEFAULT_ENCODING))
	elif isinstance(value, (bytes, bytearray)):
		return HTTPBodyBlob(bytes(value))
	elif isinstance(value, Path):
		return HTTPBodyFile(value)
	elif isReadable(value):
		return value
	elif inspect.isgenerator(value) or isinstance(value, (list, tuple)):
		return HTTPBodyStream(value)
	else:
		raise ValueError(f"Unsupported body {type(value)}:{value}")


# -----------------------------------------------------------------------------
#
# HEADERS
#
# -----------------------------------------------------------------------------


def headerValues(value: THeaderValue) -> tuple[str, ...]:
	"""Normalizes a header value to a tuple of strings."""
	if isinstance(value, str):
		return (value,)
	elif isinstance(value, int):
		return (str(value),)
	else:
		return tuple(str(_) for _ in value)


# -----------------------------------------------------------------------------
#
# RESPONSE
#
# -----------------------------------------------------------------------------


class HTTPResponse:
	"""An immutable HTTP response. Headers are looked up case-insensitively
	and keep their insertion order."""

	__slots__ = ["_protocol", "_status", "_reason", "_headers", "_body"]

	@staticmethod
	def Create(
		content: Any = None,
		contentType: str | None = None,
		headers: dict[str, THeaderValue] | None = None,
		status: int = 200,
		reason: str = "",
		protocol: str = HTTP_DEFAULT_PROTOCOL,
	) -> "HTTPResponse":
		"""Factory method to create HTTP response objects from content."""
		body = asBody(content)
		res = HTTPResponse(
			status=status,
			headers=headers,
			body=body,
			protocol=protocol,
			reason=reason,
		)
		if contentType is not None:
			res = res.withHeader("Content-Type", contentType)
		length: int | None = getattr(body, "length", None)
		if length is not None and not res.hasHeader("Content-Length"):
			res = res.withHeader("Content-Length", length)
		return res

	def __init__(
		self,
		status: int = 200,
		headers: dict[str, THeaderValue] | None = None,
		body: TBody | None = None,
		protocol: str = HTTP_DEFAULT_PROTOCOL,
		reason: str = "",
	):
		self._protocol: str = protocol
		self._status: int = status
		self._reason: str = reason
		# Lowercase name to the name as given and its values
		self._headers: dict[str, tuple[str, tuple[str, ...]]] = {}
		self._body: TBody = HTTPBodyBlob() if body is None else body
		for k, v in (headers or {}).items():
			values = headerValues(v)
			if values:
				self._headers[k.lower()] = (k, values)

	def _copy(self) -> "HTTPResponse":
		res = HTTPResponse.__new__(HTTPResponse)
		res._protocol = self._protocol
		res._status = self._status
		res._reason = self._reason
		res._headers = dict(self._headers)
		res._body = self._body
		return res

	# =========================================================================
	# ACCESSORS
	# =========================================================================

	def getProtocolVersion(self) -> str:
		return self._protocol

	def getStatusCode(self) -> int:
		return self._status

	def getReasonPhrase(self) -> str:
		return self._reason or HTTP_STATUS.get(self._status, "")

	def getHeaders(self) -> THeaders:
		return {name: list(values) for name, values in self._headers.values()}

	def getHeader(self, name: str) -> list[str]:
		entry = self._headers.get(name.lower())
		return list(entry[1]) if entry else []

	def getHeaderLine(self, name: str) -> str:
		return headerLine(self.getHeader(name))

	def hasHeader(self, name: str) -> bool:
		return name.lower() in self._headers

	def getBody(self) -> TBody:
		return self._body

	# =========================================================================
	# MUTATORS
	# =========================================================================

	def withProtocolVersion(self, version: str) -> "HTTPResponse":
		res = self._copy()
		res._protocol = version
		return res

	def withStatus(self, code: int, reasonPhrase: str = "") -> "HTTPResponse":
		res = self._copy()
		res._status = code
		res._reason = reasonPhrase
		return res

	def withHeader(self, name: str, value: THeaderValue) -> "HTTPResponse":
		res = self._copy()
		values = headerValues(value)
		if values:
			res._headers[name.lower()] = (name, values)
		else:
			res._headers.pop(name.lower(), None)
		return res

	def withAddedHeader(self, name: str, value: THeaderValue) -> "HTTPResponse":
		key = name.lower()
		existing = self._headers.get(key)
		if existing is None:
			return self.withHeader(name, value)
		res = self._copy()
		res._headers[key] = (existing[0], existing[1] + headerValues(value))
		return res

	def withoutHeader(self, name: str) -> "HTTPResponse":
		res = self._copy()
		res._headers.pop(name.lower(), None)
		return res

	def withBody(self, body: TBody) -> "HTTPResponse":
		res = self._copy()
		res._body = body
		return res

	def __str__(self) -> str:
		return f"Response(HTTP/{self._protocol} {self._status} {self.getReasonPhrase()} {self.getHeaders()} {self._body!r})"


# EOF
