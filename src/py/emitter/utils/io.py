from typing import Any, Iterable

DEFAULT_ENCODING: str = "utf8"
# Header octets are Latin-1 on the wire (RFC 7230 §3.2.4), lines that
# do not fit are sent as UTF-8
HEADER_ENCODING: str = "latin1"
EOL: bytes = b"\r\n"


def asBytes(value: str | bytes | bytearray | None) -> bytes:
	if isinstance(value, bytes):
		return value
	elif isinstance(value, bytearray):
		return bytes(value)
	elif isinstance(value, str):
		return bytes(value, DEFAULT_ENCODING)
	elif value is None:
		return b""
	else:
		raise ValueError(f"Expected bytes or str, got: {value}")


def asHead(lines: Iterable[str]) -> bytes:
	"""Serializes the given status and header lines as a response head,
	terminated by the empty line."""
	res = bytearray()
	for line in lines:
		try:
			res += line.encode(HEADER_ENCODING)
		except UnicodeEncodeError:
			res += line.encode(DEFAULT_ENCODING)
		res += EOL
	res += EOL
	return bytes(res)


def isReadable(value: Any) -> bool:
	return callable(getattr(value, "read", None))


# EOF
