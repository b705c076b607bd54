import re
from typing import Iterable

# --
# == Header validation
#
# Header names and values end up verbatim on the wire, so any line
# terminator they hold would be read by the client as an extra header or
# as the start of the body (HTTP response splitting).
#
# SEE: https://owasp.org/www-community/attacks/HTTP_Response_Splitting

HEADER_VALUE_SEPARATOR: str = ", "

# Any whitespace, including the Unicode separators `str.isspace` knows about
RE_HEADER_NAME_INVALID: re.Pattern[str] = re.compile(r"\s")
# The POSIX `[:cntrl:]` class: C0 controls and DEL
RE_HEADER_VALUE_INVALID: re.Pattern[str] = re.compile(r"[\x00-\x1f\x7f]")

# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class EmissionError(RuntimeError):
	"""Base class for the errors raised while sending a response."""

	def __init__(self, message: str):
		super().__init__(message)
		self.message: str = message


class InvalidHeaderName(EmissionError):
	"""The header name is empty or contains whitespace."""

	def __init__(self, name: str):
		super().__init__("Invalid header name detected")
		self.name: str = name


class InvalidHeaderValue(EmissionError):
	"""The header value line contains a control character."""

	def __init__(self, name: str, value: str):
		super().__init__("Invalid header value detected")
		self.name: str = name
		self.value: str = value


class UnimplementedStatusCode(EmissionError):
	"""The status code has no entry in the canonical status table."""

	def __init__(self, status: int):
		super().__init__(f"Response code: {status} not implemented")
		self.status: int = status


class HeadersAlreadySent(EmissionError):
	"""A header or status line was written after the head was flushed."""


# -----------------------------------------------------------------------------
#
# VALIDATORS
#
# -----------------------------------------------------------------------------


def isValidHeaderName(name: str) -> bool:
	return bool(name) and RE_HEADER_NAME_INVALID.search(name) is None


def isValidHeaderValue(line: str) -> bool:
	return bool(line) and RE_HEADER_VALUE_INVALID.search(line) is None


def headerLine(values: Iterable[str]) -> str:
	"""Joins repeated header values the way they appear on a single line."""
	return HEADER_VALUE_SEPARATOR.join(values)


def validateHeader(name: str, values: Iterable[str]) -> str:
	"""Validates the name and then the values of a header, returning the
	joined value line. The name check always runs first."""
	if not isValidHeaderName(name):
		raise InvalidHeaderName(name)
	line = headerLine(values)
	if not isValidHeaderValue(line):
		raise InvalidHeaderValue(name, line)
	return line


# EOF
