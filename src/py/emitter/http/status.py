from typing import Final
from .validation import UnimplementedStatusCode

# --
# == Status lines
#
# The reason phrase written on the wire always comes from this table, never
# from the response itself. The protocol version only changes the prefix.

HTTP_PROTOCOLS: Final[tuple[str, ...]] = ("1.0", "1.1", "2.0", "3.0")
HTTP_DEFAULT_PROTOCOL: Final[str] = "1.1"

HTTP_STATUS: Final[dict[int, str]] = {
	# 1xx Informational
	100: "Continue",
	101: "Switching Protocols",
	102: "Processing",
	103: "Early Hints",
	# 2xx Success
	200: "OK",
	201: "Created",
	202: "Accepted",
	203: "Non-Authoritative Information",
	204: "No Content",
	205: "Reset Content",
	206: "Partial Content",
	207: "Multi Status",
	208: "Already Reported",
	226: "I'm used",
	# 3xx Redirection
	300: "Multiple Choices",
	301: "Moved Permanently",
	302: "Found",
	303: "See Other",
	304: "Not Modified",
	305: "Use Proxy",
	306: "Switching Proxy",
	307: "Temporary Redirect",
	308: "Permanent Redirect",
	# 4xx Client errors
	400: "Bad Request",
	401: "Unauthorized",
	402: "Payment Required",
	403: "Forbidden",
	404: "Not Found",
	405: "Method Not Allowed",
	406: "Not Acceptable",
	407: "Proxy Authentication Required",
	408: "Request Timeout",
	409: "Conflict",
	410: "Gone",
	411: "Length Required",
	412: "Precondition Failed",
	413: "Payload Too Large",
	414: "URI Too Long",
	415: "Unsupported Media Type",
	416: "Range Not Satisfiable",
	417: "Expectation Failed",
	418: "I'm a teapot",
	419: "Page Expired",
	# Shared by "Enhance Your Calm" (Twitter) and "Method Failure" (Spring)
	420: "Calm",
	421: "Misdirected Request",
	422: "Unprocessable Entity",
	423: "Locked",
	424: "Failed Dependency",
	425: "Too Early",
	426: "Upgrade Required",
	428: "Precondition Required",
	429: "Too Many Requests",
	431: "Request Header Fields Too Large",
	450: "Blocked",
	451: "Unavailable For Legal Reasons",
	498: "Invalid Token",
	499: "Token Required",
	# 5xx Server errors
	500: "Internal Server Error",
	501: "Not Implemented",
	502: "Bad Gateway",
	503: "Service Unavailable",
	504: "Gateway Timeout",
	505: "HTTP Version Not Supported",
	506: "Variant Also Negotiates",
	507: "Insufficient Storage",
	508: "Loop Detected",
	510: "Not Extended",
	511: "Network Authentication Required",
}


def protocolVersion(protocol: str | None) -> str:
	"""Returns the protocol version used on the status line, falling back
	to HTTP/1.1 for anything unset or unrecognized."""
	return protocol if protocol in HTTP_PROTOCOLS else HTTP_DEFAULT_PROTOCOL


def reasonPhrase(status: int) -> str:
	try:
		return HTTP_STATUS[status]
	except KeyError as e:
		raise UnimplementedStatusCode(status) from e


def statusLine(protocol: str | None, status: int) -> str:
	"""Formats the status line `HTTP/<version> <code> <phrase>`."""
	return f"HTTP/{protocolVersion(protocol)} {status} {reasonPhrase(status)}"


# EOF
