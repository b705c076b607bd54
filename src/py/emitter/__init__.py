from .core import ResponseEmitter, EmissionState, extend  # NOQA: F401
from .http.model import (  # NOQA: F401
	HTTPResponse,
	HTTPBodyBlob,
	HTTPBodyFile,
	HTTPBodyStream,
	TResponse,
	asBody,
)
from .http.status import HTTP_STATUS, statusLine  # NOQA: F401
from .http.validation import (  # NOQA: F401
	EmissionError,
	InvalidHeaderName,
	InvalidHeaderValue,
	UnimplementedStatusCode,
	HeadersAlreadySent,
)
from .sink import OutputSink, MemorySink, StreamSink  # NOQA: F401


# EOF
