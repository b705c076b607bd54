from os import getenv
from .utils.io import DEFAULT_ENCODING  # NOQA: F401

# Emits an event on stderr for every response fully sent
LOG_RESPONSES: bool = getenv("EMITTER_LOG_RESPONSES", "0") == "1"

# One of Debug, Info, Warning, Error, Exception, Critical
LOG_LEVEL: str = getenv("EMITTER_LOG_LEVEL", "Info")

# Size of the chunks read from the response body and written to the sink
CHUNK_SIZE: int = max(1, int(getenv("EMITTER_CHUNK_SIZE", 64_000)))

# EOF
