"""
Basic Hello World Example

Builds a response and sends it to stdout, the way a CGI script would.
Features shown:
- Immutable response building with `with*` methods
- Wrapping a response with `extend`
- Header validation rejecting a response splitting attempt
- Falling back to a generic 500 when a response can't be sent

Usage:
    python helloworld.py
    python helloworld.py 'evil
Location: http://example.com'
"""

import sys
from emitter import EmissionError, HTTPResponse, MemorySink, ResponseEmitter, extend
from emitter.utils.logging import info, warning


def hello(name: str) -> ResponseEmitter:
	return extend(
		HTTPResponse.Create(f"Hello, {name}!\n", contentType="text/plain")
	).withHeader("X-Greeted", name)


def respond(name: str) -> None:
	# A dry run to memory, so that nothing reaches stdout when the
	# response is rejected.
	try:
		hello(name).send(MemorySink())
	except EmissionError as e:
		warning("Response rejected, sending a 500 instead", reason=e.message)
		extend(HTTPResponse.Create("Server Error\n", status=500)).send()
	else:
		hello(name).send()


if __name__ == "__main__":
	name = sys.argv[1] if len(sys.argv) > 1 else "World"
	info("Sending response", name=name)
	respond(name)

# EOF
