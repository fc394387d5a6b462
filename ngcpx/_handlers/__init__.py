"""
Decode Event Handlers Package.

Handlers observe a Decoder and decide what happens to decoded messages and
decode failures. Handlers can be chained together.

Base Classes:
    - DecodeHandler: Base class for handlers
    - DecodeEvent: Context passed between handlers
    - HandlerChain: Chain of handlers executed in sequence

Utility Handlers:
    - LoggingHandler: Logs decoded messages and failures
    - StatsHandler: Counts decoded messages, ignored results and failures

Example:
    ```python
    from ngcpx import Decoder
    from ngcpx._handlers import LoggingHandler, StatsHandler

    stats = StatsHandler()
    decoder = Decoder(handlers=[LoggingHandler(), stats])

    for payload in payloads:
        decoder.feed(payload)

    print(stats.errors.most_common())
    ```
"""

# Base classes
from ._base import (
    DecodeEvent,
    DecodeHandler,
    HandlerChain,
)

# Utility handlers
from ._utility import (
    LoggingHandler,
    StatsHandler,
)


__all__ = [
    # Base
    "DecodeEvent",
    "DecodeHandler",
    "HandlerChain",
    # Utility
    "LoggingHandler",
    "StatsHandler",
]
