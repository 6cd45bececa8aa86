"""Language-region detection and mode dispatch for mixed host/embedded buffers."""

__all__ = [
    "adapters",
    "buffer",
    "indent",
    "modes",
    "regions",
    "runtime",
    "session",
    "syntax",
]

__version__ = "0.1.0"
