"""JWT Decode: inspect the header, payload and signature of a JWT."""

__version__ = "1.0.0"

__all__ = [
    "cli",
    "config",
    "decoder",
    "expiry",
    "logging_setup",
    "models",
    "render",
    "timestamps",
]
