from .spotify import (
    SpotifyTransport,
    default_client_factory,
    log_remote_failure,
    translate_error,
)

__all__ = [
    "SpotifyTransport",
    "default_client_factory",
    "log_remote_failure",
    "translate_error",
]
