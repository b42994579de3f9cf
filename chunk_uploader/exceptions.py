"""Error kinds raised by the upload core and its transports."""


class UploadError(RuntimeError):
    """Base class for upload failures surfaced in an UploadOutcome."""


class HandshakeError(UploadError):
    """Begin or end handshake was rejected or the endpoint was unreachable."""


class TransportError(UploadError):
    """A chunk or whole-file send failed."""


class SourceReadError(UploadError):
    """The local source could not be read."""


class SessionStateError(UploadError):
    """Illegal transfer session transition or counter update."""
