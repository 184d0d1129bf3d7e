class SampleOverlayError(RuntimeError):
    """Base error for the sampling overlay."""


class MissingCollaboratorError(SampleOverlayError):
    """Raised at construction when the video source or surface is absent."""


class VideoSourceError(SampleOverlayError):
    """Raised when a video source cannot supply a frame."""
