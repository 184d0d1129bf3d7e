from .video_source import CaptureVideoSource, PlayNotifier, VideoSource

__all__ = ["CaptureVideoSource", "PlayNotifier", "VideoSource"]
