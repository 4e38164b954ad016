"""Application services."""

from .capture import CaptureService, FrameAnalysis, TextCapture

__all__ = ["CaptureService", "FrameAnalysis", "TextCapture"]
