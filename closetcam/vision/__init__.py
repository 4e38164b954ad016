"""Remote vision recognition."""

from .recognition_client import Detection, RecognitionClient, RecognitionRequestError

__all__ = ["Detection", "RecognitionClient", "RecognitionRequestError"]
