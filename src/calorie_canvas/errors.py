"""Application error types."""


class CalorieCanvasError(Exception):
    """Base class for application errors."""


class ImageLoadError(CalorieCanvasError):
    """Raised when a local meal image cannot be read."""


class ModelInvocationError(CalorieCanvasError):
    """Raised when the generative model fails to identify food."""


class EntryNotFoundError(CalorieCanvasError):
    """Raised when a meal entry does not exist."""
