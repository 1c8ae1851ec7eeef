"""
Error taxonomy for recipe card analysis.

Only two failures abort the pipeline: an image that cannot be decoded and a
text engine that returns nothing. Line detection and preprocessing failures
degrade silently to an empty or absent result.
"""


class RecipeAnalysisError(Exception):
    """Base class for fatal analysis errors."""


class InvalidImageError(RecipeAnalysisError):
    """The input image is missing, malformed or cannot be decoded."""

    def __init__(self, message: str = "Invalid or undecodable image"):
        super().__init__(message)


class NoTextDetectedError(RecipeAnalysisError):
    """The text recognition engine returned no text blocks."""

    def __init__(self, message: str = "No text detected in image"):
        super().__init__(message)
