"""
Configuration management using Pydantic Settings.

Environment variables (prefix RECIPE_):
- RECIPE_MIN_IMAGE_DIMENSION: Upscale images whose longest side is smaller
- RECIPE_TESSERACT_CMD: Path to the tesseract binary
- RECIPE_TESSERACT_LANG: Tesseract language code
- RECIPE_TESSERACT_PSM: Tesseract page segmentation mode
- RECIPE_OCR_MIN_WORD_CONFIDENCE: Drop recognized words below this (0-1)
- RECIPE_EDGE_DIVIDER_FALLBACK: Try edge contours when no divider rectangle is found
- RECIPE_LOG_LEVEL: Logging level for the CLI
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import MIN_RECOMMENDED_DIMENSION


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RECIPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Preprocessing
    min_image_dimension: int = Field(default=MIN_RECOMMENDED_DIMENSION, gt=0)

    # Text recognition (Tesseract)
    tesseract_cmd: Optional[str] = None
    tesseract_lang: str = "eng"
    tesseract_psm: int = Field(default=11, ge=0, le=13)
    ocr_min_word_confidence: float = Field(default=0.3, ge=0.0, le=1.0)

    # Line detection (OpenCV)
    line_kernel_ratio: int = Field(default=30, gt=0)
    edge_divider_fallback: bool = False

    # Logging
    log_level: str = "INFO"

    def get_tesseract_config(self) -> str:
        """Tesseract CLI flags for this configuration."""
        return f"--oem 3 --psm {self.tesseract_psm}"


# Global settings instance
settings = Settings()
