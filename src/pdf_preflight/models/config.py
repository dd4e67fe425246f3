"""
Validation Configuration
=========================
Run-wide settings, fixed before validation starts and read-only while it
runs.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .version import PDFVersion, ValidationMode


class ValidationConfig(BaseModel):
    """
    Settings for one validation run.

    Example::

        config = ValidationConfig(mode=ValidationMode.RELAXED)
        result = validate_file("report.pdf", config)
    """
    model_config = ConfigDict(frozen=True)

    mode: ValidationMode = Field(
        ValidationMode.STRICT,
        description="Strict or Relaxed rule set",
    )
    version: PDFVersion | None = Field(
        None,
        description="Validate as this version instead of the one the document declares",
    )
    check_page_count: bool = Field(
        True,
        description="Compare each page tree node's /Count with the leaves found beneath it",
    )

    @property
    def relaxed(self) -> bool:
        return self.mode == ValidationMode.RELAXED
