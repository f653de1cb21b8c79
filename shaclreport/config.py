"""Configuration helpers for the SHACL report pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class ValidatorConfig:
    """Runtime configuration for :class:`ValidationPipeline`."""

    data: str
    shapes: List[str]
    data_format: Optional[str] = None
    reports: List[Path] = field(default_factory=list)
    count_classes: bool = False
    count_properties: bool = False
    count_values: List[str] = field(default_factory=list)
    inference: str = "none"
    restore_severity: bool = True
    strict_components: bool = False
    template_dir: Optional[Path] = None

    @property
    def has_statistics(self) -> bool:
        return self.count_classes or self.count_properties or bool(self.count_values)

    def ensure_output_dirs(self) -> None:
        for report in self.reports:
            report.parent.mkdir(parents=True, exist_ok=True)
