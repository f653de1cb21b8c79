"""SHACL validation reports: grouped results, statistics and data cubes."""

from .config import ValidatorConfig
from .cube import CubeEncoder
from .interpreter import ResultInterpreter, ValidationReport, interpret
from .normalizer import ShapesNormalizer
from .pipeline import ValidationPipeline, exit_status
from .statistics import CountedThing, Statistics, StatisticsResult
from .store import ValidationStore

__all__ = [
    "CountedThing",
    "CubeEncoder",
    "ResultInterpreter",
    "ShapesNormalizer",
    "Statistics",
    "StatisticsResult",
    "ValidationPipeline",
    "ValidationReport",
    "ValidatorConfig",
    "ValidationStore",
    "exit_status",
    "interpret",
]
