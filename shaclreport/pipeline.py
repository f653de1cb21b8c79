"""High-level orchestration of one validation run."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Dict, Optional, TextIO

from rdflib import Graph

from .config import ValidatorConfig
from .cube import CubeEncoder
from .interpreter import ResultInterpreter, ValidationReport
from .reporting import ReportContext, backend_for, write_default, write_reports
from .shacl import ShaclValidator, report_conforms, severity_summary
from .statistics import Statistics, StatisticsResult, resolve_property
from .store import ValidationStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_WARNINGS = 2
EXIT_INFOS = 3
EXIT_FAILURE = -1


def exit_status(report: ValidationReport) -> int:
    if report.errors:
        return EXIT_VIOLATIONS
    if report.warnings:
        return EXIT_WARNINGS
    if report.infos:
        return EXIT_INFOS
    return EXIT_OK


@dataclass
class RunOutcome:
    report: ValidationReport
    results: Graph
    context: ReportContext
    statistics: Optional[StatisticsResult] = None
    cube: Optional[Graph] = None
    summary: Optional[Dict[str, int]] = None
    conforms: Optional[bool] = None

    @property
    def status(self) -> int:
        return exit_status(self.report)


class ValidationPipeline:
    def __init__(self, config: ValidatorConfig) -> None:
        self.config = config
        self.store = ValidationStore()
        self.validator = ShaclValidator(config)
        self.interpreter = ResultInterpreter(strict_components=config.strict_components)

    def _check_inputs(self) -> None:
        # fail on bad report formats and statistics names before any work is done
        for destination in self.config.reports:
            backend_for(destination, self.config.template_dir)
        for name in self.config.count_values:
            resolve_property(name)

    def run(self, stream: Optional[TextIO] = None) -> RunOutcome:
        self._check_inputs()
        self.config.ensure_output_dirs()

        self.validator.load(self.store)
        results = self.validator.validate(self.store)
        report = self.interpreter.interpret(results)

        statistics = None
        cube = None
        if self.config.has_statistics:
            collector = Statistics(self.store)
            statistics = collector.collect(
                classes=self.config.count_classes,
                properties=self.config.count_properties,
                values=self.config.count_values,
            )
            cube = CubeEncoder(collector.namespaces).encode(statistics)

        context = ReportContext(
            report=report,
            results=results,
            data=self.config.data,
            shapes=list(self.config.shapes),
            statistics=statistics,
            cube=cube,
        )
        if self.config.reports:
            write_reports(context, self.config.reports, self.config.template_dir)
        else:
            write_default(context, stream or sys.stdout)

        summary = severity_summary(results)
        logger.info(
            "Results: %d violations, %d warnings, %d infos",
            summary["violations"],
            summary["warnings"],
            summary["infos"],
        )
        outcome = RunOutcome(
            report,
            results,
            context,
            statistics,
            cube,
            summary=summary,
            conforms=report_conforms(results),
        )
        logger.info("Validation finished with status %d", outcome.status)
        return outcome
