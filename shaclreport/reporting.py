"""Reporting utilities for the SHACL report pipeline."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO, Union

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape
from jinja2.exceptions import TemplateNotFound
from rdflib import Graph, Literal
from rdflib.namespace import DCTERMS, RDF, SH, XSD

from .cube import bind_cube
from .errors import InputError
from .interpreter import ValidationReport
from .namespaces import bind_known
from .statistics import StatisticsResult

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TEMPLATE_EXTENSIONS = ("html", "md")


@dataclass
class ReportContext:
    """Everything a backend may need; read-only once built."""

    report: ValidationReport
    results: Graph
    data: str
    shapes: List[str]
    timestamp: datetime = field(default_factory=datetime.now)
    statistics: Optional[StatisticsResult] = None
    cube: Optional[Graph] = None

    def template_vars(self) -> Dict[str, Any]:
        context: Dict[str, Any] = {
            "data": self.data,
            "shacls": list(self.shapes),
            "timestamp": self.timestamp.strftime(TIMESTAMP_FORMAT),
            "conforms": self.report.conforms,
            "errors": self.report.errors,
            "warnings": self.report.warnings,
            "infos": self.report.infos,
        }
        if self.statistics is not None:
            context.update(self.statistics.as_context())
        return context


def template_environment(template_dir: Optional[Path] = None) -> Environment:
    loaders = [PackageLoader("shaclreport", "templates")]
    if template_dir is not None:
        loaders.insert(0, FileSystemLoader(str(template_dir)))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


class TemplateBackend:
    def __init__(self, extension: str, environment: Optional[Environment] = None) -> None:
        self.extension = extension
        self.environment = environment or template_environment()

    def render(self, context: ReportContext) -> bytes:
        name = f"report.{self.extension}"
        try:
            template = self.environment.get_template(name)
        except TemplateNotFound as exc:
            raise InputError(f"No template named {name}") from exc
        return template.render(**context.template_vars()).encode("utf-8")


class TurtleBackend:
    extension = "ttl"

    def render(self, context: ReportContext) -> bytes:
        graph = bind_known(Graph())
        graph += context.results
        for report in set(graph.subjects(RDF.type, SH.ValidationReport)):
            graph.add((report, DCTERMS.issued, Literal(context.timestamp, datatype=XSD.dateTime)))
            graph.add((report, DCTERMS.source, Literal(context.data)))
            for shapes in context.shapes:
                graph.add((report, DCTERMS.conformsTo, Literal(shapes)))
        if context.cube is not None:
            graph += context.cube
            bind_cube(graph)
        return graph.serialize(format="turtle", encoding="utf-8")


Backend = Union[TemplateBackend, TurtleBackend]


def report_extension(destination: Union[str, Path]) -> str:
    text = str(destination)
    if "." in Path(text).name:
        return Path(text).suffix.lstrip(".").lower()
    return text.lower()


def backend_for(destination: Union[str, Path], template_dir: Optional[Path] = None) -> Backend:
    """Select the backend for a report path (or bare extension)."""

    extension = report_extension(destination)
    if extension == TurtleBackend.extension:
        return TurtleBackend()
    if extension in TEMPLATE_EXTENSIONS:
        return TemplateBackend(extension, template_environment(template_dir))
    raise InputError(f"Unsupported report format {extension!r} for {destination}")


def render_reports(
    context: ReportContext,
    destinations: Sequence[Path],
    template_dir: Optional[Path] = None,
) -> Dict[Path, bytes]:
    """Render every destination independently, in parallel."""

    backends = [(destination, backend_for(destination, template_dir)) for destination in destinations]
    if not backends:
        return {}
    with ThreadPoolExecutor(max_workers=len(backends)) as pool:
        futures = [(destination, pool.submit(backend.render, context)) for destination, backend in backends]
        return {destination: future.result() for destination, future in futures}


def write_reports(
    context: ReportContext,
    destinations: Sequence[Path],
    template_dir: Optional[Path] = None,
) -> None:
    # render first so a failing backend leaves no half-written set of files
    rendered = render_reports(context, destinations, template_dir)
    for destination, payload in rendered.items():
        logger.info("Writing report to %s", destination)
        destination.write_bytes(payload)


def write_default(context: ReportContext, stream: TextIO) -> None:
    """Write the raw result graph as Turtle, the default when no report is requested."""

    stream.write(context.results.serialize(format="turtle"))
    stream.flush()
