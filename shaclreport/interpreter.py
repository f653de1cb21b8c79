"""Turn a raw SHACL result graph into a grouped, severity-classified report."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from rdflib import BNode, Graph, URIRef
from rdflib.collection import Collection
from rdflib.namespace import RDF, SH
from rdflib.term import Node

from .errors import ResultGraphError
from .namespaces import bind_known, local_name, prefixed_iri

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "n/a"

_PATH_SUFFIXES = {
    SH.zeroOrMorePath: "*",
    SH.oneOrMorePath: "+",
    SH.zeroOrOnePath: "?",
}


@dataclass
class ValidationIssue:
    focus_node: str
    component: str
    value: str = NOT_AVAILABLE


@dataclass
class ValidationInfo:
    """All results produced by one source shape."""

    shape: str
    description: str
    label: str
    issues: List[ValidationIssue]
    severity: str


@dataclass
class ValidationReport:
    errors: List[ValidationInfo] = field(default_factory=list)
    warnings: List[ValidationInfo] = field(default_factory=list)
    infos: List[ValidationInfo] = field(default_factory=list)

    @property
    def conforms(self) -> bool:
        return not (self.errors or self.warnings or self.infos)


def _first(graph: Graph, subject: Node, predicate: URIRef) -> Optional[Node]:
    return next(graph.objects(subject, predicate), None)


def render_path(graph: Graph, path: Node) -> str:
    """Render a SHACL property path in SPARQL property-path notation."""

    if isinstance(path, URIRef):
        return prefixed_iri(path)
    if not isinstance(path, BNode):
        return str(path)
    if _first(graph, path, RDF.first) is not None:
        return "/".join(render_path(graph, step) for step in Collection(graph, path))
    inverse = _first(graph, path, SH.inversePath)
    if inverse is not None:
        return "^" + render_path(graph, inverse)
    alternatives = _first(graph, path, SH.alternativePath)
    if alternatives is not None:
        return "(" + "|".join(render_path(graph, alt) for alt in Collection(graph, alternatives)) + ")"
    for predicate, suffix in _PATH_SUFFIXES.items():
        inner = _first(graph, path, predicate)
        if inner is not None:
            return render_path(graph, inner) + suffix
    return str(path)


def describe_shape(results: Graph, shape: Node) -> str:
    """Serialize the shape, plus its ``sh:node`` target and that target's properties."""

    description = bind_known(Graph())
    description += results.cbd(shape)
    target = _first(results, shape, SH.node)
    if target is not None:
        description += results.cbd(target)
        for prop in results.objects(target, SH.property):
            description += results.cbd(prop)
    return description.serialize(format="turtle")


class ResultInterpreter:
    """Group the result nodes of a validation report by source shape."""

    SEVERITIES = {
        SH.Violation: "errors",
        SH.Warning: "warnings",
        SH.Info: "infos",
    }

    def __init__(self, strict_components: bool = False) -> None:
        self.strict_components = strict_components

    def interpret(self, results: Graph) -> ValidationReport:
        report = ValidationReport()
        buckets: Dict[str, List[ValidationInfo]] = {
            "errors": report.errors,
            "warnings": report.warnings,
            "infos": report.infos,
        }
        for shape in sorted(set(results.objects(None, SH.sourceShape)), key=str):
            severity = _first(results, shape, SH.severity) or SH.Violation
            bucket = self.SEVERITIES.get(severity)
            if bucket is None:
                raise ResultGraphError(f"Shape {shape} declares unknown severity {severity}")
            issues = self._issues(results, shape)
            buckets[bucket].append(
                ValidationInfo(
                    shape=str(shape),
                    description=describe_shape(results, shape),
                    label=self._label(results, shape, issues),
                    issues=issues,
                    severity=local_name(severity),
                )
            )

        logger.info("Shapes with errors: %d", len(report.errors))
        logger.info("Shapes with warnings: %d", len(report.warnings))
        logger.info("Shapes with recommendations: %d", len(report.infos))
        return report

    def _issues(self, results: Graph, shape: Node) -> List[ValidationIssue]:
        issues = []
        for result in results.subjects(SH.sourceShape, shape):
            focus = _first(results, result, SH.focusNode)
            if focus is None:
                raise ResultGraphError(f"Result {result} of shape {shape} has no sh:focusNode")
            component = _first(results, result, SH.sourceConstraintComponent)
            if not isinstance(component, URIRef):
                raise ResultGraphError(
                    f"Result {result} of shape {shape} has no sh:sourceConstraintComponent"
                )
            value = _first(results, result, SH.value)
            issues.append(
                ValidationIssue(
                    focus_node=str(focus),
                    component=local_name(component),
                    value=NOT_AVAILABLE if value is None else str(value),
                )
            )
        issues.sort(key=lambda issue: (issue.focus_node, issue.component, issue.value))
        return issues

    def _label(self, results: Graph, shape: Node, issues: List[ValidationIssue]) -> str:
        components = _distinct(issue.component for issue in issues)
        if len(components) > 1:
            if self.strict_components:
                raise ResultGraphError(
                    f"Shape {shape} mixes constraint components: {', '.join(components)}"
                )
            logger.warning("Shape %s mixes constraint components: %s", shape, components)
        component = ", ".join(components)
        path = _first(results, shape, SH.path)
        if path is None:
            return component
        return f"{render_path(results, path)} {component}"


def _distinct(values: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def interpret(results: Graph, *, strict_components: bool = False) -> ValidationReport:
    return ResultInterpreter(strict_components=strict_components).interpret(results)
