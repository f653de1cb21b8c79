"""SHACL validation helpers."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from pyshacl import validate
from pyshacl.errors import (
    ConstraintLoadError,
    ReportableRuntimeError,
    ShapeLoadError,
    ValidationFailure,
)
from rdflib import BNode, Graph, Literal
from rdflib.namespace import RDF, SH
from rdflib.term import Node

from .config import ValidatorConfig
from .errors import EngineError
from .namespaces import bind_known
from .normalizer import ShapesNormalizer, restore_severities
from .store import ValidationStore

logger = logging.getLogger(__name__)


class ShaclValidator:
    """Validate the data context of a :class:`ValidationStore` against its shapes."""

    def __init__(self, config: ValidatorConfig) -> None:
        self.config = config
        self.normalizer = ShapesNormalizer(collect_severity=config.restore_severity)

    def load(self, store: ValidationStore) -> None:
        store.load_shapes(self.config.shapes, normalizer=self.normalizer)
        store.load_data(self.config.data, self.config.data_format)

    def validate(self, store: ValidationStore) -> Graph:
        """Run the engine and return its (enriched) result graph.

        Non-conformance is an ordinary outcome; only engine failures raise.
        """

        shapes = store.shapes
        try:
            conforms, results, _ = validate(
                store.data,
                shacl_graph=shapes,
                inference=self.config.inference,
                abort_on_first=False,
                meta_shacl=False,
                advanced=True,
                debug=False,
            )
        except (ShapeLoadError, ConstraintLoadError, ReportableRuntimeError, ValidationFailure) as exc:
            raise EngineError(f"SHACL engine failed: {getattr(exc, 'message', exc)}") from exc

        if not isinstance(results, Graph):
            results = Graph().parse(data=results, format="turtle")
        if next(results.subjects(RDF.type, SH.ValidationReport), None) is None:
            report = BNode()
            results.add((report, RDF.type, SH.ValidationReport))
            results.add((report, SH.conforms, Literal(bool(conforms))))

        bind_known(results)
        embed_shapes(results, shapes)
        if self.config.restore_severity:
            restore_severities(results, self.normalizer.last_summary.severities)
        logger.info("Data conforms: %s", bool(conforms))
        return results


def embed_shapes(results: Graph, shapes: Graph) -> Graph:
    """Copy the description of every violated shape into ``results``.

    Besides the shape itself this includes its ``sh:node`` target and the
    property shapes of that target.
    """

    for shape in set(results.objects(None, SH.sourceShape)):
        results += shapes.cbd(shape)
        for target in shapes.objects(shape, SH.node):
            results += shapes.cbd(target)
            for prop in shapes.objects(target, SH.property):
                results += shapes.cbd(prop)
    return results


def count_issues(results: Graph, level: Node) -> int:
    return sum(1 for _ in results.subjects(SH.resultSeverity, level))


def count_violations(results: Graph) -> int:
    return count_issues(results, SH.Violation)


def count_warnings(results: Graph) -> int:
    return count_issues(results, SH.Warning)


def count_infos(results: Graph) -> int:
    return count_issues(results, SH.Info)


def severity_summary(results: Graph) -> Dict[str, int]:
    """Aggregate result nodes into a compact severity summary."""

    return {
        "violations": count_violations(results),
        "warnings": count_warnings(results),
        "infos": count_infos(results),
    }


def report_conforms(results: Graph) -> Optional[bool]:
    value = next(results.objects(None, SH.conforms), None)
    return None if value is None else bool(value.toPython())
