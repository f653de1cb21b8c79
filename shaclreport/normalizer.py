"""Fixups applied to a freshly loaded shapes graph before validation.

Some widely used shapes files (the EU DCAT-AP shapes among them) contain
constructs that trip up SHACL engines:

* ``sh:name`` on node shapes, although its range is property shapes only;
* ``sh:property`` links to blank nodes that carry no triples at all.

Both are removed in place. Severity declarations are also collected so they
can be written back into the result graph for engines that drop them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict

from rdflib import Graph
from rdflib.namespace import RDF, SH
from rdflib.term import Node

logger = logging.getLogger(__name__)


@dataclass
class NormalizationSummary:
    names_removed: int = 0
    properties_removed: int = 0
    shapes_removed: int = 0
    severities: Dict[Node, Node] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.names_removed or self.properties_removed or self.shapes_removed)


def remove_node_names(shapes: Graph) -> int:
    """Drop every ``sh:name`` triple, whatever its subject."""

    names = list(shapes.triples((None, SH.name, None)))
    for triple in names:
        shapes.remove(triple)
    logger.debug("Removed %d sh:name triples", len(names))
    return len(names)


def remove_empty_properties(shapes: Graph) -> tuple[int, int]:
    """Remove vacuous ``sh:property`` links, then node shapes left without any.

    Returns the number of removed links and the number of removed node shapes.
    The second step only runs once every vacuous link is gone.
    """

    empty_links = [
        (subject, predicate, obj)
        for subject, predicate, obj in shapes.triples((None, SH.property, None))
        if next(shapes.triples((obj, None, None)), None) is None
    ]
    for triple in empty_links:
        shapes.remove(triple)

    hollow_shapes = [
        subject
        for subject in set(shapes.subjects(RDF.type, SH.NodeShape))
        if next(shapes.triples((subject, SH.property, None)), None) is None
    ]
    for subject in hollow_shapes:
        shapes.remove((subject, None, None))

    logger.debug(
        "Removed %d empty sh:property links and %d node shapes",
        len(empty_links),
        len(hollow_shapes),
    )
    return len(empty_links), len(hollow_shapes)


def collect_severities(shapes: Graph) -> Dict[Node, Node]:
    return {subject: severity for subject, severity in shapes.subject_objects(SH.severity)}


def restore_severities(results: Graph, severities: Dict[Node, Node]) -> Graph:
    """Overwrite shape severities in ``results`` with the declared ones."""

    for subject, severity in severities.items():
        results.remove((subject, SH.severity, None))
        results.add((subject, SH.severity, severity))
    return results


class ShapesNormalizer:
    """Runs the shapes fixups in their required order."""

    def __init__(self, collect_severity: bool = True) -> None:
        self.collect_severity = collect_severity
        self.last_summary = NormalizationSummary()

    def normalize(self, shapes: Graph) -> NormalizationSummary:
        summary = NormalizationSummary()
        summary.names_removed = remove_node_names(shapes)
        summary.properties_removed, summary.shapes_removed = remove_empty_properties(shapes)
        if self.collect_severity:
            summary.severities = collect_severities(shapes)
        if summary.changed:
            logger.info(
                "Normalized shapes: %d names, %d empty properties, %d node shapes removed",
                summary.names_removed,
                summary.properties_removed,
                summary.shapes_removed,
            )
        self.last_summary = summary
        return summary
