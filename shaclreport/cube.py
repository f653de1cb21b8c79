"""Encode statistics as RDF Data Cube observations."""
from __future__ import annotations

import re
from decimal import Decimal
from importlib.resources import files
from typing import Dict, List, Optional, Sequence, Tuple

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.namespace import RDF, RDFS
from rdflib.term import Node

from .namespaces import QB, STAT, bind_known, expand_name, is_absolute
from .statistics import CountedThing, StatisticsResult

CLASSES_DATASET = "classesDataset"
PROPERTIES_DATASET = "propertiesDataset"
VALUES_DATASET = "valuesDataset"

STRUCTURE = STAT.countStructure

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+)$")


def load_skeleton() -> Graph:
    """Return a fresh copy of the packaged cube schema."""

    graph = Graph()
    graph.parse(
        data=files("shaclreport").joinpath("resources/qb.ttl").read_text(encoding="utf-8"),
        format="turtle",
    )
    return bind_cube(graph)


def bind_cube(graph: Graph) -> Graph:
    graph.bind("qb", str(QB))
    graph.bind("stat", str(STAT))
    return bind_known(graph, shacl=False)


def to_value(text: str) -> Node:
    if is_absolute(text):
        return URIRef(text)
    if _INTEGER_RE.match(text):
        return Literal(int(text))
    if _DECIMAL_RE.match(text):
        return Literal(Decimal(text))
    return Literal(text)


def value_term(thing: CountedThing) -> Node:
    """Object of the ``stat:value`` triple for a value histogram entry.

    The counted term is kept when known so plain strings stay strings.
    """

    if isinstance(thing.term, (URIRef, Literal)):
        return thing.term
    return to_value(thing.name)


class CubeEncoder:
    """Turns a :class:`StatisticsResult` into observations on the cube skeleton."""

    def __init__(self, namespaces: Optional[Sequence[Tuple[str, str]]] = None) -> None:
        self.namespaces = namespaces

    def _dataset(self, graph: Graph, name: str) -> BNode:
        node = BNode(name)
        graph.add((node, RDF.type, QB.DataSet))
        graph.add((node, QB.structure, STRUCTURE))
        graph.add((node, RDFS.label, Literal(name)))
        return node

    def _observation(self, graph: Graph, dataset: BNode, name: URIRef, number: int) -> BNode:
        observation = BNode()
        graph.add((observation, RDF.type, QB.Observation))
        graph.add((observation, QB.dataSet, dataset))
        graph.add((observation, STAT.name, name))
        graph.add((observation, STAT.number, Literal(number)))
        return observation

    def add_counts(self, graph: Graph, dataset: str, counted: List[CountedThing]) -> None:
        node = self._dataset(graph, dataset)
        for thing in counted:
            self._observation(graph, node, expand_name(thing.name, self.namespaces), thing.number)

    def add_values(self, graph: Graph, dataset: str, counted: Dict[str, List[CountedThing]]) -> None:
        node = self._dataset(graph, dataset)
        for prop, things in counted.items():
            name = expand_name(prop, self.namespaces)
            for thing in things:
                observation = self._observation(graph, node, name, thing.number)
                graph.add((observation, STAT.value, value_term(thing)))

    def encode(self, stats: StatisticsResult, graph: Optional[Graph] = None) -> Graph:
        if graph is None:
            graph = Graph()
        graph += load_skeleton()
        bind_cube(graph)
        if stats.classes is not None:
            self.add_counts(graph, CLASSES_DATASET, stats.classes)
        if stats.properties is not None:
            self.add_counts(graph, PROPERTIES_DATASET, stats.properties)
        if stats.values is not None:
            self.add_values(graph, VALUES_DATASET, stats.values)
        return graph


def observation_totals(graph: Graph) -> Dict[str, int]:
    """Sum ``stat:number`` of the observations attached to each dataset anchor."""

    totals: Dict[str, int] = {}
    for observation in graph.subjects(RDF.type, QB.Observation):
        dataset = graph.value(observation, QB.dataSet)
        number = graph.value(observation, STAT.number)
        if dataset is None or number is None:
            continue
        key = str(dataset)
        totals[key] = totals.get(key, 0) + int(number.toPython())
    return totals
