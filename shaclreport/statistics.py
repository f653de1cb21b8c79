"""Class, property and value histograms over the data context."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from rdflib import URIRef
from rdflib.namespace import RDF
from rdflib.term import Node

from .errors import UnknownPrefixError
from .namespaces import KNOWN_NAMESPACES, graph_namespaces, is_absolute, prefixed_iri
from .store import SHAPES_GRAPH, ValidationStore

logger = logging.getLogger(__name__)


@dataclass
class CountedThing:
    name: str
    number: int
    # first RDF term seen under ``name``; only set for value histograms
    term: Optional[Node] = field(default=None, compare=False, repr=False)


@dataclass
class StatisticsResult:
    classes: Optional[List[CountedThing]] = None
    properties: Optional[List[CountedThing]] = None
    values: Optional[Dict[str, List[CountedThing]]] = None

    @property
    def empty(self) -> bool:
        return self.classes is None and self.properties is None and self.values is None

    def as_context(self) -> dict:
        context = {}
        if self.classes is not None:
            context["classes"] = self.classes
        if self.properties is not None:
            context["properties"] = self.properties
        if self.values is not None:
            context["values"] = self.values
        return context


def resolve_property(name: str) -> URIRef:
    """Turn a statistics property name into a full IRI.

    Absolute IRIs are used as is; anything else must be a ``prefix:local``
    name whose prefix is one of the well-known ones.
    """

    if is_absolute(name):
        return URIRef(name)
    if ":" in name:
        prefix, local = name.split(":", 1)
        for known_prefix, uri in KNOWN_NAMESPACES:
            if known_prefix == prefix:
                return URIRef(uri + local)
        raise UnknownPrefixError(f"Unknown namespace prefix in property {name!r}")
    raise UnknownPrefixError(f"Property {name!r} is neither an IRI nor a prefixed name")


def _counted(counter: Counter, terms: Optional[Dict[str, Node]] = None) -> List[CountedThing]:
    terms = terms or {}
    things = [CountedThing(name, number, terms.get(name)) for name, number in counter.items()]
    things.sort(key=lambda thing: (-thing.number, thing.name))
    return things


class Statistics:
    """Histograms over every context of the store except the shapes one."""

    def __init__(
        self,
        store: ValidationStore,
        namespaces: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> None:
        self.store = store
        self.namespaces = namespaces if namespaces is not None else graph_namespaces(store.data)

    def _data_triples(self, pattern=(None, None, None)) -> Iterable[tuple]:
        for subject, predicate, obj, context in self.store.quads(pattern):
            if context != SHAPES_GRAPH:
                yield subject, predicate, obj

    def _prefixed(self, iri: URIRef) -> str:
        return prefixed_iri(iri, self.namespaces)

    def count_classes(self) -> List[CountedThing]:
        counter = Counter(
            self._prefixed(obj) for _, _, obj in self._data_triples((None, RDF.type, None))
        )
        classes = _counted(counter)
        logger.info("Classes: %d", len(classes))
        return classes

    def count_properties(self) -> List[CountedThing]:
        counter = Counter(self._prefixed(predicate) for _, predicate, _ in self._data_triples())
        properties = _counted(counter)
        logger.info("Properties: %d", len(properties))
        return properties

    def count_values(self, predicates: Sequence[str]) -> Dict[str, List[CountedThing]]:
        # resolve everything before touching the store
        resolved = [resolve_property(name) for name in predicates]
        values: Dict[str, List[CountedThing]] = {}
        for predicate in resolved:
            counter: Counter = Counter()
            terms: Dict[str, Node] = {}
            for _, _, obj in self._data_triples((None, predicate, None)):
                counter[str(obj)] += 1
                terms.setdefault(str(obj), obj)
            values[self._prefixed(predicate)] = _counted(counter, terms)
        logger.info("Value details: %d", len(values))
        return values

    def collect(
        self,
        classes: bool = False,
        properties: bool = False,
        values: Optional[Sequence[str]] = None,
    ) -> StatisticsResult:
        result = StatisticsResult()
        if values:
            result.values = self.count_values(values)
        if classes:
            result.classes = self.count_classes()
        if properties:
            result.properties = self.count_properties()
        return result
