"""In-memory triple store holding the shapes and data contexts of one run."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

from rdflib import Dataset, Graph, URIRef
from rdflib.util import guess_format

from .errors import InputError

logger = logging.getLogger(__name__)

SHAPES_GRAPH = URIRef("urn:x-shaclreport:shapes")
DATA_GRAPH = URIRef("urn:x-shaclreport:data")

DEFAULT_DATA_FORMAT = "xml"

Quad = Tuple[object, object, object, Optional[URIRef]]


def resolve_format(location: str, declared: Optional[str] = None) -> str:
    """Pick the rdflib parser for ``location``.

    A declared format (rdflib name or MIME type) wins, then the file suffix,
    then RDF/XML.
    """

    if declared:
        return declared
    name = location.split("?", 1)[0].split("#", 1)[0]
    return guess_format(name) or DEFAULT_DATA_FORMAT


def _source(location: str) -> str:
    path = Path(location)
    if path.exists():
        return str(path.resolve())
    return location


class ValidationStore:
    """A :class:`rdflib.Dataset` split into a shapes and a data context."""

    def __init__(self) -> None:
        self.dataset = Dataset()

    @property
    def shapes(self) -> Graph:
        return self.dataset.graph(SHAPES_GRAPH)

    @property
    def data(self) -> Graph:
        return self.dataset.graph(DATA_GRAPH)

    def clear(self) -> None:
        self.shapes.remove((None, None, None))
        self.data.remove((None, None, None))

    def _parse(self, graph: Graph, location: str, fmt: str) -> None:
        try:
            graph.parse(source=_source(location), format=fmt)
        except Exception as exc:
            raise InputError(f"Could not load {location} as {fmt}: {exc}") from exc

    def load_shapes(self, locations: Sequence[str], normalizer=None) -> Graph:
        """Load every shapes file into the shapes context and normalize it.

        The store is emptied first: one store serves exactly one run.
        """

        if not locations:
            raise InputError("At least one SHACL shapes location is required")
        self.clear()
        shapes = self.shapes
        for location in locations:
            logger.info("Loading shacl from %s", location)
            self._parse(shapes, location, "turtle")
        if normalizer is not None:
            normalizer.normalize(shapes)
        return shapes

    def load_data(self, location: str, fmt: Optional[str] = None) -> Graph:
        data = self.data
        parser = resolve_format(location, fmt)
        logger.info("Loading data from %s (%s)", location, parser)
        self._parse(data, location, parser)
        return data

    def quads(
        self, pattern: Tuple[object, object, object] = (None, None, None)
    ) -> Iterator[Quad]:
        """Yield ``(s, p, o, context identifier)`` over every context."""

        s, p, o = pattern
        for subject, predicate, obj, context in self.dataset.quads((s, p, o, None)):
            yield subject, predicate, obj, getattr(context, "identifier", context)
