"""Namespace helpers used across the report pipeline."""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from rdflib import Graph, Namespace, URIRef
from rdflib.namespace import DCAT, DCTERMS, FOAF, ORG, QB, RDF, RDFS, SDO, SH, SKOS

ROV = Namespace("http://www.w3.org/ns/regorg#")
VCARD = Namespace("http://www.w3.org/2006/vcard/ns#")
STAT = Namespace("https://w3id.org/shaclreport/stats#")

# Order matters: bare names are resolved against the first namespace that fits.
KNOWN_NAMESPACES: List[Tuple[str, str]] = [
    ("dcat", str(DCAT)),
    ("dcterms", str(DCTERMS)),
    ("foaf", str(FOAF)),
    ("org", str(ORG)),
    ("rdf", str(RDF)),
    ("rdfs", str(RDFS)),
    ("rov", str(ROV)),
    ("skos", str(SKOS)),
    ("vcard", str(VCARD)),
    ("schema", str(SDO)),
]

_SCHEMES = ("http://", "https://", "urn:")


def is_absolute(name: str) -> bool:
    return name.startswith(_SCHEMES)


def bind_known(graph: Graph, *, shacl: bool = True) -> Graph:
    """Bind the well-known prefixes (and ``sh:``) on ``graph`` for display."""

    for prefix, uri in KNOWN_NAMESPACES:
        graph.bind(prefix, uri, override=True, replace=True)
    if shacl:
        graph.bind("sh", str(SH), override=True, replace=True)
    return graph


def graph_namespaces(graph: Graph) -> List[Tuple[str, str]]:
    """Return the known namespaces followed by the prefixes bound on ``graph``."""

    namespaces = list(KNOWN_NAMESPACES)
    seen = {prefix for prefix, _ in namespaces}
    for prefix, uri in graph.namespaces():
        if not prefix or prefix in seen:
            continue
        seen.add(prefix)
        namespaces.append((prefix, str(uri)))
    return namespaces


def local_name(term: URIRef) -> str:
    text = str(term)
    for separator in ("#", "/", ":"):
        if separator in text:
            text = text.rsplit(separator, 1)[1]
            break
    return text


def prefixed_iri(
    iri: URIRef, namespaces: Optional[Iterable[Tuple[str, str]]] = None
) -> str:
    """Return ``prefix:local`` for ``iri``, or the full IRI if no prefix fits.

    A namespace only fits when the remainder is a plain local name, i.e. the
    IRI's own namespace part is exactly the prefix's namespace.
    """

    text = str(iri)
    for prefix, uri in namespaces if namespaces is not None else KNOWN_NAMESPACES:
        if not text.startswith(uri):
            continue
        local = text[len(uri):]
        if local and not any(ch in local for ch in "/#"):
            return f"{prefix}:{local}"
    return text


def expand_name(
    name: str, namespaces: Optional[Iterable[Tuple[str, str]]] = None
) -> URIRef:
    """Inverse of :func:`prefixed_iri`; unknown prefixes are kept verbatim."""

    if is_absolute(name) or ":" not in name:
        return URIRef(name)
    prefix, local = name.split(":", 1)
    for known_prefix, uri in namespaces if namespaces is not None else KNOWN_NAMESPACES:
        if known_prefix == prefix:
            return URIRef(uri + local)
    return URIRef(name)


__all__ = [
    "KNOWN_NAMESPACES",
    "QB",
    "ROV",
    "STAT",
    "VCARD",
    "bind_known",
    "expand_name",
    "graph_namespaces",
    "is_absolute",
    "local_name",
    "prefixed_iri",
]
