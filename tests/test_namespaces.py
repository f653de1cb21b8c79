"""Tests for prefix handling."""

from rdflib import Graph, URIRef

from shaclreport.namespaces import (
    KNOWN_NAMESPACES,
    QB,
    expand_name,
    graph_namespaces,
    local_name,
    prefixed_iri,
)


def test_prefixed_iri_uses_known_namespaces():
    assert prefixed_iri(URIRef("http://www.w3.org/ns/dcat#Dataset")) == "dcat:Dataset"
    assert prefixed_iri(URIRef("https://schema.org/name")) == "schema:name"


def test_prefixed_iri_falls_back_to_full_iri():
    assert prefixed_iri(URIRef("http://example.org/Thing")) == "http://example.org/Thing"
    # the remainder is not a local name
    assert prefixed_iri(URIRef("https://schema.org/a/b")) == "https://schema.org/a/b"


def test_expand_name_round_trips():
    iri = URIRef("http://purl.org/dc/terms/title")

    assert expand_name(prefixed_iri(iri)) == iri
    assert expand_name("unknown:thing") == URIRef("unknown:thing")


def test_graph_namespaces_appends_bound_prefixes():
    graph = Graph()
    graph.bind("ex", "http://example.org/")

    namespaces = graph_namespaces(graph)

    assert namespaces[0][0] == "dcat"
    assert ("ex", "http://example.org/") in namespaces
    assert prefixed_iri(URIRef("http://example.org/Thing"), namespaces) == "ex:Thing"


def test_local_name():
    assert local_name(URIRef("http://www.w3.org/ns/shacl#MinCountConstraintComponent")) == (
        "MinCountConstraintComponent"
    )
    assert local_name(URIRef("http://example.org/a/b")) == "b"


def test_vcard_and_regorg_prefixes():
    assert prefixed_iri(URIRef("http://www.w3.org/2006/vcard/ns#fn")) == "vcard:fn"
    assert prefixed_iri(URIRef("http://www.w3.org/ns/regorg#legalName")) == "rov:legalName"
    assert expand_name("vcard:hasEmail") == URIRef("http://www.w3.org/2006/vcard/ns#hasEmail")


def test_cube_vocabulary_comes_from_rdflib():
    assert str(QB) == "http://purl.org/linked-data/cube#"
    assert [prefix for prefix, _ in KNOWN_NAMESPACES].index("vcard") == 8
