"""Tests for grouping and classifying SHACL validation results."""

import pytest
from rdflib import Graph, Namespace
from rdflib.namespace import SH

from shaclreport.errors import ResultGraphError
from shaclreport.interpreter import NOT_AVAILABLE, interpret, render_path

EX = Namespace("http://example.org/")

PREFIXES = """
@prefix sh: <http://www.w3.org/ns/shacl#> .
@prefix ex: <http://example.org/> .
@prefix schema: <https://schema.org/> .
"""


def _results(body: str) -> Graph:
    return Graph().parse(data=PREFIXES + body, format="turtle")


def test_single_result_without_severity_is_an_error():
    results = _results(
        """
        [] a sh:ValidationReport ; sh:conforms false ; sh:result ex:r1 .
        ex:r1 a sh:ValidationResult ;
            sh:focusNode ex:item1 ;
            sh:sourceShape ex:ItemShape ;
            sh:sourceConstraintComponent sh:MinCountConstraintComponent .
        ex:ItemShape a sh:NodeShape .
        """
    )

    report = interpret(results)

    assert report.warnings == [] and report.infos == []
    assert len(report.errors) == 1
    group = report.errors[0]
    assert group.label == "MinCountConstraintComponent"
    assert group.shape == "http://example.org/ItemShape"
    assert group.severity == "Violation"
    assert len(group.issues) == 1
    issue = group.issues[0]
    assert issue.focus_node == "http://example.org/item1"
    assert issue.component == "MinCountConstraintComponent"
    assert issue.value == NOT_AVAILABLE


def test_empty_result_graph_conforms():
    results = _results("[] a sh:ValidationReport ; sh:conforms true .")

    report = interpret(results)

    assert report.errors == [] and report.warnings == [] and report.infos == []
    assert report.conforms


def test_groups_are_routed_by_declared_severity():
    results = _results(
        """
        ex:r1 sh:focusNode ex:a ; sh:sourceShape ex:WarnShape ;
            sh:sourceConstraintComponent sh:DatatypeConstraintComponent ; sh:value "x" .
        ex:r2 sh:focusNode ex:b ; sh:sourceShape ex:WarnShape ;
            sh:sourceConstraintComponent sh:DatatypeConstraintComponent ; sh:value "y" .
        ex:r3 sh:focusNode ex:a ; sh:sourceShape ex:InfoShape ;
            sh:sourceConstraintComponent sh:MaxCountConstraintComponent .
        ex:WarnShape sh:path schema:name ; sh:severity sh:Warning .
        ex:InfoShape sh:path schema:email ; sh:severity sh:Info .
        """
    )

    report = interpret(results)

    assert report.errors == []
    assert [group.label for group in report.warnings] == ["schema:name DatatypeConstraintComponent"]
    assert [issue.value for issue in report.warnings[0].issues] == ["x", "y"]
    assert [group.label for group in report.infos] == ["schema:email MaxCountConstraintComponent"]
    assert not report.conforms


def test_shapes_are_ordered_by_identifier():
    results = _results(
        """
        ex:r1 sh:focusNode ex:a ; sh:sourceShape ex:ZShape ;
            sh:sourceConstraintComponent sh:ClassConstraintComponent .
        ex:r2 sh:focusNode ex:a ; sh:sourceShape ex:AShape ;
            sh:sourceConstraintComponent sh:ClassConstraintComponent .
        ex:r3 sh:focusNode ex:a ; sh:sourceShape ex:MShape ;
            sh:sourceConstraintComponent sh:ClassConstraintComponent .
        """
    )

    report = interpret(results)

    assert [group.shape.rsplit("/", 1)[1] for group in report.errors] == ["AShape", "MShape", "ZShape"]


def test_unknown_severity_is_fatal():
    results = _results(
        """
        ex:r1 sh:focusNode ex:a ; sh:sourceShape ex:Shape ;
            sh:sourceConstraintComponent sh:ClassConstraintComponent .
        ex:Shape sh:severity ex:Catastrophe .
        """
    )

    with pytest.raises(ResultGraphError, match="Shape"):
        interpret(results)


def test_missing_focus_node_is_fatal():
    results = _results(
        """
        ex:r1 sh:sourceShape ex:Shape ;
            sh:sourceConstraintComponent sh:ClassConstraintComponent .
        """
    )

    with pytest.raises(ResultGraphError, match="r1"):
        interpret(results)


def test_missing_component_is_fatal():
    results = _results("ex:r1 sh:sourceShape ex:Shape ; sh:focusNode ex:a .")

    with pytest.raises(ResultGraphError, match="sourceConstraintComponent"):
        interpret(results)


MIXED = """
ex:r1 sh:focusNode ex:a ; sh:sourceShape ex:Shape ;
    sh:sourceConstraintComponent sh:MinCountConstraintComponent .
ex:r2 sh:focusNode ex:b ; sh:sourceShape ex:Shape ;
    sh:sourceConstraintComponent sh:DatatypeConstraintComponent .
ex:Shape sh:path schema:name .
"""


def test_mixed_components_are_listed_in_label():
    report = interpret(_results(MIXED))

    assert report.errors[0].label == (
        "schema:name MinCountConstraintComponent, DatatypeConstraintComponent"
    )


def test_mixed_components_fail_in_strict_mode():
    with pytest.raises(ResultGraphError, match="mixes constraint components"):
        interpret(_results(MIXED), strict_components=True)


def test_description_includes_node_target_and_its_properties():
    results = _results(
        """
        ex:r1 sh:focusNode ex:a ; sh:sourceShape ex:Shape ;
            sh:sourceConstraintComponent sh:NodeConstraintComponent .
        ex:Shape sh:path schema:address ; sh:node ex:AddressShape .
        ex:AddressShape a sh:NodeShape ; sh:property ex:PostalCodeShape .
        ex:PostalCodeShape sh:path schema:postalCode ; sh:minCount 1 .
        """
    )

    description = interpret(results).errors[0].description

    assert "AddressShape" in description
    assert "PostalCodeShape" in description
    assert "postalCode" in description


def test_render_complex_paths():
    graph = _results(
        """
        ex:Seq sh:path ( schema:address schema:postalCode ) .
        ex:Inv sh:path [ sh:inversePath schema:knows ] .
        ex:Alt sh:path [ sh:alternativePath ( schema:name schema:alternateName ) ] .
        ex:Star sh:path [ sh:zeroOrMorePath schema:parent ] .
        """
    )

    def path_of(name):
        return render_path(graph, graph.value(EX[name], SH.path))

    assert path_of("Seq") == "schema:address/schema:postalCode"
    assert path_of("Inv") == "^schema:knows"
    assert path_of("Alt") == "(schema:name|schema:alternateName)"
    assert path_of("Star") == "schema:parent*"
