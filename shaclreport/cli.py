"""Command-line entry point for the SHACL report pipeline."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ValidatorConfig
from .errors import ShaclReportError
from .pipeline import EXIT_FAILURE, ValidationPipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shacl-report",
        description="Validate an RDF file using one or more (Turtle) SHACL files.",
    )
    parser.add_argument("--data", required=True, help="Data file location (URL or local file)")
    parser.add_argument("--format", dest="data_format", help="Data file format (rdflib name or MIME type)")
    parser.add_argument(
        "--shacl", nargs="+", required=True, help="SHACL file(s) location (URL or local file)"
    )
    parser.add_argument(
        "--report",
        nargs="*",
        type=Path,
        default=[],
        help="Write report to these file(s); format is taken from the extension (html, md, ttl)",
    )
    parser.add_argument("--countClasses", action="store_true", help="Count number of classes")
    parser.add_argument(
        "--countProperties", action="store_true", help="Count number of predicates/properties"
    )
    parser.add_argument(
        "--countValues",
        nargs="*",
        default=[],
        help="Count number of values for one or more properties (IRI or prefixed name)",
    )
    parser.add_argument(
        "--inference",
        choices=["none", "rdfs", "owlrl", "both"],
        default="none",
        help="Inference applied by the SHACL engine before validation",
    )
    parser.add_argument(
        "--no-severity-fix",
        action="store_true",
        help="Do not copy sh:severity declarations from the shapes into the results",
    )
    parser.add_argument(
        "--strict-components",
        action="store_true",
        help="Fail when one shape reports results for different constraint components",
    )
    parser.add_argument("--templates", type=Path, help="Directory with report.html / report.md overrides")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> ValidatorConfig:
    return ValidatorConfig(
        data=args.data,
        shapes=list(args.shacl),
        data_format=args.data_format,
        reports=list(args.report),
        count_classes=args.countClasses,
        count_properties=args.countProperties,
        count_values=list(args.countValues),
        inference=args.inference,
        restore_severity=not args.no_severity_fix,
        strict_components=args.strict_components,
        template_dir=args.templates,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        outcome = ValidationPipeline(config_from_args(args)).run()
    except ShaclReportError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE
    return outcome.status


if __name__ == "__main__":
    raise SystemExit(main())
