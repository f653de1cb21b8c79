"""Exception hierarchy for the SHACL report pipeline."""
from __future__ import annotations


class ShaclReportError(Exception):
    """Base class for every failure that aborts a validation run."""


class InputError(ShaclReportError, OSError):
    """A data or shapes location could not be read or parsed."""


class EngineError(ShaclReportError, RuntimeError):
    """The SHACL engine failed for a reason other than non-conformance."""


class ResultGraphError(ShaclReportError, ValueError):
    """The validation result graph is structurally broken."""


class UnknownPrefixError(ShaclReportError, ValueError):
    """A statistics property name does not match any known namespace."""
