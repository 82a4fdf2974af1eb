from __future__ import annotations

from typing import Iterable

from lsprotocol.types import Diagnostic, DiagnosticSeverity

from diagnav.host import DiagnosticProvider
from diagnav.invariants import decision_protocol
from diagnav.model import Scope

SeverityFilter = tuple[DiagnosticSeverity, ...]

ERRORS: SeverityFilter = (DiagnosticSeverity.Error,)
WARNINGS: SeverityFilter = (DiagnosticSeverity.Warning,)


def filter_by_severity(
    diagnostics: Iterable[Diagnostic], severities: SeverityFilter
) -> list[Diagnostic]:
    return [diag for diag in diagnostics if diag.severity in severities]


def scope_diagnostics(
    provider: DiagnosticProvider, scope: Scope, active_uri: str | None
) -> list[Diagnostic]:
    if scope is Scope.FILE:
        if active_uri is None:
            return []
        return list(provider.get_diagnostics(active_uri))
    collected: list[Diagnostic] = []
    for _uri, diagnostics in provider.all_diagnostics():
        collected.extend(diagnostics)
    return collected


@decision_protocol
def active_severities(diagnostics: Iterable[Diagnostic]) -> SeverityFilter:
    """Warnings win over errors: navigate warnings while any exist."""
    if any(diag.severity == DiagnosticSeverity.Warning for diag in diagnostics):
        return WARNINGS
    return ERRORS
