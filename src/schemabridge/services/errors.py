"""Shared error taxonomy and Problem Details helpers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4


def generate_correlation_id() -> str:
    """
    Return a new correlation identifier for tracing errors.

    Returns
    -------
    str
        UUID4 correlation identifier.
    """
    return str(uuid4())


@dataclass(frozen=True)
class ProblemDetail:
    """
    Structured description of a conversion, loading or CLI failure.

    ``code`` is the stable machine-readable key (``conversion.unknown_type``,
    ``loader.invalid_yaml``, ``cli.failure``); ``extras`` carries the
    offending token, class or path.
    """

    type: str
    title: str
    detail: str
    instance: str = field(default_factory=generate_correlation_id)
    code: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the payload logged by :func:`log_problem`; empty extras are omitted."""
        payload: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
            "instance": self.instance,
        }
        if self.code is not None:
            payload["code"] = self.code
        if self.extras:
            payload["extras"] = self.extras
        return payload


def problem(
    code: str,
    title: str,
    detail: str,
    *,
    instance: str | None = None,
    type_uri: str | None = None,
    extras: dict[str, Any] | None = None,
) -> ProblemDetail:
    """
    Create a ProblemDetail keyed by ``code``.

    Parameters
    ----------
    code
        Stable problem code, e.g. ``conversion.unknown_type``.
    title
        Short summary.
    detail
        Message naming the offending class, column, token or file.
    instance
        Correlation identifier tying the log line to one run; a UUID4 by default.
    type_uri
        Problem type URI; derived from ``code`` by default.
    extras
        Offending values (token, class name, path).

    Returns
    -------
    ProblemDetail
        Structured problem payload.
    """
    resolved_instance = instance or generate_correlation_id()
    resolved_type = type_uri or f"https://problems.schemabridge.dev/{code}"
    return ProblemDetail(
        type=resolved_type,
        title=title,
        detail=detail,
        instance=resolved_instance,
        code=code,
        extras=extras or {},
    )


def log_problem(logger: logging.Logger | logging.LoggerAdapter, detail: ProblemDetail) -> None:
    """Emit a Problem Detail as a structured error log."""
    logger.error(json.dumps(detail.to_dict(), default=str))


class ProblemError(Exception):
    """Base exception carrying a ProblemDetail payload."""

    def __init__(self, detail: ProblemDetail) -> None:
        super().__init__(detail.detail)
        self.problem_detail = detail


class ConversionError(ProblemError):
    """A class document could not be converted into mapping metadata."""

    def __init__(self, detail: ProblemDetail) -> None:
        super().__init__(detail)


class UnknownTypeError(ConversionError):
    """
    Raised when a column type is not known to the target type registry.

    Parameters
    ----------
    token
        Offending type token, lower-cased and after legacy alias substitution.
    """

    def __init__(self, token: str) -> None:
        super().__init__(
            problem(
                code="conversion.unknown_type",
                title="Unknown column type",
                detail=f"Could not map legacy type '{token}' to a known target type",
                extras={"token": token},
            )
        )
        self.token = token


class DuplicateMappingError(ConversionError):
    """Raised when a field or association name is mapped twice on one class."""

    def __init__(self, class_name: str, name: str, *, kind: str) -> None:
        super().__init__(
            problem(
                code="conversion.duplicate_mapping",
                title="Duplicate mapping",
                detail=f"{kind.capitalize()} '{name}' is already mapped on class '{class_name}'",
                extras={"class_name": class_name, "name": name, "kind": kind},
            )
        )
        self.class_name = class_name
        self.name = name


class SchemaLoadError(ProblemError):
    """A legacy schema file could not be read or parsed."""

    def __init__(self, detail: ProblemDetail) -> None:
        super().__init__(detail)
