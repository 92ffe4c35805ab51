"""Routing decisions and the event kinds that are classified."""

from __future__ import annotations

import dataclasses as dc
import enum

from hookroute.packages.registry import PackageId


class EventCategory(enum.StrEnum):
    """GitHub webhook events that are classified before forwarding.

    Values are the ``X-GitHub-Event`` header names. Any other event kind is
    forwarded to the monorepo channel without classification.
    """

    COMMIT_COMMENT = "commit_comment"
    ISSUES = "issues"
    ISSUE_COMMENT = "issue_comment"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    PULL_REQUEST_REVIEW_THREAD = "pull_request_review_thread"
    PUSH = "push"
    RELEASE = "release"

    @classmethod
    def parse(cls, event_name: str | None) -> EventCategory | None:
        """Return the category for ``event_name``, or ``None`` when unchecked."""
        if not event_name:
            return None
        try:
            return cls(event_name)
        except ValueError:
            return None


class TargetKind(enum.StrEnum):
    """Kinds of routing decision."""

    PACKAGE = "package"
    MONOREPO = "monorepo"
    SUPPRESSED = "suppressed"


@dc.dataclass(frozen=True, slots=True)
class Target:
    """Routing decision for one event.

    Exactly one of a specific package, the monorepo catch-all, or suppression.
    Build instances through :meth:`for_package`, :meth:`monorepo` and
    :meth:`suppressed`.
    """

    kind: TargetKind
    package: PackageId | None = None

    def __post_init__(self) -> None:
        """Reject packages on non-package targets and vice versa."""
        if (self.kind is TargetKind.PACKAGE) != (self.package is not None):
            msg = f"{self.kind} target cannot carry package {self.package!r}"
            raise ValueError(msg)

    @classmethod
    def for_package(cls, package: PackageId) -> Target:
        """Return a target routing to ``package``."""
        return cls(TargetKind.PACKAGE, package)

    @classmethod
    def monorepo(cls) -> Target:
        """Return the ambiguous or cross-cutting target."""
        return cls(TargetKind.MONOREPO)

    @classmethod
    def suppressed(cls) -> Target:
        """Return the target for events that are discarded."""
        return cls(TargetKind.SUPPRESSED)

    def __str__(self) -> str:
        """Render as ``package:<name>``, ``monorepo`` or ``suppressed``."""
        if self.kind is TargetKind.PACKAGE:
            return f"package:{self.package}"
        return str(self.kind)


class MalformedEventError(ValueError):
    """Raised when a webhook payload lacks a field its resolver needs."""

    def __init__(self, field: str, message: str) -> None:
        """Record the payload field that failed validation."""
        self.field = field
        super().__init__(message)

    @classmethod
    def missing(cls, field: str) -> MalformedEventError:
        """Return an error for an absent or mistyped payload field."""
        return cls(field, f"webhook payload missing expected field: {field}")
