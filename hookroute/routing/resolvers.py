"""Per-category resolvers turning webhook payloads into routing targets.

Every resolver reduces its payload to candidate strings and defers the
package decision to :mod:`hookroute.routing.disambiguation`. Only the commit
comment and pull request resolvers may await the changed-files lookup; its
errors are never caught here.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from .disambiguation import labels_naming, paths_under, scan_packages
from .models import MalformedEventError, Target

if typ.TYPE_CHECKING:
    from hookroute.github.client import ChangedFilesLookup
    from hookroute.packages.registry import PackageRegistry

    from .suppression import CompiledSuppression

Payload = dict[str, typ.Any]

_BARE_SEMVER = re.compile(r"\d+\.\d+\.\d+")


@dc.dataclass(frozen=True, slots=True)
class ResolverContext:
    """Collaborators shared by every resolver for one dispatcher."""

    registry: PackageRegistry
    lookup: ChangedFilesLookup
    suppression: CompiledSuppression


def _mapping(payload: typ.Mapping[str, typ.Any], *path: str) -> dict[str, typ.Any]:
    node: object = payload
    for key in path:
        if not isinstance(node, dict):
            break
        node = node.get(key)
    if not isinstance(node, dict):
        raise MalformedEventError.missing(".".join(path))
    return node


def _string(payload: typ.Mapping[str, typ.Any], *path: str) -> str:
    parent = _mapping(payload, *path[:-1]) if len(path) > 1 else payload
    value = parent.get(path[-1])
    if not isinstance(value, str) or not value:
        raise MalformedEventError.missing(".".join(path))
    return value


def _repository(payload: Payload) -> tuple[str, str]:
    return (
        _string(payload, "repository", "owner", "login"),
        _string(payload, "repository", "name"),
    )


def _label_names(issue_like: typ.Mapping[str, typ.Any]) -> list[str]:
    labels = issue_like.get("labels")
    if not isinstance(labels, list):
        return []
    names: list[str] = []
    for label in labels:
        if isinstance(label, dict):
            name = label.get("name")
            if isinstance(name, str):
                names.append(name)
        elif isinstance(label, str):
            names.append(label)
    return names


def _commit_paths(commit: object) -> typ.Iterator[str]:
    if not isinstance(commit, dict):
        return
    for key in ("added", "removed", "modified"):
        paths = commit.get(key)
        if isinstance(paths, list):
            yield from (path for path in paths if isinstance(path, str))


def _review_comment_paths(payload: Payload) -> list[str]:
    """Return file paths review comments in ``payload`` are anchored to."""
    comments: list[object] = [payload.get("comment")]
    thread = payload.get("thread")
    if isinstance(thread, dict) and isinstance(thread.get("comments"), list):
        comments.extend(thread["comments"])
    return [
        comment["path"]
        for comment in comments
        if isinstance(comment, dict) and isinstance(comment.get("path"), str)
    ]


def release_tag_token(tag: str, *, primary: str) -> str | None:
    """Extract the package token from a release tag.

    ``<scope>/<token>@<version>`` yields ``token``; a bare ``X.Y.Z`` tag
    belongs to the ``primary`` package. Anything else yields ``None``.

    Examples
    --------
    >>> release_tag_token("@discordjs/builders@1.2.3", primary="discord.js")
    'builders'
    >>> release_tag_token("14.0.0", primary="discord.js")
    'discord.js'

    """
    parts = tag.split("/")
    token = parts[1].split("@")[0] if len(parts) > 1 else ""
    if token:
        return token
    if _BARE_SEMVER.fullmatch(tag):
        return primary
    return None


def resolve_release(context: ResolverContext, payload: Payload) -> Target:
    """Route a release by the package named in its tag."""
    registry = context.registry
    tag = _string(payload, "release", "tag_name")
    token = release_tag_token(tag, primary=registry.tag_token_for(registry.primary))
    if token is None:
        return Target.monorepo()
    package = registry.package_for_token(token)
    if package is None:
        return Target.monorepo()
    return Target.for_package(package)


def resolve_push(context: ResolverContext, payload: Payload) -> Target:
    """Route a push by the paths its commits touch."""
    commits = payload.get("commits")
    sources: list[object] = list(commits) if isinstance(commits, list) else []
    sources.append(payload.get("head_commit"))
    paths = [path for commit in sources for path in _commit_paths(commit)]
    registry = context.registry
    return scan_packages(
        registry.list_packages(), paths_under(registry, paths)
    ).to_target()


def resolve_issue(context: ResolverContext, payload: Payload) -> Target:
    """Route an issue or issue comment by its ``packages:*`` labels."""
    issue = _mapping(payload, "issue")
    registry = context.registry
    return scan_packages(
        registry.list_packages(), labels_naming(registry, _label_names(issue))
    ).to_target()


async def resolve_pull_request(context: ResolverContext, payload: Payload) -> Target:
    """Route a pull request event by labels, then review paths, then changed files.

    Labels decide first; a label set naming several packages is already
    ambiguous and ends resolution. Review comments anchored inside exactly
    one package decide next. Only when neither source names a package is the
    pull request's changed-file list fetched.
    """
    pull_request = _mapping(payload, "pull_request")
    registry = context.registry
    packages = registry.list_packages()

    by_label = scan_packages(
        packages, labels_naming(registry, _label_names(pull_request))
    )
    if not by_label.matched_none:
        return by_label.to_target()

    by_comment = scan_packages(
        packages, paths_under(registry, _review_comment_paths(payload))
    )
    if by_comment.package is not None:
        return by_comment.to_target()

    number = pull_request.get("number")
    if not isinstance(number, int) or isinstance(number, bool):
        raise MalformedEventError.missing("pull_request.number")
    owner, repo = _repository(payload)
    paths = await context.lookup.pull_request_files(owner, repo, number)
    return scan_packages(packages, paths_under(registry, paths)).to_target()


async def resolve_commit_comment(context: ResolverContext, payload: Payload) -> Target:
    """Route a commit comment by the paths of the commented commit.

    Comments by suppressed bots are discarded before the commit is fetched.
    """
    comment = _mapping(payload, "comment")
    user = comment.get("user")
    if context.suppression.should_suppress(user if isinstance(user, dict) else None):
        return Target.suppressed()

    owner, repo = _repository(payload)
    ref = _string(payload, "comment", "commit_id")
    paths = await context.lookup.commit_files(owner, repo, ref)
    registry = context.registry
    return scan_packages(
        registry.list_packages(), paths_under(registry, paths)
    ).to_target()
