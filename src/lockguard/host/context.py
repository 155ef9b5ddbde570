"""Explicit review-host capabilities passed into the lockfile check."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from lockguard.types import FileMatch

CommentKind = Literal["message", "markdown", "warn", "fail"]

Reporter = Callable[..., None]

_KIND_ORDER: tuple[CommentKind, ...] = ("fail", "warn", "message", "markdown")

_KIND_TITLES: dict[str, str] = {
    "fail": "Fails",
    "warn": "Warnings",
    "message": "Messages",
    "markdown": "Markdowns",
}


class ChangeSource(Protocol):
    """Host collaborator that knows which files changed and how."""

    def file_match(self, glob: str) -> FileMatch: ...

    def json_diff_for_file(self, path: str) -> dict[str, Any]: ...


@dataclass(frozen=True)
class Comment:
    """One reported review comment."""

    kind: CommentKind
    message: str
    file: str | None = None
    line: int | None = None


@dataclass
class ReviewResults:
    """In-memory sink for the host reporting primitives."""

    comments: list[Comment] = field(default_factory=list)

    def _add(self, kind: CommentKind, message: str, file: str | None, line: int | None) -> None:
        self.comments.append(Comment(kind=kind, message=message, file=file, line=line))

    def message(self, message: str, file: str | None = None, line: int | None = None) -> None:
        self._add("message", message, file, line)

    def markdown(self, message: str, file: str | None = None, line: int | None = None) -> None:
        self._add("markdown", message, file, line)

    def warn(self, message: str, file: str | None = None, line: int | None = None) -> None:
        self._add("warn", message, file, line)

    def fail(self, message: str, file: str | None = None, line: int | None = None) -> None:
        self._add("fail", message, file, line)

    def of_kind(self, kind: CommentKind) -> list[Comment]:
        return [comment for comment in self.comments if comment.kind == kind]

    @property
    def failed(self) -> bool:
        return bool(self.of_kind("fail"))

    def to_dict(self) -> dict[str, Any]:
        """Deterministic payload grouped the way review hosts group results."""
        payload: dict[str, Any] = {"status": "failed" if self.failed else "passed"}
        for kind in _KIND_ORDER:
            payload[f"{kind}s"] = [
                {"message": comment.message, "file": comment.file, "line": comment.line}
                for comment in self.of_kind(kind)
            ]
        return payload

    def render_markdown(self) -> str:
        """Render the collected comments as a single review summary."""
        lines = ["# Lockfile Review", ""]
        if not self.comments:
            lines.append("No comments reported.")
            return "\n".join(lines) + "\n"
        for kind in _KIND_ORDER:
            comments = self.of_kind(kind)
            if not comments:
                continue
            lines.append(f"## {_KIND_TITLES[kind]}")
            lines.append("")
            for comment in comments:
                if comment.file:
                    location = comment.file if comment.line is None else f"{comment.file}:{comment.line}"
                    lines.append(f"`{location}`")
                    lines.append("")
                lines.append(comment.message)
                lines.append("")
        return "\n".join(lines).rstrip("\n") + "\n"


@dataclass(frozen=True)
class ReviewContext:
    """Capabilities the check needs from its host, passed explicitly."""

    file_match: Callable[[str], FileMatch]
    json_diff_for_file: Callable[[str], dict[str, Any]]
    warn: Reporter
    fail: Reporter
    markdown: Reporter
    message: Reporter
    pr_title: str | None = None

    @classmethod
    def from_host(cls, source: ChangeSource, results: ReviewResults, pr_title: str | None = None) -> ReviewContext:
        return cls(
            file_match=source.file_match,
            json_diff_for_file=source.json_diff_for_file,
            warn=results.warn,
            fail=results.fail,
            markdown=results.markdown,
            message=results.message,
            pr_title=pr_title,
        )
