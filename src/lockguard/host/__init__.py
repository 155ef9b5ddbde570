"""Review-host adapters: explicit capability context and a local git source."""

from lockguard.host.context import ChangeSource, Comment, ReviewContext, ReviewResults
from lockguard.host.git import GitChangeSource, JsonDiffError, glob_matches, json_diff

__all__ = [
    "ChangeSource",
    "Comment",
    "GitChangeSource",
    "JsonDiffError",
    "ReviewContext",
    "ReviewResults",
    "glob_matches",
    "json_diff",
]
