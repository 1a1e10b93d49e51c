"""Git operations module.

Usage:
    from semtag.git import Repository

    repo = Repository(Path("/path/to/repo"))
    tags = repo.all_tags()
    if tags.is_ok():
        print(tags.unwrap())
"""

from semtag.git.repository import GitError, RawCommit, Repository

__all__ = [
    "GitError",
    "RawCommit",
    "Repository",
]
