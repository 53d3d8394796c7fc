"""Git helpers for resolving and pushing revisions."""

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

import structlog

from .exceptions import GitCommandError

logger = structlog.get_logger()

DEPLOY_REF = "refs/heroku_san/deploy"
TARGET_BRANCH = "master"


class GitHelper:
    """Wraps the `git` CLI for the handful of operations a stage needs."""

    def __init__(self, git_binary: str = "git", cwd: Optional[Path] = None) -> None:
        self.git_binary = git_binary
        self.cwd = cwd

    def tag(self, glob: Optional[str]) -> Optional[str]:
        """Return the last tag matching `glob`, or None."""
        if glob is None:
            return None
        tags = self._run(["tag", "-l", glob]).splitlines()
        return tags[-1] if tags else None

    def rev_parse(self, ref: Optional[str]) -> Optional[str]:
        if ref is None:
            return None
        lines = self._run(["rev-parse", ref]).splitlines()
        return lines[0] if lines else None

    def parsed_tag(self, pattern: Optional[str]) -> Optional[str]:
        """Resolve a tag glob such as `production/*` to a commit sha."""
        return self.rev_parse(self.tag(pattern))

    def remote_revision(self, repo_url: str) -> Optional[str]:
        """Return the sha at the head of the remote's deploy branch, if any."""
        fields = self._run(["ls-remote", "--heads", repo_url, TARGET_BRANCH]).split()
        return fields[0] if fields else None

    def named_rev(self, revision: Optional[str]) -> str:
        """Return `git name-rev` output for a revision, "" when there is none."""
        if not revision:
            return ""
        return self._run(["name-rev", revision]).strip()

    def push(
        self,
        revision: Optional[str],
        repo_url: str,
        flags: Sequence[str] = (),
    ) -> str:
        """Push `revision` (HEAD by default) to the remote's deploy branch.

        The commit goes through a temporary ref so that tags and short shas
        push the same way; the ref is always removed afterwards.
        """
        revision = revision or "HEAD"
        logger.info("git.push.starting", revision=revision, repo=repo_url, flags=list(flags))

        self._run(["update-ref", DEPLOY_REF, f"{revision}^{{commit}}"])
        try:
            output = self._run(
                ["push", repo_url, *flags, f"{DEPLOY_REF}:refs/heads/{TARGET_BRANCH}"]
            )
        finally:
            self._run(["update-ref", "-d", DEPLOY_REF])

        logger.info("git.push.success", revision=revision, repo=repo_url)
        return output

    def _run(self, args: List[str]) -> str:
        command = [self.git_binary] + args
        process = subprocess.run(
            command,
            cwd=str(self.cwd) if self.cwd else None,
            capture_output=True,
            text=True,
            check=False,
        )
        if process.returncode != 0:
            raise GitCommandError(command, process.returncode, process.stderr.strip())
        return process.stdout
