"""
Reset repository history to a single root commit.

    strapi-schema repo reset main

Creates an orphan branch holding the current tree as "first commit",
force-pushes it as `branch`, deletes every other local and remote branch
and every remote tag, then pushes the local tags back.
"""

import re

from loguru import logger

from .runner import ProcessRunner

ORPHAN_BRANCH = "new-root-branch"


def list_local_branches(runner: ProcessRunner) -> list[str]:
    output = runner.output(["git", "branch"], "Failed to list branches")
    branches = []
    for line in output.splitlines():
        name = re.sub(r"^\*\s*", "", line.strip())
        if name and not name.startswith("("):
            branches.append(name)
    return branches


def list_remote_branches(runner: ProcessRunner, remote: str = "origin") -> list[str]:
    output = runner.output(["git", "branch", "-r"], "Failed to list remote branches")
    prefix = f"{remote}/"
    branches = []
    for line in output.splitlines():
        name = line.strip()
        # Skip symbolic refs like "origin/HEAD -> origin/main"
        if not name.startswith(prefix) or "->" in name:
            continue
        branches.append(name[len(prefix):])
    return branches


def list_remote_tags(runner: ProcessRunner, remote: str = "origin") -> list[str]:
    output = runner.output(["git", "ls-remote", "--tags", remote], "Failed to list remote tags")
    tags: list[str] = []
    for line in output.splitlines():
        match = re.search(r"refs/tags/(.+)$", line)
        if not match:
            continue
        tag = match.group(1).removesuffix("^{}")
        if tag not in tags:
            tags.append(tag)
    return tags


def reset_repository(branch: str, *, runner: ProcessRunner | None = None, remote: str = "origin") -> None:
    """
    Replace the repository history with one commit on `branch`.

    Raises:
        ReleaseError: When any git step fails
    """
    runner = runner or ProcessRunner()
    logger.info(f"Resetting repository with new root branch: {branch}")

    runner.check(["git", "checkout", "--orphan", ORPHAN_BRANCH], f"Unable to create {ORPHAN_BRANCH}")
    runner.check(["git", "add", "-A"], "Unable to stage files")
    runner.check(["git", "commit", "-m", "first commit"], "Unable to commit")
    runner.check(["git", "branch", "-M", branch], f"Unable to rename branch to {branch}")
    runner.check(["git", "push", "--force", remote, branch], f"Force push of {branch} failed")

    local_branches = [name for name in list_local_branches(runner) if name != branch]
    if local_branches:
        logger.info(f"Deleting local branches: {', '.join(local_branches)}")
        for name in local_branches:
            runner.check(["git", "branch", "-D", name], f"Unable to delete local branch {name}")

    remote_branches = [name for name in list_remote_branches(runner, remote) if name != branch]
    if remote_branches:
        logger.info(f"Deleting remote branches: {', '.join(remote_branches)}")
        for name in remote_branches:
            runner.check(["git", "push", remote, "--delete", name], f"Unable to delete remote branch {name}")

    remote_tags = list_remote_tags(runner, remote)
    if remote_tags:
        logger.info(f"Deleting remote tags: {', '.join(remote_tags)}")
        for tag in remote_tags:
            runner.check(["git", "push", remote, "--delete", tag], f"Unable to delete remote tag {tag}")

    logger.info(f"Pushing all local tags to {remote}")
    runner.check(["git", "push", "--tags"], "Unable to push tags")

    logger.info("Reset complete")
