"""
Squash-merge a working branch into main and recreate it from main.

    strapi-schema repo merge internal

1. checkout main
2. if the branch exists locally or on the remote:
   squash merge, commit, push main, delete the branch locally and remotely
3. recreate the branch from main and push it
"""

from loguru import logger

from .runner import ProcessRunner


def branch_exists(runner: ProcessRunner, branch: str, remote: str = "origin") -> bool:
    """True when `branch` resolves locally or is listed in the remote's heads."""
    local = runner.run(["git", "rev-parse", "--verify", branch], capture=True)
    if local.returncode == 0:
        return True

    remote_heads = runner.run(["git", "ls-remote", "--heads", remote, branch], capture=True)
    return bool((remote_heads.stdout or "").strip())


def merge_branch(
    branch: str,
    *,
    runner: ProcessRunner | None = None,
    main_branch: str = "main",
    remote: str = "origin",
) -> None:
    """
    Squash-merge `branch` into `main_branch`, then recreate it from `main_branch`.

    Raises:
        ReleaseError: When any git step fails (carries git's exit code)
    """
    runner = runner or ProcessRunner()
    logger.info(f"Branch to merge and recreate: {branch}")

    logger.info(f"1. Checkout {main_branch}")
    runner.check(["git", "checkout", main_branch], f"Unable to checkout {main_branch}")

    if branch_exists(runner, branch, remote):
        logger.info(f"2. Branch {branch} exists, squash merging")
        runner.check(["git", "merge", "--squash", branch], "Squash merge failed")

        logger.info("3. Single commit")
        commit = runner.run(["git", "commit", "-m", f"Squash merge {branch} into {main_branch}"])
        if commit.returncode != 0:
            logger.info("Nothing to commit, the branch was probably already merged")

        logger.info(f"4. Push {main_branch}")
        runner.check(["git", "push", remote, main_branch], f"Push of {main_branch} failed")

        logger.info(f"5. Delete local branch {branch}")
        runner.check(["git", "branch", "-D", branch], f"Unable to delete local branch {branch}")

        logger.info(f"6. Delete remote branch {branch}")
        runner.check(
            ["git", "push", remote, "--delete", branch],
            f"Unable to delete remote branch {branch}",
        )
    else:
        logger.info(f"2. Branch {branch} does not exist, skipping merge")

    logger.info(f"7. Recreate branch {branch} from {main_branch}")
    runner.check(["git", "checkout", "-b", branch, main_branch], f"Unable to create branch {branch}")

    logger.info(f"8. Push new branch {branch}")
    runner.check(["git", "push", remote, branch], f"Push of new branch {branch} failed")

    logger.info("Merge completed")
