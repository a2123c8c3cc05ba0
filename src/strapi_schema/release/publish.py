"""
Version bump and publish.

    strapi-schema repo publish patch
    strapi-schema repo publish prerelease beta

Only runs on the main branch. Local path dependencies
(`name @ file:../name`) are swapped for the published versions listed in
resolve.json while building, then restored. On failure the original
pyproject.toml (version included) is written back. After a successful
upload the bump is committed, tagged vX.Y.Z and pushed.

resolve.json:
    {"strapi-schema-extras": ">=0.4.0", "other-lib": "1.2.0"}
"""

import json
import sys
from pathlib import Path

import tomlkit
from loguru import logger
from packaging.requirements import InvalidRequirement, Requirement
from tomlkit import TOMLDocument

from .runner import ProcessRunner, ReleaseError
from .versioning import BUMP_TYPES, bump_version

DIST_DIR = "dist"


def load_resolve_overrides(path: Path) -> dict[str, str]:
    """Load resolve.json; a missing file means no overrides."""
    if not path.exists():
        logger.warning(f"{path.name} not found, using empty dependency override")
        return {}

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.error(f"Failed to read or parse {path}")
        raise


def _dependencies(doc: TOMLDocument):
    return doc.get("project", {}).get("dependencies", [])


def _local_requirement(spec: str) -> Requirement | None:
    try:
        requirement = Requirement(spec)
    except InvalidRequirement:
        return None
    if requirement.url and requirement.url.startswith("file:"):
        return requirement
    return None


def local_dependency_snapshot(doc: TOMLDocument, overrides: dict[str, str]) -> dict[str, str]:
    """Original requirement strings of the dependencies listed in `overrides`."""
    snapshot = {}
    for spec in _dependencies(doc):
        try:
            name = Requirement(str(spec)).name
        except InvalidRequirement:
            continue
        if name in overrides:
            snapshot[name] = str(spec)
    return snapshot


def patch_dependencies(doc: TOMLDocument, overrides: dict[str, str]) -> bool:
    """Replace local path dependencies with their published versions. Returns True if anything changed."""
    dependencies = _dependencies(doc)
    changed = False
    for index, spec in enumerate(list(dependencies)):
        requirement = _local_requirement(str(spec))
        if requirement is None or requirement.name not in overrides:
            continue
        version = overrides[requirement.name]
        pinned = version if version[:1] in "<>=!~" else f"=={version}"
        dependencies[index] = f"{requirement.name}{pinned}"
        changed = True
        logger.info(f"Patched '{requirement.name}' to '{pinned}'")
    return changed


def restore_local_dependencies(doc: TOMLDocument, snapshot: dict[str, str]) -> None:
    dependencies = _dependencies(doc)
    for index, spec in enumerate(list(dependencies)):
        try:
            name = Requirement(str(spec)).name
        except InvalidRequirement:
            continue
        if name in snapshot:
            dependencies[index] = snapshot[name]


def _built_files(dist: Path, version: str) -> list[str]:
    if not dist.is_dir():
        return []
    return sorted(str(path) for path in dist.iterdir() if f"-{version}" in path.name)


class Publisher:
    """
    Bump, build, upload and tag one release.

    Attributes:
        pyproject_path: Project file whose version is bumped
        resolve_path: Local dependency overrides (resolve.json)
        runner: Process runner for git, build and twine
    """

    def __init__(
        self,
        pyproject_path: Path,
        resolve_path: Path,
        *,
        runner: ProcessRunner | None = None,
        main_branch: str = "main",
        remote: str = "origin",
    ):
        self.pyproject_path = pyproject_path
        self.resolve_path = resolve_path
        self.runner = runner or ProcessRunner()
        self.main_branch = main_branch
        self.remote = remote

    def _read(self) -> TOMLDocument:
        return tomlkit.parse(self.pyproject_path.read_text(encoding="utf-8"))

    def _write(self, doc: TOMLDocument | str) -> None:
        text = doc if isinstance(doc, str) else tomlkit.dumps(doc)
        self.pyproject_path.write_text(text, encoding="utf-8")

    def current_branch(self) -> str:
        return self.runner.output(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"], "Unable to determine current git branch"
        )

    def bump(self, bump: str, preid: str | None = None) -> str:
        doc = self._read()
        current = str(doc["project"]["version"])
        version = bump_version(current, bump, preid)
        doc["project"]["version"] = version
        self._write(doc)
        logger.info(f"Bumped version {current} -> {version}")
        return version

    def build_and_upload(self, version: str) -> None:
        dist = self.pyproject_path.parent / DIST_DIR
        logger.info(f"Building {version}")
        self.runner.check(
            [sys.executable, "-m", "build", "--outdir", str(dist)],
            f"Build failed for {version}",
        )

        files = _built_files(dist, version)
        if not files:
            raise ReleaseError(f"No distribution files for {version} in {dist}")

        logger.info(f"Uploading {len(files)} file(s)")
        self.runner.check([sys.executable, "-m", "twine", "upload", *files], "Upload failed")
        logger.info("Published successfully")

    def commit_version(self, version: str) -> None:
        # Best effort: the package is already published at this point
        for args in (
            ["git", "add", self.pyproject_path.name],
            ["git", "commit", "-m", f"chore: bump version to {version}"],
            ["git", "tag", f"v{version}"],
            ["git", "push"],
            ["git", "push", self.remote, f"v{version}"],
        ):
            result = self.runner.run(args)
            if result.returncode != 0:
                logger.warning(f"'{' '.join(args)}' exited with {result.returncode}")

    def publish(self, bump: str, preid: str | None = None) -> str:
        """
        Run the full release.

        Returns:
            The published version

        Raises:
            ReleaseError: Wrong branch, unknown bump type, or a failed build/upload
        """
        branch = self.current_branch()
        if branch != self.main_branch:
            raise ReleaseError(
                f"Publish allowed only from '{self.main_branch}' branch. You are on '{branch}'."
            )
        if bump not in BUMP_TYPES:
            raise ReleaseError(f"Unknown bump type '{bump}' (use one of: {', '.join(BUMP_TYPES)})")

        original = self.pyproject_path.read_text(encoding="utf-8")
        overrides = load_resolve_overrides(self.resolve_path)

        patched = tomlkit.parse(original)
        snapshot = local_dependency_snapshot(patched, overrides)
        did_patch = patch_dependencies(patched, overrides)

        try:
            if did_patch:
                self._write(patched)
            version = self.bump(bump, preid)
            self.build_and_upload(version)
        except Exception as e:
            logger.error(f"Publish failed: {e}")
            self._write(original)
            logger.info("Restored original pyproject.toml (version included) after error")
            raise ReleaseError(str(e), exit_code=1) from e
        if did_patch:
            doc = self._read()
            restore_local_dependencies(doc, snapshot)
            self._write(doc)
            logger.info("Restored local dependencies in pyproject.toml")

        self.commit_version(version)
        return version
