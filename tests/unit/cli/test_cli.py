"""
Tests for the strapi-schema command line interface.
"""

import json

import pytest
from click.testing import CliRunner

from strapi_schema.cli.main import cli

API = "http://strapi.test/api"


@pytest.fixture
def cli_runner():
    return CliRunner()


def entries(count: int) -> list[dict]:
    return [{"id": index, "title": f"Article {index}"} for index in range(1, count + 1)]


class TestFetch:
    def test_collection_first_page(self, cli_runner, strapi):
        """fetch prints page 1 of a collection as JSON."""
        strapi.route("GET", "/api/articles", handler=strapi.paged(entries(3), page_size=2))

        result = cli_runner.invoke(
            cli,
            ["fetch", "articles", "--url", API, "--token", "t", "--page-size", "2"],
            obj={"http_client": strapi.client()},
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert [entry["id"] for entry in payload["data"]] == [1, 2]
        assert strapi.requests[0].headers["authorization"] == "Bearer t"

    def test_collection_all_pages(self, cli_runner, strapi):
        """--all walks every page."""
        strapi.route("GET", "/api/articles", handler=strapi.paged(entries(3), page_size=2))

        result = cli_runner.invoke(
            cli,
            ["fetch", "articles", "--all", "--page-size", "2", "--url", API],
            obj={"http_client": strapi.client()},
        )

        assert result.exit_code == 0, result.output
        assert [entry["id"] for entry in json.loads(result.stdout)["data"]] == [1, 2, 3]
        assert len(strapi.requests) == 2

    def test_single_with_populate(self, cli_runner, strapi):
        """--single fetches one entity; --populate is sent as bracket params."""
        strapi.route("GET", "/api/homepage", body={"data": {"id": 1}, "meta": {}})

        result = cli_runner.invoke(
            cli,
            ["fetch", "homepage", "--single", "--populate", '{"cover": true}', "--url", API],
            obj={"http_client": strapi.client()},
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"data": {"id": 1}, "meta": {}}
        assert strapi.requests[0].url.params["populate[cover]"] == "true"

    def test_http_error_aborts(self, cli_runner, strapi):
        """API errors print the status and exit non-zero."""
        strapi.route("GET", "/api/articles", status=403, body={"data": None})

        result = cli_runner.invoke(
            cli, ["fetch", "articles", "--url", API], obj={"http_client": strapi.client()}
        )

        assert result.exit_code == 1
        assert "403 Forbidden" in result.stderr

    def test_invalid_populate(self, cli_runner):
        """--populate must be JSON."""
        result = cli_runner.invoke(cli, ["fetch", "articles", "--populate", "{cover"], obj={})
        assert result.exit_code == 2

    def test_single_rejects_pagination(self, cli_runner):
        """--single cannot be combined with pagination options."""
        result = cli_runner.invoke(cli, ["fetch", "homepage", "--single", "--all"], obj={})
        assert result.exit_code == 2


class TestToken:
    def test_prints_token(self, cli_runner, strapi):
        """token logs in and prints the JWT."""
        strapi.route("POST", "/api/auth/local", body={"token": "jwt-abc"})

        result = cli_runner.invoke(
            cli,
            ["token", "--identifier", "editor@example.com", "--password", "pw", "--url", API],
            obj={"http_client": strapi.client()},
        )

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "jwt-abc"

    def test_rejected_login(self, cli_runner, strapi):
        """A rejected login aborts."""
        strapi.route("POST", "/api/auth/local", status=400, body={})

        result = cli_runner.invoke(
            cli,
            ["token", "-i", "x", "-p", "y", "--url", API],
            obj={"http_client": strapi.client()},
        )

        assert result.exit_code == 1
        assert "400 Bad Request" in result.stderr


class TestRepo:
    def test_merge(self, cli_runner, runner):
        """repo merge runs the squash-merge workflow."""
        result = cli_runner.invoke(cli, ["repo", "merge", "internal"], obj={"runner": runner})

        assert result.exit_code == 0, result.output
        assert ["merge", "--squash", "internal"] in runner.git_calls()
        assert runner.git_calls()[-1] == ["push", "origin", "internal"]

    def test_merge_failure_exit_code(self, cli_runner, runner):
        """A failing git step becomes the process exit code."""
        runner.script("git", "checkout", returncode=128)

        result = cli_runner.invoke(cli, ["repo", "merge", "internal"], obj={"runner": runner})

        assert result.exit_code == 128
        assert "Unable to checkout main" in result.stderr

    def test_merge_requires_branch(self, cli_runner, runner):
        """The branch argument is mandatory."""
        result = cli_runner.invoke(cli, ["repo", "merge"], obj={"runner": runner})
        assert result.exit_code == 2
        assert runner.calls == []

    def test_reset_confirmation(self, cli_runner, runner):
        """repo reset asks for confirmation first."""
        result = cli_runner.invoke(cli, ["repo", "reset", "main"], obj={"runner": runner}, input="n\n")

        assert result.exit_code == 1
        assert runner.calls == []

    def test_reset(self, cli_runner, runner):
        """repo reset --yes rewrites history."""
        result = cli_runner.invoke(cli, ["repo", "reset", "main", "--yes"], obj={"runner": runner})

        assert result.exit_code == 0, result.output
        assert runner.git_calls()[0] == ["checkout", "--orphan", "new-root-branch"]
        assert runner.git_calls()[-1] == ["push", "--tags"]

    def test_publish_wrong_branch(self, cli_runner, runner, tmp_path, monkeypatch):
        """repo publish refuses to run outside the main branch."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\nversion = "0.1.0"\n', encoding="utf-8")
        runner.script("git", "rev-parse", "--abbrev-ref", "HEAD", stdout="feature\n")

        result = cli_runner.invoke(cli, ["repo", "publish", "patch"], obj={"runner": runner})

        assert result.exit_code == 1
        assert "Publish allowed only from 'main' branch" in result.stderr

    def test_publish_rejects_unknown_bump(self, cli_runner, runner):
        """Bump types are validated by the command line."""
        result = cli_runner.invoke(cli, ["repo", "publish", "huge"], obj={"runner": runner})
        assert result.exit_code == 2
        assert runner.calls == []
