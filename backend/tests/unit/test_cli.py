"""
Tests for the command-line client and its rendering.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient
from rich.console import Console

from app.cli import cli
from app.client.api_client import ReviewApiClient
from app.client.render import render_item, time_ago
from app.models.review import ReviewStatus
from app.schemas.review import MergedItem


class TestTimeAgo:
    """Test the time_ago function."""

    NOW = datetime(2024, 1, 2, 12, 0, 0, tzinfo=timezone.utc)

    def test_just_now(self) -> None:
        assert time_ago(self.NOW - timedelta(seconds=30), self.NOW) == "just now"

    def test_minutes(self) -> None:
        assert time_ago(self.NOW - timedelta(minutes=5), self.NOW) == "5 minutes ago"

    def test_single_hour(self) -> None:
        assert time_ago(self.NOW - timedelta(hours=1, minutes=10), self.NOW) == "1 hour ago"

    def test_naive_is_utc(self) -> None:
        naive = datetime(2024, 1, 1, 12, 0, 0)
        assert time_ago(naive, self.NOW) == "1 day ago"


class TestRenderItem:
    """Test row rendering."""

    def render(self, renderable) -> str:
        console = Console(width=100, record=True)
        console.print(renderable)
        return console.export_text()

    def test_unreviewed_row(self) -> None:
        item = MergedItem(filename="a.wav", file="api/static/wavs/a.wav", text="hello world")

        output = self.render(render_item(0, item))

        assert "a.wav" in output
        assert "hello world" in output
        assert "ago" not in output

    def test_reviewed_row_shows_reference(self) -> None:
        now = datetime(2024, 1, 2, 12, 0, 0, tzinfo=timezone.utc)
        item = MergedItem(
            filename="a.wav",
            file="api/static/wavs/a.wav",
            text="hello there",
            text_src="hello world",
            status=ReviewStatus.DROP,
            created_at=datetime(2024, 1, 2, 11, 0, 0),
            updated_at=datetime(2024, 1, 2, 11, 0, 0),
        )

        output = self.render(render_item(0, item, now))

        assert "hello there" in output
        assert "ref: hello world" in output
        assert "1 hour ago" in output
        assert "drop" in output


class TestCli:
    """Test CLI commands against the app through a test client."""

    @pytest.fixture
    def runner(self) -> CliRunner:
        return CliRunner()

    @pytest.fixture
    def api_factory(self, client: TestClient):
        """Patch the CLI so every ReviewApiClient talks to the test app."""
        def factory(api_url=None):
            api = ReviewApiClient(base_url="http://testserver", http=client)
            api.close = Mock()
            return api

        with patch("app.cli.ReviewApiClient", side_effect=factory):
            yield

    def test_summary(self, runner: CliRunner, api_factory) -> None:
        result = runner.invoke(cli, ["summary"])

        assert result.exit_code == 0, result.output
        assert "Total" in result.output
        assert "Remaining" in result.output
        assert "3" in result.output

    def test_list(self, runner: CliRunner, api_factory) -> None:
        result = runner.invoke(cli, ["list", "--rows", "2"])

        assert result.exit_code == 0, result.output
        assert "a.wav" in result.output
        assert "b.wav" in result.output

    def test_save_with_text(self, runner: CliRunner, api_factory, client: TestClient) -> None:
        result = runner.invoke(cli, ["save", "b.wav", "--text", "good evening"])

        assert result.exit_code == 0, result.output
        items = {item["filename"]: item for item in client.get("/api/values").json()}
        assert items["b.wav"]["text"] == "good evening"
        assert items["b.wav"]["status"] == "normal"

    def test_drop(self, runner: CliRunner, api_factory, client: TestClient) -> None:
        result = runner.invoke(cli, ["drop", "c.wav"])

        assert result.exit_code == 0, result.output
        summary = client.get("/api/summary").json()
        assert summary["drop"] == 1
        assert summary["remaining"] == 2

    def test_save_unknown_file(self, runner: CliRunner, api_factory) -> None:
        result = runner.invoke(cli, ["save", "missing.wav"])

        assert result.exit_code != 0
        assert "missing.wav" in result.output

    def test_review_session(self, runner: CliRunner, api_factory, client: TestClient) -> None:
        """Test an interactive session: edit and save the first item, drop the second."""
        result = runner.invoke(cli, ["review"], input="e\nhello!\ns\nd\nr\nq\n")

        assert result.exit_code == 0, result.output
        summary = client.get("/api/summary").json()
        assert summary == {"total": 3, "normal": 1, "drop": 1, "remaining": 1}
        items = {item["filename"]: item for item in client.get("/api/values").json()}
        assert items["a.wav"]["text"] == "hello!"
        assert items["b.wav"]["status"] == "drop"
