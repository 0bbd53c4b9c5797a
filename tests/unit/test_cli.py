"""Unit tests for the trellolink CLI."""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from trellolink.cli import main, run
from trellolink.config import RunConfig
from trellolink.sync import ReferenceCountError, SyncResult


@pytest.fixture
def event_file(tmp_path: Path, payload: dict[str, Any]) -> Path:
    """Write the default payload to a file."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload))
    return path


@pytest.fixture(autouse=True)
def isolated_run(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep handlers off captured streams and step outputs off the real runner."""
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    with patch("trellolink.cli.setup_logging"):
        yield


def _invoke(*args: str) -> Any:
    return CliRunner().invoke(
        main,
        ["--trello-key", "k", "--trello-token", "t", *args],
        env={"GITHUB_OUTPUT": None, "INPUT_REPO-TOKEN": None},
    )


@pytest.mark.unit
class TestMain:
    """Tests for the click command."""

    def test_success_exits_zero(self, event_file: Path) -> None:
        with patch("trellolink.cli.run_sync", return_value=SyncResult(card_ids=["abc123"])) as sync:
            result = _invoke("--event-name", "pull_request", "--event-path", str(event_file))

        assert result.exit_code == 0
        sync.assert_called_once()
        event, config = sync.call_args.args[:2]
        assert event.number == 7
        assert config.trello_key == "k"

    def test_options_build_config(self, event_file: Path) -> None:
        with patch("trellolink.cli.run_sync", return_value=SyncResult()) as sync:
            _invoke(
                "--event-name",
                "pull_request",
                "--event-path",
                str(event_file),
                "--add-pr-comment",
                "true",
                "--repo-token",
                "ghs_x",
                "--scan-policy",
                "STRICT",
                "--card-policy",
                "single",
                "--review-label-id",
                "lbl",
            )

        config: RunConfig = sync.call_args.args[1]
        assert config.add_pr_comment is True
        assert config.github_token == "ghs_x"
        assert config.scan_policy.value == "strict"
        assert config.card_policy.value == "single"
        assert config.review_label_id == "lbl"

    def test_sync_error_reported_as_failure(self, event_file: Path) -> None:
        with patch("trellolink.cli.run_sync", side_effect=ReferenceCountError("no card link")):
            result = _invoke("--event-name", "pull_request", "--event-path", str(event_file))

        assert result.exit_code == 1
        assert "::error::no card link" in result.output

    def test_unexpected_error_reported_as_failure(self, event_file: Path) -> None:
        with patch("trellolink.cli.run_sync", side_effect=ValueError("boom")):
            result = _invoke("--event-name", "pull_request", "--event-path", str(event_file))

        assert result.exit_code == 1
        assert "::error::Unexpected error: boom" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_unsupported_event_is_noop(self, event_file: Path) -> None:
        with patch("trellolink.cli.run_sync") as sync:
            result = _invoke("--event-name", "push", "--event-path", str(event_file))

        assert result.exit_code == 0
        sync.assert_not_called()


@pytest.mark.unit
class TestRun:
    """Tests for run()."""

    def test_missing_credentials_fail(self, event_file: Path, capsys: Any) -> None:
        config = RunConfig(trello_key="", trello_token="t")

        assert run(config, "pull_request", event_file) == 1
        assert "::error::Missing required input(s): trello-key" in capsys.readouterr().out

    def test_missing_event_path_fails(self, run_config: RunConfig, capsys: Any) -> None:
        assert run(run_config, "pull_request", None) == 1
        assert "GITHUB_EVENT_PATH" in capsys.readouterr().out

    def test_non_object_payload_fails(
        self, tmp_path: Path, run_config: RunConfig, capsys: Any
    ) -> None:
        path = tmp_path / "event.json"
        path.write_text("[]")

        assert run(run_config, "pull_request", path) == 1
        assert "is not a JSON object" in capsys.readouterr().out

    def test_undecodable_tracker_response_fails(
        self, event_file: Path, run_config: RunConfig, capsys: Any
    ) -> None:
        tracker = MagicMock()
        tracker.__enter__.return_value.get_card_attachments.side_effect = ValueError(
            "Expecting value: line 1 column 1 (char 0)"
        )
        with (
            patch("trellolink.cli.TrelloClient", return_value=tracker),
            patch("trellolink.cli.GitHubCommentsClient", MagicMock()),
        ):
            assert run(run_config, "pull_request", event_file) == 1

        assert "::error::Unexpected error: Expecting value" in capsys.readouterr().out
        tracker.__exit__.assert_called_once()

    def test_skipped_action_makes_no_clients(
        self, tmp_path: Path, payload: dict[str, Any], run_config: RunConfig
    ) -> None:
        payload["action"] = "closed"
        path = tmp_path / "event.json"
        path.write_text(json.dumps(payload))

        with patch("trellolink.cli.TrelloClient") as tracker_cls:
            assert run(run_config, "pull_request", path) == 0

        tracker_cls.assert_not_called()

    def test_clients_scoped_to_pull_request(
        self, event_file: Path, run_config: RunConfig
    ) -> None:
        with (
            patch("trellolink.cli.TrelloClient") as tracker_cls,
            patch("trellolink.cli.GitHubCommentsClient") as host_cls,
            patch("trellolink.cli.run_sync", return_value=SyncResult()),
        ):
            assert run(run_config, "pull_request", event_file) == 0

        tracker_cls.assert_called_once_with(
            "test-key",
            "test-token",
            base_url=run_config.trello_api_url,
            timeout=run_config.timeout,
        )
        host_args = host_cls.call_args
        assert host_args.args == ("acme", "widgets", 7)
        assert host_args.kwargs["token"] == "ghs_test"
        tracker_cls.return_value.__exit__.assert_called_once()
        host_cls.return_value.__exit__.assert_called_once()

    def test_writes_step_outputs(
        self, event_file: Path, run_config: RunConfig, tmp_path: Path
    ) -> None:
        output = tmp_path / "output"
        with (
            patch.dict("os.environ", {"GITHUB_OUTPUT": str(output)}),
            patch("trellolink.cli.TrelloClient", MagicMock()),
            patch("trellolink.cli.GitHubCommentsClient", MagicMock()),
            patch("trellolink.cli.run_sync", return_value=SyncResult(card_ids=["a", "b"])),
        ):
            assert run(run_config, "pull_request", event_file) == 0

        assert "card-ids=a,b\n" in output.read_text()
