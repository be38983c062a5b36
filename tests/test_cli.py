"""
Tests for ui/cli.py - verbs, flags, exit codes.

The daemon round trip is replaced with a mock; these tests cover what the
CLI sends and how it reports the outcome.
"""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from agentbrowser.core.configs import ClientSettings, get_client_settings, load_raw_config
from agentbrowser.daemon.errors import LaunchTimeoutError, RequestTimeoutError
from agentbrowser.daemon.protocol import Response
from agentbrowser.ui.cli import app


class TestCli(unittest.TestCase):
    """Test cases for the typer application."""

    def setUp(self):
        self.runner = CliRunner()
        self.send = AsyncMock(
            return_value=Response.from_dict({"id": "x", "success": True, "data": {}})
        )
        patches = [
            patch("agentbrowser.ui.cli.send_request", self.send),
            patch("agentbrowser.ui.cli.get_client_settings", return_value=ClientSettings()),
            patch("agentbrowser.ui.cli.configure_logging"),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def _reply(self, payload):
        self.send.return_value = Response.from_dict(payload)

    def _sent(self):
        request = self.send.call_args[0][0]
        return request.to_dict()

    def test_get_url(self):
        self._reply({"success": True, "data": {"url": "https://example.com"}})

        result = self.runner.invoke(app, ["get", "url"])

        self.assertEqual(result.exit_code, 0)
        self.assertIn("https://example.com", result.output)
        self.assertEqual(self._sent()["action"], "url")

    def test_open_json(self):
        payload = {"id": "x", "success": True, "data": {"title": "T", "url": "https://example.com"}}
        self._reply(payload)

        result = self.runner.invoke(app, ["open", "example.com", "--json"])

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.stdout), payload)
        self.assertEqual(self._sent()["url"], "https://example.com")

    def test_aliases(self):
        for argv, action in ((["goto", "a.com"], "navigate"), (["navigate", "a.com"], "navigate"), (["quit"], "close")):
            with self.subTest(argv=argv):
                result = self.runner.invoke(app, argv)
                self.assertEqual(result.exit_code, 0)
                self.assertEqual(self._sent()["action"], action)

    def test_fill_joins_text(self):
        result = self.runner.invoke(app, ["fill", "@e3", "hello", "world"])

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(self._sent()["value"], "hello world")

    def test_wait_milliseconds(self):
        self.runner.invoke(app, ["wait", "500"])
        self.assertEqual(self._sent()["timeout"], 500)

    def test_default_rendering(self):
        result = self.runner.invoke(app, ["click", "@e2"])

        self.assertEqual(result.exit_code, 0)
        self.assertIn("Done", result.output)
        self.assertEqual(self._sent()["selector"], "@e2")

    def test_launch_failure(self):
        self.send.side_effect = LaunchTimeoutError("Failed to start daemon")

        result = self.runner.invoke(app, ["snapshot"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Failed to start daemon", result.output)

    def test_failure_json(self):
        self.send.side_effect = RequestTimeoutError("Timeout")

        result = self.runner.invoke(app, ["snapshot", "--json"])

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(
            json.loads(result.stdout), {"success": False, "error": "Timeout", "kind": "Timeout"}
        )

    def test_unsuccessful_reply_exits_nonzero(self):
        self._reply({"success": False, "error": "Element not found"})

        result = self.runner.invoke(app, ["click", "#missing"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Element not found", result.output)

    def test_invalid_configuration(self):
        with patch("agentbrowser.ui.cli.get_client_settings", side_effect=ValueError("bad timeout")):
            result = self.runner.invoke(app, ["snapshot", "--json"])

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(json.loads(result.stdout)["kind"], "ConfigError")
        self.send.assert_not_called()

    def test_unparseable_config_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / "config.cfg"
            config_file.write_text("timeout = 5\n")

            def settings_from_file():
                return get_client_settings(
                    raw=load_raw_config(config_file),
                    environ={},
                    env_path=Path(temp_dir) / ".env",
                )

            with patch("agentbrowser.ui.cli.get_client_settings", side_effect=settings_from_file):
                result = self.runner.invoke(app, ["get", "url", "--json"])

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(json.loads(result.stdout)["kind"], "ConfigError")
        self.send.assert_not_called()

    def test_non_finite_poll_attempts(self):
        def settings_from_env():
            return get_client_settings(
                raw={}, environ={"AGENT_BROWSER_POLL_ATTEMPTS": "inf"}, env_path=Path("/nonexistent/.env")
            )

        with patch("agentbrowser.ui.cli.get_client_settings", side_effect=settings_from_env):
            result = self.runner.invoke(app, ["snapshot", "--json"])

        self.assertEqual(result.exit_code, 1)
        error = json.loads(result.stdout)
        self.assertEqual(error["kind"], "ConfigError")
        self.assertIn("poll_attempts", error["error"])
        self.send.assert_not_called()

    def test_no_arguments_shows_help(self):
        result = self.runner.invoke(app, [])
        self.assertIn("snapshot", result.output)
        self.send.assert_not_called()


if __name__ == "__main__":
    unittest.main()
