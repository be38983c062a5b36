"""
Tests for ui/output.py - rendering replies and failures.
"""

import io
import json
import unittest

from rich.console import Console

from agentbrowser.daemon.protocol import Response
from agentbrowser.ui.output import render_data, render_error, render_response


def _console() -> Console:
    return Console(
        file=io.StringIO(),
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
        color_system=None,
    )


def _text(console: Console) -> str:
    return console.file.getvalue()


class TestRenderData(unittest.TestCase):
    """Test cases for presence-based rendering of reply data."""

    def _render(self, data) -> str:
        out = _console()
        render_data(data, out)
        return _text(out)

    def test_title_and_url(self):
        text = self._render({"title": "Example", "url": "https://example.com"})
        self.assertEqual(text, "✓ Example\n  https://example.com\n")

    def test_snapshot(self):
        self.assertEqual(self._render({"snapshot": "- button [ref=e1]"}), "- button [ref=e1]\n")

    def test_text_even_when_empty(self):
        self.assertEqual(self._render({"text": ""}), "\n")

    def test_url_alone(self):
        self.assertEqual(self._render({"url": "https://example.com"}), "https://example.com\n")

    def test_title_alone(self):
        self.assertEqual(self._render({"title": "Example"}), "Example\n")

    def test_result_object_is_pretty_json(self):
        text = self._render({"result": {"a": 1}})
        self.assertEqual(json.loads(text), {"a": 1})
        self.assertIn("\n  ", text)

    def test_result_scalar(self):
        self.assertEqual(self._render({"result": 42}), "42\n")

    def test_result_null(self):
        self.assertEqual(self._render({"result": None}), "null\n")

    def test_closed(self):
        self.assertEqual(self._render({"closed": True}), "✓ Browser closed\n")

    def test_fallback_done(self):
        for data in (None, {}, {"other": 1}, "string"):
            with self.subTest(data=data):
                self.assertEqual(self._render(data), "✓ Done\n")

    def test_long_lines_are_not_wrapped(self):
        line = "x" * 500
        self.assertEqual(self._render({"text": line}), line + "\n")

    def test_control_characters_are_written_verbatim(self):
        self.assertEqual(self._render({"text": "a\tb\r\nc"}), "a\tb\r\nc\n")
        self.assertEqual(self._render({"snapshot": "- row\tcell"}), "- row\tcell\n")


class TestRenderResponse(unittest.TestCase):
    """Test cases for render_response and render_error."""

    def test_json_passthrough(self):
        out, err = _console(), _console()
        payload = {"id": "abc", "success": True, "data": {"url": "u"}}

        code = render_response(Response.from_dict(payload), json_output=True, out=out, err=err)

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(_text(out)), payload)
        self.assertEqual(_text(err), "")

    def test_unsuccessful_reply_human(self):
        out, err = _console(), _console()
        response = Response.from_dict({"success": False, "error": "No element"})

        code = render_response(response, out=out, err=err)

        self.assertEqual(code, 1)
        self.assertEqual(_text(out), "")
        self.assertEqual(_text(err), "✗ Error: No element\n")

    def test_unsuccessful_reply_json(self):
        out = _console()
        response = Response.from_dict({"success": False, "error": "No element"})
        self.assertEqual(render_response(response, json_output=True, out=out), 1)

    def test_error_json_object(self):
        out = _console()
        render_error("Timeout", kind="Timeout", json_output=True, out=out)
        self.assertEqual(
            json.loads(_text(out)), {"success": False, "error": "Timeout", "kind": "Timeout"}
        )

    def test_json_line_is_not_reformatted(self):
        out = _console()
        payload = {"success": True, "data": {"text": "a\tb " + "y" * 300}}

        render_response(Response.from_dict(payload), json_output=True, out=out)

        self.assertEqual(_text(out), json.dumps(payload) + "\n")


if __name__ == "__main__":
    unittest.main()
