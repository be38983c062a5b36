"""
Terminal rendering of daemon replies and failures.

Two modes: --json passes the reply through as one JSON line on stdout,
human mode picks a rendering from whichever field of ``data`` is present.
"""

import json
from typing import Any, Optional

from rich.console import Console
from rich.text import Text

from agentbrowser.daemon.protocol import Response

# Plain consoles: no markup, no auto-highlighting, no line wrapping of output
console = Console(markup=False, highlight=False, emoji=False, soft_wrap=True)
err_console = Console(
    stderr=True, markup=False, highlight=False, emoji=False, soft_wrap=True
)

CHECK = Text("✓", style="green")


def _check_line(message: Any) -> Text:
    return Text.assemble(CHECK, " ", str(message))


def _write(out: Console, text: str) -> None:
    """Write payload text verbatim; rich would expand tabs and drop control characters."""
    out.file.write(text + "\n")
    out.file.flush()


def render_json(payload: Any, out: Optional[Console] = None) -> None:
    _write(out or console, json.dumps(payload))


def render_data(data: Any, out: Optional[Console] = None) -> None:
    """
    Print the human rendering of a successful reply's data.

    The first matching field wins, in this order: title with url,
    snapshot, text, url, title, result, closed.
    """
    out = out or console
    if not isinstance(data, dict):
        data = {}

    if data.get("url") and data.get("title"):
        out.print(Text.assemble(CHECK, " ", Text(str(data["title"]), style="bold")))
        out.print(Text(f"  {data['url']}", style="dim"))
    elif data.get("snapshot"):
        _write(out, str(data["snapshot"]))
    elif "text" in data:
        text = data["text"]
        _write(out, "" if text is None else str(text))
    elif data.get("url"):
        _write(out, str(data["url"]))
    elif data.get("title"):
        _write(out, str(data["title"]))
    elif "result" in data:
        result = data["result"]
        if result is None or isinstance(result, (dict, list)):
            _write(out, json.dumps(result, indent=2))
        else:
            _write(out, str(result))
    elif data.get("closed"):
        out.print(_check_line("Browser closed"))
    else:
        out.print(_check_line("Done"))


def render_error(
    message: str,
    kind: Optional[str] = None,
    json_output: bool = False,
    out: Optional[Console] = None,
    err: Optional[Console] = None,
) -> None:
    """Report a failure as a JSON object on stdout or a red line on stderr."""
    if json_output:
        payload = {"success": False, "error": message}
        if kind:
            payload["kind"] = kind
        render_json(payload, out)
        return
    (err or err_console).print(
        Text.assemble(Text("✗ Error:", style="red"), " ", str(message))
    )


def render_response(
    response: Response,
    json_output: bool = False,
    out: Optional[Console] = None,
    err: Optional[Console] = None,
) -> int:
    """
    Print a reply and return the process exit code.

    Returns:
        0 for a successful reply, 1 otherwise
    """
    if json_output:
        render_json(response.raw or {"success": response.success}, out)
        return 0 if response.success else 1

    if not response.success:
        render_error(response.error or "Unknown error", err=err)
        return 1

    render_data(response.data, out)
    return 0
