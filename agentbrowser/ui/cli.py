"""Main CLI entry point - one verb, one daemon request."""

import asyncio
from typing import List, Optional

import typer

from agentbrowser import commands
from agentbrowser.core.configs import get_client_settings
from agentbrowser.core.logs import configure_logging
from agentbrowser.core.runner import send_request
from agentbrowser.daemon.errors import AgentBrowserError
from agentbrowser.daemon.protocol import Request
from agentbrowser.ui.output import render_error, render_response

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="agent-browser - fast browser automation CLI.",
    epilog=(
        "Examples: agent-browser open example.com | agent-browser snapshot | "
        "agent-browser click @e2 | agent-browser fill @e3 hello"
    ),
)
get_app = typer.Typer(no_args_is_help=True, help="Read text, URL or title from the page.")
app.add_typer(get_app, name="get")

JSON_OPTION = typer.Option(False, "--json", help="Output JSON (for AI agents)")


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Log daemon supervision to stderr"),
) -> None:
    """agent-browser - fast browser automation CLI."""
    ctx.obj = {"debug": debug}


# ============================================================================
# Shared dispatch - every verb ends here
# ============================================================================

def _dispatch(ctx: typer.Context, request: Request, json_output: bool) -> None:
    """
    Send one request to the session daemon and render the reply.

    Exits 0 on a successful reply, 1 on any failure.
    """
    try:
        settings = get_client_settings()
    except ValueError as e:
        render_error(f"Invalid configuration: {e}", kind="ConfigError", json_output=json_output)
        raise typer.Exit(1)

    debug = settings.debug or bool((ctx.obj or {}).get("debug"))
    configure_logging(debug)

    try:
        response = asyncio.run(send_request(request, settings))
    except AgentBrowserError as e:
        render_error(str(e), kind=e.kind, json_output=json_output)
        raise typer.Exit(1)

    raise typer.Exit(render_response(response, json_output))


# ============================================================================
# Navigation
# ============================================================================

@app.command("open")
def open_(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL to navigate to (https:// is added if missing)"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Navigate to URL (aliases: goto, navigate)."""
    _dispatch(ctx, commands.navigate(url), json_output)


app.command("goto", hidden=True)(open_)
app.command("navigate", hidden=True)(open_)


@app.command()
def back(ctx: typer.Context, json_output: bool = JSON_OPTION) -> None:
    """Go back in history."""
    _dispatch(ctx, commands.back(), json_output)


@app.command()
def forward(ctx: typer.Context, json_output: bool = JSON_OPTION) -> None:
    """Go forward in history."""
    _dispatch(ctx, commands.forward(), json_output)


@app.command()
def reload(ctx: typer.Context, json_output: bool = JSON_OPTION) -> None:
    """Reload the page."""
    _dispatch(ctx, commands.reload(), json_output)


@app.command()
def close(ctx: typer.Context, json_output: bool = JSON_OPTION) -> None:
    """Close browser (alias: quit)."""
    _dispatch(ctx, commands.close(), json_output)


app.command("quit", hidden=True)(close)


# ============================================================================
# Interaction
# ============================================================================

@app.command()
def click(
    ctx: typer.Context,
    selector: str = typer.Argument(..., help="Selector or @ref from snapshot"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Click element (use @ref from snapshot)."""
    _dispatch(ctx, commands.click(selector), json_output)


@app.command()
def fill(
    ctx: typer.Context,
    selector: str = typer.Argument(..., help="Input selector"),
    text: List[str] = typer.Argument(..., help="Value to fill"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Fill input."""
    _dispatch(ctx, commands.fill(selector, text), json_output)


@app.command("type")
def type_(
    ctx: typer.Context,
    selector: str = typer.Argument(..., help="Element selector"),
    text: List[str] = typer.Argument(..., help="Text to type"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Type text."""
    _dispatch(ctx, commands.type_text(selector, text), json_output)


@app.command()
def hover(
    ctx: typer.Context,
    selector: str = typer.Argument(..., help="Element selector"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Hover element."""
    _dispatch(ctx, commands.hover(selector), json_output)


@app.command()
def press(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to press, e.g. Enter"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Press keyboard key."""
    _dispatch(ctx, commands.press(key), json_output)


@app.command()
def wait(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Milliseconds, or a selector to wait for"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Wait for time or element."""
    _dispatch(ctx, commands.wait(target), json_output)


@app.command("eval")
def eval_(
    ctx: typer.Context,
    script: List[str] = typer.Argument(..., help="JavaScript to evaluate"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Evaluate JavaScript."""
    _dispatch(ctx, commands.evaluate(script), json_output)


# ============================================================================
# Page state
# ============================================================================

@app.command()
def snapshot(ctx: typer.Context, json_output: bool = JSON_OPTION) -> None:
    """Get accessibility tree with refs."""
    _dispatch(ctx, commands.snapshot(), json_output)


@app.command()
def screenshot(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="Where to save the image"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Take screenshot."""
    _dispatch(ctx, commands.screenshot(path), json_output)


@get_app.command("text")
def get_text(
    ctx: typer.Context,
    selector: str = typer.Argument(..., help="Element selector"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Get text content."""
    _dispatch(ctx, commands.get_text(selector), json_output)


@get_app.command("url")
def get_url(ctx: typer.Context, json_output: bool = JSON_OPTION) -> None:
    """Get current URL."""
    _dispatch(ctx, commands.get_url(), json_output)


@get_app.command("title")
def get_title(ctx: typer.Context, json_output: bool = JSON_OPTION) -> None:
    """Get page title."""
    _dispatch(ctx, commands.get_title(), json_output)


def run() -> None:
    """Entry point for console script mapping."""
    app()


if __name__ == "__main__":
    run()
