"""
Request builders for agent-browser CLI verbs.

Each function maps one verb's arguments onto the daemon's request fields.
Nothing here talks to the daemon.
"""

import re
from typing import Optional, Sequence

from agentbrowser.daemon.protocol import Request

_DIGITS = re.compile(r"^\d+$")


def normalize_url(url: str) -> str:
    """Prefix bare hosts with https://."""
    if url.startswith("http"):
        return url
    return f"https://{url}"


def _join(words: Sequence[str]) -> str:
    return " ".join(words)


def navigate(url: str) -> Request:
    return Request("navigate", {"url": normalize_url(url)})


def click(selector: str) -> Request:
    return Request("click", {"selector": selector})


def fill(selector: str, words: Sequence[str]) -> Request:
    return Request("fill", {"selector": selector, "value": _join(words)})


def type_text(selector: str, words: Sequence[str]) -> Request:
    return Request("type", {"selector": selector, "text": _join(words)})


def hover(selector: str) -> Request:
    return Request("hover", {"selector": selector})


def snapshot() -> Request:
    return Request("snapshot")


def screenshot(path: Optional[str] = None) -> Request:
    return Request("screenshot", {"path": path})


def close() -> Request:
    return Request("close")


def get_text(selector: str) -> Request:
    return Request("gettext", {"selector": selector})


def get_url() -> Request:
    return Request("url")


def get_title() -> Request:
    return Request("title")


def press(key: str) -> Request:
    return Request("press", {"key": key})


def wait(target: str) -> Request:
    """
    Wait for a duration or an element.

    An all-digit target is a timeout in milliseconds, anything else a selector.
    """
    if _DIGITS.match(target):
        return Request("wait", {"timeout": int(target)})
    return Request("wait", {"selector": target})


def back() -> Request:
    return Request("back")


def forward() -> Request:
    return Request("forward")


def reload() -> Request:
    return Request("reload")


def evaluate(words: Sequence[str]) -> Request:
    return Request("evaluate", {"script": _join(words)})
