"""Installs the browser binary a session needs when Playwright cannot find it."""

from __future__ import annotations

import asyncio
import os
import sys
from dataclasses import dataclass

from loguru import logger

_INSTALL_LOCK = asyncio.Lock()
_DEFAULT_INSTALL_TIMEOUT_S = 10 * 60
_OUTPUT_TAIL_CHARS = 2000

# Bundled builds live in Playwright's cache and install per user.
_BUNDLED = ("chromium", "firefox", "webkit")
# Branded channels are system-wide Chrome/Edge installs and need root on Linux.
_BRANDED = ("chrome", "msedge")

_MISSING_PATTERNS = (
    "executable doesn't exist",
    "please run the following command",
    "browser has not been found",
    # branded channel missing, e.g. "Chromium distribution 'chrome' is not found at ..."
    "distribution '",
)


@dataclass(slots=True)
class InstallResult:
    ok: bool
    output: str


def is_missing_browser_error(exc: Exception) -> bool:
    """True when a launch failed because the browser binary is not installed."""
    text = str(exc).lower()
    return any(p in text for p in _MISSING_PATTERNS)


def install_command(browser_kind: str, *, with_deps: bool = False) -> list[str]:
    """Build the ``playwright install`` command line for one browser kind."""
    if browser_kind not in _BUNDLED + _BRANDED:
        raise ValueError(f"cannot install unknown browser: {browser_kind}")
    command = [sys.executable, "-m", "playwright", "install"]
    if with_deps:
        command.append("--with-deps")
    command.append(browser_kind)
    return command


def _needs_privileges(browser_kind: str) -> bool:
    if browser_kind not in _BRANDED or not sys.platform.startswith("linux"):
        return False
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() != 0


async def install_browser(
    browser_kind: str,
    *,
    with_deps: bool = False,
    timeout_s: float = _DEFAULT_INSTALL_TIMEOUT_S,
) -> InstallResult:
    """Run ``playwright install`` for ``browser_kind``, one install at a time."""
    try:
        command = install_command(browser_kind, with_deps=with_deps)
    except ValueError as e:
        return InstallResult(ok=False, output=str(e))

    if _needs_privileges(browser_kind):
        return InstallResult(
            ok=False,
            output=(
                f"installing the {browser_kind} channel needs root; install it "
                "system-wide or use browser=chromium"
            ),
        )

    async with _INSTALL_LOCK:
        logger.info("Installing Playwright browser {} (with deps: {})", browser_kind, with_deps)
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout_s)
        except asyncio.TimeoutError:
            process.kill()
            return InstallResult(ok=False, output=f"install of {browser_kind} timed out after {timeout_s}s")

    output = _tail(stdout.decode("utf-8", errors="replace").strip())
    if process.returncode == 0:
        return InstallResult(ok=True, output=output or f"{browser_kind} installed")
    return InstallResult(
        ok=False,
        output=output or f"playwright install {browser_kind} exited with code {process.returncode}",
    )


def _tail(text: str) -> str:
    """Keep the end of the installer output, where failures are reported."""
    if len(text) <= _OUTPUT_TAIL_CHARS:
        return text
    return "..." + text[-_OUTPUT_TAIL_CHARS:]
