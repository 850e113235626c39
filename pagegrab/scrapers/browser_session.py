"""
Browser Session - One shared headless Chromium per process, launched on demand
"""

import asyncio
import os
import shutil
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger
from playwright.async_api import async_playwright, Browser

from ..errors import LaunchError


class BrowserSession:
    """
    Lazily launch and reuse a single browser.

    Concurrent callers arriving while a launch is in flight all await the
    same launch task. A failed launch clears the task so the next call
    starts a fresh attempt. The browser is kept for the process lifetime;
    only pages are opened and closed per request.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        launcher: Optional[Callable[[], Awaitable[Browser]]] = None
    ):
        """
        Initialize browser session.

        Args:
            config: Configuration dictionary
            launcher: Optional coroutine function returning a browser
                (defaults to launching Chromium through Playwright)
        """
        browser_config = config.get('browser', {})
        self.executable_path: Optional[str] = browser_config.get('executable_path')
        self.executable_candidates: List[str] = browser_config.get(
            'executable_candidates', ['chromium', 'chromium-browser', 'google-chrome']
        )
        self.args: List[str] = list(browser_config.get('args', []))

        self._launcher = launcher or self._launch_chromium
        self._browser: Optional[Browser] = None
        self._playwright = None
        self._launch_task: Optional[asyncio.Future] = None
        self.launch_attempts = 0

    @property
    def is_ready(self) -> bool:
        """True once a browser is cached."""
        return self._browser is not None

    @property
    def is_launching(self) -> bool:
        return self._launch_task is not None

    async def acquire(self) -> Browser:
        """
        Get the shared browser, launching it on first use.

        Raises:
            LaunchError: If the launch this call waited on failed
        """
        if self._browser is not None:
            return self._browser

        if self._launch_task is None:
            logger.info("Launching browser...")
            self._launch_task = asyncio.ensure_future(self._launch())

        # A cancelled request must not cancel the launch other callers share
        return await asyncio.shield(self._launch_task)

    async def _launch(self) -> Browser:
        """Run one launch attempt and publish its outcome."""
        self.launch_attempts += 1
        try:
            browser = await self._launcher()
        except Exception as e:
            logger.error(f"Error launching browser: {e}")
            self._launch_task = None
            if isinstance(e, LaunchError):
                raise
            raise LaunchError(f"Browser launch failed: {e}") from e

        self._browser = browser
        self._launch_task = None
        browser.on('disconnected', self._on_disconnected)
        logger.info("Browser launched successfully")
        return browser

    def _on_disconnected(self, browser: Browser) -> None:
        """Forget a browser whose process went away so the next call relaunches."""
        if self._browser is browser:
            logger.warning("Browser disconnected, it will be relaunched on next request")
            self._browser = None

    def _resolve_executable_path(self) -> Optional[str]:
        """
        Find the browser binary installed on the host.

        Returns:
            Path to the binary, or None to use Playwright's bundled Chromium

        Raises:
            LaunchError: If an explicitly configured binary does not exist
        """
        if self.executable_path:
            if os.path.exists(self.executable_path):
                return self.executable_path
            resolved = shutil.which(self.executable_path)
            if resolved:
                return resolved
            raise LaunchError(f"Configured browser executable not found: {self.executable_path}")

        for candidate in self.executable_candidates:
            resolved = shutil.which(candidate)
            if resolved:
                logger.debug(f"Using browser executable: {resolved}")
                return resolved

        logger.warning("No installed Chromium found on host, using Playwright's bundled build")
        return None

    async def _launch_chromium(self) -> Browser:
        """Start Playwright and launch headless Chromium."""
        executable_path = self._resolve_executable_path()

        # Driver left over from a browser that disconnected
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.debug(f"Error stopping previous playwright driver: {e}")
            self._playwright = None

        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                executable_path=executable_path,
                args=self.args,
                headless=True
            )
        except Exception:
            await playwright.stop()
            raise

        self._playwright = playwright
        return browser

    async def close(self):
        """Close browser and cleanup resources (application shutdown only)."""
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.debug(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.debug(f"Error stopping playwright: {e}")
            self._playwright = None
