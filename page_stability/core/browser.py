"""Browser lifecycle: launch a Playwright browser and shut it down cleanly."""

import uuid
from typing import Any, Dict, List, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Playwright

from ..config import StabilityConfig
from ..utils.logger import configure_logging, PageStabilityLogger
from .errors import BrowserNotAvailableError, SessionNotInitializedError
from .session import PlaywrightSession


class StabilityBrowser:
    """
    Owns the Playwright driver, browser process, context and the session
    wrapped around its first page.

    Use as an async context manager so the browser process is always shut
    down, even when a test step fails:

        async with StabilityBrowser(config) as browser:
            await browser.session.goto(url)
            await browser.session.wait_for_page_load()
    """

    def __init__(
        self,
        config: Optional[StabilityConfig] = None,
        logger: Optional[PageStabilityLogger] = None,
        **launch_options: Any,
    ):
        self.config = config or StabilityConfig()
        self.launch_options = launch_options
        self.logger = logger or PageStabilityLogger(
            configure_logging(self.config.verbose),
            self.config.verbose,
        )

        self.initialized = False
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self._session: Optional[PlaywrightSession] = None
        self.session_id = str(uuid.uuid4())

    @property
    def session(self) -> PlaywrightSession:
        """
        Session for the browser's page.

        Raises:
            SessionNotInitializedError: If init() has not run
        """
        if not self.initialized or self._session is None:
            raise SessionNotInitializedError()
        return self._session

    async def init(self) -> PlaywrightSession:
        """
        Start Playwright, launch the browser and open a page.

        Raises:
            BrowserNotAvailableError: If any launch step fails. Whatever was
                already started is shut down first.
        """
        if self.initialized:
            self.logger.warn("browser:init", "Already initialized")
            return self.session

        try:
            self.playwright = await async_playwright().start()
            browser_type = getattr(self.playwright, self.config.browser)
            self.browser = await browser_type.launch(
                headless=self.config.headless,
                **self.launch_options,
            )
            self.context = await self.browser.new_context()
            page = await self.context.new_page()
        except Exception as e:
            self.logger.error(
                "browser:init",
                f"Initialization failed: {e}",
                browser=self.config.browser,
                error=str(e),
            )
            try:
                await self.close()
            except Exception as close_error:
                # close() logs its own failures
                self.logger.debug(
                    "browser:init",
                    "Cleanup after failed launch also failed",
                    error=str(close_error),
                )
            raise BrowserNotAvailableError(str(e)) from e

        self._session = PlaywrightSession(
            page,
            self.config,
            self.logger.child(session_id=self.session_id),
        )
        self.initialized = True

        self.logger.info(
            "browser:init",
            "Browser started",
            browser=self.config.browser,
            headless=self.config.headless,
            session_id=self.session_id,
        )
        return self._session

    async def close(self) -> None:
        """
        Shut down context, browser and driver.

        Every step is attempted even if an earlier one fails; the first
        failure is re-raised once all steps have run.
        """
        self.logger.info("browser:close", "Closing browser", session_id=self.session_id)

        steps: List[Any] = [
            ("context", self.context.close if self.context else None),
            ("browser", self.browser.close if self.browser else None),
            ("playwright", self.playwright.stop if self.playwright else None),
        ]
        errors: Dict[str, Exception] = {}
        for name, step in steps:
            if step is None:
                continue
            try:
                await step()
            except Exception as e:
                self.logger.error("browser:close", f"Failed to close {name}: {e}", error=str(e))
                errors[name] = e

        self.context = None
        self.browser = None
        self.playwright = None
        self._session = None
        self.initialized = False

        if errors:
            raise next(iter(errors.values()))

        self.logger.info("browser:close", "Browser closed")

    async def __aenter__(self) -> 'StabilityBrowser':
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
