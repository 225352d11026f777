"""Replays scripted UI interactions (type, click, wait) on a page."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from expo_screenshotter.constants import (
    DEFAULT_INTERACTION_WAIT_MS,
    INTERACTION_SELECTOR_TIMEOUT_MS,
    INTERACTION_SETTLE_MS,
)
from expo_screenshotter.exceptions import InteractionError, SelectorTimeoutError
from expo_screenshotter.types import InteractionType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from playwright.async_api import Page

    from expo_screenshotter.models.config import Interaction

logger = structlog.get_logger(__name__)


async def wait_for_selector(page: Page, selector: str, timeout_ms: int) -> None:
    """Wait for ``selector`` to attach, raising SelectorTimeoutError on timeout."""
    try:
        await page.wait_for_selector(selector, state="attached", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        msg = f"Selector {selector!r} not found within {timeout_ms}ms"
        raise SelectorTimeoutError(msg) from e


class InteractionRunner:
    """Runs an interaction script step by step.

    No step can abort the run: a failing step is logged and skipped, and
    every step is followed by the same settle delay.
    """

    def __init__(
        self,
        selector_timeout_ms: int = INTERACTION_SELECTOR_TIMEOUT_MS,
        settle_ms: int = INTERACTION_SETTLE_MS,
    ) -> None:
        self._selector_timeout = selector_timeout_ms
        self._settle_ms = settle_ms

    async def run(self, page: Page, interactions: Sequence[Interaction]) -> int:
        """Apply ``interactions`` in order. Returns how many steps succeeded."""
        applied = 0
        for index, interaction in enumerate(interactions):
            try:
                if await self._apply(page, interaction):
                    applied += 1
            except (InteractionError, SelectorTimeoutError) as e:
                logger.warning(
                    "interaction_skipped",
                    index=index,
                    type=interaction.type,
                    selector=interaction.selector,
                    reason=str(e),
                )
            except PlaywrightError as e:
                logger.warning(
                    "interaction_failed",
                    index=index,
                    type=interaction.type,
                    selector=interaction.selector,
                    error=str(e),
                )
            await page.wait_for_timeout(self._settle_ms)

        logger.debug("interactions_complete", total=len(interactions), applied=applied)
        return applied

    async def _apply(self, page: Page, interaction: Interaction) -> bool:
        action = interaction.type
        if action == InteractionType.TYPE:
            await self._type(page, interaction)
        elif action == InteractionType.CLICK:
            await self._click(page, interaction)
        elif action == InteractionType.WAIT:
            wait_ms = interaction.wait_time
            if wait_ms is None:
                wait_ms = DEFAULT_INTERACTION_WAIT_MS
            logger.debug("interaction_wait", wait_ms=wait_ms)
            await page.wait_for_timeout(wait_ms)
        else:
            logger.warning("unknown_interaction_type", type=action)
            return False
        return True

    async def _type(self, page: Page, interaction: Interaction) -> None:
        if not interaction.selector or not interaction.text:
            raise InteractionError("'type' interaction requires selector and text")
        await wait_for_selector(page, interaction.selector, self._selector_timeout)
        # Triple-click selects any existing value so typing replaces it
        await page.click(interaction.selector, click_count=3, timeout=self._selector_timeout)
        await page.keyboard.type(interaction.text)
        logger.debug(
            "interaction_typed", selector=interaction.selector, chars=len(interaction.text)
        )

    async def _click(self, page: Page, interaction: Interaction) -> None:
        if not interaction.selector:
            raise InteractionError("'click' interaction requires selector")
        await wait_for_selector(page, interaction.selector, self._selector_timeout)
        await page.click(interaction.selector, timeout=self._selector_timeout)
        logger.debug("interaction_clicked", selector=interaction.selector)
