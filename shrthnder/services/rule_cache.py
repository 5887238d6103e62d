from __future__ import annotations
import logging
import threading
from typing import List, Tuple

from shrthnder.app.errors import RuleLoadFailure
from shrthnder.app.models import RuleSet, ShorthandRule
from shrthnder.utils.file_handler import default_test_text

logger = logging.getLogger(__name__)

TEST_TEXT_SHORTHAND = "test"


class RuleCache:
    """
    Process-wide store of shorthand rules, filled from a provider with an
    async fetch_categories() method (see services.api_client.ApiClient).

    The cache only ever holds a complete RuleSet; loads replace it whole.
    Every load takes a ticket from a generation counter, and a fetch that
    finishes after a newer one was requested is dropped instead of
    overwriting fresher data.
    """

    def __init__(self, provider):
        self.provider = provider
        self._rules = RuleSet()
        self._loaded = False
        self._generation = 0
        # loads may run on several worker threads, each with its own event loop
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> RuleSet:
        """Current rules without touching the provider (empty until loaded)."""
        return self._rules

    async def _load(self, reason: str) -> bool:
        with self._lock:
            self._generation += 1
            ticket = self._generation
        logger.info("Fetching shorthand categories (%s, generation %d)", reason, ticket)
        try:
            ruleset = RuleSet(await self.provider.fetch_categories())
        except RuleLoadFailure as e:
            logger.error("Error fetching shorthand rules: %s", e)
            return False
        except Exception:
            logger.exception("Unexpected error fetching shorthand rules")
            return False
        with self._lock:
            if ticket != self._generation:
                logger.info("Discarding stale rules from generation %d (latest is %d)",
                            ticket, self._generation)
                return False
            self._rules = ruleset
            self._loaded = True
        logger.info("Cached rules for %d categories", len(ruleset))
        return True

    async def ensure_loaded(self) -> RuleSet:
        if not self._loaded:
            await self._load("initial load")
        return self._rules

    async def get_rules(self, category: str) -> Tuple[ShorthandRule, ...]:
        ruleset = await self.ensure_loaded()
        rules = ruleset.rules_for(category)
        logger.debug("Rules for category %s: %d", category, len(rules))
        return rules

    async def refresh(self) -> None:
        """Drop whatever is cached and reload. Failures keep the old rules."""
        await self._load("refresh")

    async def categories(self) -> List[str]:
        ruleset = await self.ensure_loaded()
        return ruleset.categories()

    async def get_test_text(self, category: str) -> str:
        """
        Passage for the typing test. A rule with shorthand "test" wins, then the
        provider's passage, then the built-in one for the category.
        """
        ruleset = await self.ensure_loaded()
        return passage_for(ruleset, category)


def passage_for(ruleset: RuleSet, category: str) -> str:
    for rule in ruleset.rules_for(category):
        if rule.shorthand == TEST_TEXT_SHORTHAND:
            return rule.expansion
    text = ruleset.test_text(category)
    if text:
        return text
    return default_test_text(category)

