"""Drug-name autocomplete backed by RxTerms with caching."""

import logging
from dataclasses import dataclass

from neurostack.adapters.rxterms_client import RxTermsClient
from neurostack.domain.drugs import DrugSuggestions
from neurostack.services.cache import Cache

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 10

_logger = logging.getLogger(__name__)


@dataclass
class DrugLookupService:
    """Looks up drug names for the compound autocomplete."""

    client: RxTermsClient
    cache: Cache
    ttl_seconds: int = 3600

    async def suggest(self, query: str) -> DrugSuggestions:
        """Return up to ten display names matching ``query``.

        Raises ``ValueError`` for queries shorter than two characters;
        upstream HTTP errors propagate to the caller.
        """
        if len(query) < MIN_QUERY_LENGTH:
            raise ValueError(
                f"Query must be at least {MIN_QUERY_LENGTH} characters"
            )
        cache_key = f"rxterms:{query.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, DrugSuggestions):
            return cached

        payload = await self.client.search(query)
        result = _parse_payload(payload)
        self.cache.set(cache_key, result, ttl_seconds=self.ttl_seconds)
        _logger.debug(
            "RxTerms search: query=%s results=%s", query, len(result.suggestions)
        )
        return result


def _parse_payload(payload: list[object]) -> DrugSuggestions:
    # RxTerms answers [total, terms, extra_fields, raw].
    total = payload[0] if payload else 0
    terms = payload[1] if len(payload) > 1 else []
    extra = payload[2] if len(payload) > 2 else None
    names = extra.get("DISPLAY_NAME") if isinstance(extra, dict) else None
    if not isinstance(names, list):
        names = terms if isinstance(terms, list) else []
    return DrugSuggestions(
        suggestions=[str(name) for name in names[:MAX_SUGGESTIONS]],
        total_count=int(total) if isinstance(total, int | float) else 0,
    )
