from recollect.constants import LONG_QUERY_CHARS, SEARCH_KEYWORDS


def is_search_query(message: str) -> bool:
    """Keyword heuristic deciding whether a chat message should trigger a search."""
    lowered = message.lower()
    return any(k in lowered for k in SEARCH_KEYWORDS) or "?" in message or len(message) > LONG_QUERY_CHARS
