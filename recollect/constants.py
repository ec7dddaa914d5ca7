# --- Hybrid Search ---

DEFAULT_MAX_DOCUMENT_RESULTS = 10
DEFAULT_MAX_WEB_RESULTS = 5
WEB_SEARCH_MAX_RESULTS = 20
DOCUMENT_SEARCH_TIMEOUT = 30.0  # seconds, httpx client default


# --- Search Patterns ---

SUGGESTION_LIMIT = 5
SUGGESTION_MIN_CHARS = 3  # shorter input gets no debounced suggestions
SUGGESTION_DEBOUNCE_SECONDS = 0.3
FREQUENT_SEARCHES_LIMIT = 10


# --- Document Interactions ---

INTERACTION_LOG_CAPACITY = 1000
RECENT_DOCUMENTS_LIMIT = 10


# --- Project Context ---

DEFAULT_PREFERRED_CATEGORIES = ["business-plan", "financial", "marketing"]
DEFAULT_WORKFLOW_PATTERNS = ["search-then-snippet", "bulk-categorize"]


# --- Cache / persistence keys ---

PREFERENCES_KEY = "user_preferences"
SEARCH_PATTERNS_KEY = "search_patterns"
INTERACTIONS_KEY = "document_interactions"
PROJECT_CONTEXT_KEY = "project_context"


# --- Snippets ---

SEARCH_RESULT_TAG = "search-result"
SNIPPET_TITLE_TRUNCATE = 80


# --- Query classification ---

SEARCH_KEYWORDS = ("find", "search", "look for", "show me", "what", "where", "when", "how")
LONG_QUERY_CHARS = 50  # anything longer is treated as a search
