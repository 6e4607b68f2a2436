"""Constants and configuration values for drupal-wrapped."""

# API Constants
class ApiConstants:
    """Constants for the drupal.org APIs."""

    JSONAPI_ACCEPT = "application/vnd.api+json"  # resource graph content type
    JSON_ACCEPT = "application/json"  # contribution feed content type
    USER_ENDPOINT = "/user/user"
    USER_PICTURE_RELATIONSHIP = "user_picture"
    PUBLIC_STREAM_PREFIX = "public://"  # Drupal storage URI scheme

    # Headers that must never reach relays or the origin
    STRIPPED_HEADERS = ("authorization", "cookie", "referer", "proxy-authorization")


# Relay Constants
class RelayConstants:
    """Built-in relay chain, used when no relay file is available."""

    DEFAULT_RELAYS = [
        {"name": "corsproxy", "template": "https://corsproxy.io/?{encoded_url}"},
        {"name": "codetabs", "template": "https://api.codetabs.com/v1/proxy?quest={encoded_url}"},
        {"name": "thingproxy", "template": "https://thingproxy.freeboard.io/fetch/{url}"},
        # May strip the Accept header (406), last resort
        {"name": "allorigins", "template": "https://api.allorigins.win/raw?url={encoded_url}"},
    ]

    # encodeURIComponent leaves these unescaped
    URI_COMPONENT_SAFE = "-_.!~*'()"


# Feed Constants
class FeedConstants:
    """Contribution feed topics."""

    DRUPAL_CORE = "drupal_core"
    AI = "ai"

    # name -> (machine_name, project label)
    DEFAULT_TOPICS = {
        DRUPAL_CORE: ("drupal", "Drupal Core"),
        AI: ("ai", "Drupal AI"),
    }

    JOIN_POLL_INTERVAL = 0.1  # seconds between cancellation checks while joining


# Review Constants
class ReviewConstants:
    """Constants for building the year in review."""

    DEFAULT_YEAR = 2025
    MONTH_NAMES = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']
    UNTITLED = "Untitled Contribution"
    MISSING_URL = "#"
    TOP_PROJECT_ICON = "💧"
    NO_ACTIVITY_ICON = "🕸️"


# Error Handling Constants
class ErrorConstants:
    """User-facing failure messages."""

    GENERIC_CONNECTIVITY_MESSAGE = (
        "Failed to connect to API. Please check your internet connection or try disabling ad-blockers."
    )
    USER_NOT_FOUND_MESSAGE = "User not found. Please verify the username and try again."
    CANCELLED_MESSAGE = "The request was cancelled before it completed."


# Cache Constants
class CacheConstants:
    """Constants for caching behavior."""

    CACHE_KEY_LENGTH = 8  # length of cache key for logging
    CACHE_KEY_VERSION = "v1"


# File and Path Constants
class FileConstants:
    """Constants for file operations."""

    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
