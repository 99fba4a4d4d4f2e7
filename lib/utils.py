# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from urllib.parse import urlsplit


# =============================================================================
# Redirect Utilities
# =============================================================================

def is_safe_redirect(url: str | None) -> bool:
    """
    Check that a redirect target stays on this site.

    Only absolute paths are accepted: no scheme, no host, and no
    protocol-relative "//evil.com" or backslash tricks.

    Example:
        is_safe_redirect("/reports/?page=2")  # True
        is_safe_redirect("https://evil.com/")  # False
    """
    if not url:
        return False
    url = url.strip()
    if not url.startswith("/") or url.startswith("//") or "\\" in url:
        return False
    parts = urlsplit(url)
    return not parts.scheme and not parts.netloc


# =============================================================================
# String Utilities
# =============================================================================

def clean_optional(value: str | None) -> str | None:
    """
    Strip a free-text form value, mapping blank input to None.

    Example:
        clean_optional("  Finance ")  # "Finance"
        clean_optional("   ")  # None
    """
    if value is None:
        return None
    value = value.strip()
    return value or None
