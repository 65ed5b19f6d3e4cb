"""
Rush Bot - Utils Package
========================

Stateless helpers usable anywhere in the codebase.

Available Utilities:
    Footer: Standardized embed footer with cached avatar
    Interaction: Reply helpers that never raise on expired interactions
    Async: Best-effort wrappers for cosmetic Discord calls
    Members: Display name resolution
    Errors: Categorized error logging
"""

from .footer import init_footer, set_footer
from .interaction import safe_respond, safe_defer
from .async_utils import safe_async_operation, gather_with_logging
from .members import profile_name, resolve_display_name
from .error_handler import ErrorHandler


__all__ = [
    # Footer
    "init_footer",
    "set_footer",
    # Interaction
    "safe_respond",
    "safe_defer",
    # Async
    "safe_async_operation",
    "gather_with_logging",
    # Members
    "profile_name",
    "resolve_display_name",
    # Errors
    "ErrorHandler",
]
