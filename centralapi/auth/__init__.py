from centralapi.auth.dependencies import get_current_user, get_optional_user, require_user_type

__all__ = ["get_current_user", "get_optional_user", "require_user_type"]
