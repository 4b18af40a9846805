from .models import AuthState, UserProfile
from .service import AuthService

__all__ = [
    "AuthService",
    "AuthState",
    "UserProfile",
]
