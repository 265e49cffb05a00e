from .base import BaseDatabase
from .users import UserMixin
from .login_bonus import LoginBonusMixin, LoginStatusConflict
from .intimacy import IntimacyMixin
from .system import SystemMixin

__all__ = [
    "BaseDatabase",
    "UserMixin",
    "LoginBonusMixin",
    "LoginStatusConflict",
    "IntimacyMixin",
    "SystemMixin",
]
