from blogapi.auth.identity import Identity, Role
from blogapi.auth.policy import Operation, is_allowed

__all__ = ["Identity", "Operation", "Role", "is_allowed"]
