"""
Handlers package - Turns command objects into provisioner calls.

This package organizes handlers by command type:
- workspace.py: CreateWorkspace
- user.py: CreateUser and LoginUser
"""

from .user import handle_create_user, handle_login_user
from .workspace import handle_create_workspace

__all__ = [
    "handle_create_workspace",
    "handle_create_user",
    "handle_login_user",
]
