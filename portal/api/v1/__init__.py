"""Version 1 routers."""
from portal.api.v1 import activities, auth, finance, messages, projects, support, tasks, users

__all__ = ["activities", "auth", "finance", "messages", "projects", "support", "tasks", "users"]
