from tasktracker.web.routers.tasks import router as tasks_router
from tasktracker.web.routers.users import router as users_router

__all__ = [
    "tasks_router",
    "users_router",
]
