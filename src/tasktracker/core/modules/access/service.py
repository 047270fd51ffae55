from tasktracker.core.core import Service
from tasktracker.core.modules.session.models import SessionToken
from tasktracker.core.modules.task.models import Task
from tasktracker.core.modules.task.service import parse_task_id
from tasktracker.core.modules.user.models import User


class AccessService(Service):
    async def ensure_authenticated(self, token: SessionToken) -> User:
        """Ensure the session is valid and return its user."""
        return await self.core.services.session.get_authenticated_user(token)

    async def ensure_task_owner(self, token: SessionToken, task_id: str) -> Task:
        """Ensure the authenticated user owns the task, raise NotFoundError if not."""
        user = await self.ensure_authenticated(token)
        return await self.core.services.task.get_owned_task(parse_task_id(task_id), user.id)
