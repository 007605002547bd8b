"""Aggregate progress for the admin and read-only dashboards."""

from app.core.clock import Clock, utc_now
from app.models.identity import Identity, Role
from app.schemas.dashboard import DashboardResponse, UserProgressItem
from app.services.progress_service import completion_percentage
from app.services.store_service import CredentialStore


class DashboardService:
    def __init__(self, store: CredentialStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def get_dashboard(self, viewer: Identity) -> DashboardResponse:
        """
        Build dashboard data for an admin or dashboard viewer.

        Only admins see each participant's UUID.
        """
        users = await self.store.list_users()
        total_questions = len(await self.store.get_questions())
        include_uuid = viewer.role is Role.ADMIN

        items = [
            UserProgressItem(
                name=user.name,
                percentage=completion_percentage(len(user.completed_questions), total_questions),
                completed_count=len(user.completed_questions),
                total_questions=total_questions,
                last_activity=user.last_activity,
                uuid=user.id if include_uuid else None,
            )
            for user in users
        ]

        # Average over all completions, not over rounded per-user percentages
        total_completed = sum(len(user.completed_questions) for user in users)
        average_completion = (
            completion_percentage(total_completed, len(users) * total_questions) if users else 0
        )
        total_completions = sum(
            1 for user in users
            if total_questions > 0 and len(user.completed_questions) >= total_questions
        )

        return DashboardResponse(
            total_users=len(users),
            average_completion=average_completion,
            total_completions=total_completions,
            users=items,
            last_updated=self.clock(),
        )
