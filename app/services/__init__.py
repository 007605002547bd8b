"""Services for business logic."""

from dataclasses import dataclass

from app.core.clock import Clock, utc_now
from app.core.config import Settings
from app.core.rate_limiter import RateLimitEngine
from app.db.persistence import Persistence
from app.services.admin_service import AdminService
from app.services.dashboard_service import DashboardService
from app.services.hint_service import HintService
from app.services.identity_service import IdentityResolver
from app.services.progress_service import ProgressTracker
from app.services.public_service import PublicService
from app.services.store_service import CredentialStore


@dataclass
class ServiceContainer:
    """Everything one running app needs, wired around a single store."""

    store: CredentialStore
    engine: RateLimitEngine
    identity: IdentityResolver
    progress: ProgressTracker
    hints: HintService
    admin: AdminService
    dashboard: DashboardService
    public: PublicService


def build_services(persistence: Persistence, settings: Settings, clock: Clock = utc_now) -> ServiceContainer:
    store = CredentialStore(
        persistence,
        namespace=settings.store_namespace,
        timeout_seconds=settings.store_timeout_seconds,
    )
    engine = RateLimitEngine(store, clock=clock)
    identity = IdentityResolver(store)

    return ServiceContainer(
        store=store,
        engine=engine,
        identity=identity,
        progress=ProgressTracker(store, engine),
        hints=HintService(store, engine),
        admin=AdminService(store, engine, identity),
        dashboard=DashboardService(store, clock=clock),
        public=PublicService(store, clock=clock),
    )


__all__ = [
    "ServiceContainer",
    "build_services",
    "CredentialStore",
    "IdentityResolver",
    "ProgressTracker",
    "HintService",
    "AdminService",
    "DashboardService",
    "PublicService",
]
