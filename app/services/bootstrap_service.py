"""Startup tasks: make sure a configuration exists and optionally seed demo data."""

import logging
import uuid as uuid_lib

from app.core.config import Settings
from app.core.sanitizer import validate_uuid
from app.models.admin_config import AdminConfig
from app.models.question import Question
from app.models.user import User
from app.services.store_service import CredentialStore

logger = logging.getLogger(__name__)

DEMO_USER_UUID = "user-demo-1234-5678-abcd-efgh"

DEMO_QUESTIONS = [
    Question(
        id="q1",
        text="What has keys but can't open locks?",
        answer="piano",
        hints=["It makes music", "You press them to create sound"],
        hint_password="music123",
        order=1,
    ),
    Question(
        id="q2",
        text="I am tall when I am young, and short when I am old. What am I?",
        answer="candle",
        hints=["I give light", "I melt as time passes"],
        hint_password="light789",
        order=2,
    ),
    Question(
        id="q3",
        text="What gets wet while drying?",
        answer="towel",
        hints=["Used in bathrooms", "Made of fabric"],
        order=3,
    ),
]


async def ensure_config(store: CredentialStore, settings: Settings) -> AdminConfig:
    """Return the stored config, creating it from settings on first start."""
    config = await store.get_config()
    if config is not None:
        return config

    admin_uuid = settings.admin_uuid or f"admin-{uuid_lib.uuid4()}"
    dashboard_uuid = settings.dashboard_uuid or f"dash-{uuid_lib.uuid4()}"
    validate_uuid(admin_uuid, label="admin_uuid setting")
    validate_uuid(dashboard_uuid, label="dashboard_uuid setting")
    config = AdminConfig(admin_uuid=admin_uuid, dashboard_uuid=dashboard_uuid)
    await store.save_config(config)

    if not settings.admin_uuid:
        logger.warning(f"Generated admin UUID: {admin_uuid}")
    if not settings.dashboard_uuid:
        logger.warning(f"Generated dashboard UUID: {dashboard_uuid}")
    return config


async def seed_demo_content(store: CredentialStore) -> None:
    """Seed the demo riddles and demo participant when the store is empty."""
    if not await store.get_questions():
        await store.save_questions([q.model_copy(deep=True) for q in DEMO_QUESTIONS])
        logger.info(f"Seeded {len(DEMO_QUESTIONS)} demo questions")

    if await store.add_user(User(id=DEMO_USER_UUID, name="Demo User")):
        logger.info("Seeded demo user")


async def bootstrap(store: CredentialStore, settings: Settings) -> None:
    await store.initialize()
    await ensure_config(store, settings)
    if settings.seed_demo_content:
        await seed_demo_content(store)
