# 📄 File: app/modules/plant_health/container.py
# 🧭 Purpose (Layman Explanation):
# Assembles all the plant health pieces (the store, the repositories, the AI client and
# the services) once at startup so every request uses the same ones.
# 🧪 Purpose (Technical Summary):
# Composition root for the plant_health module. Builds the key-value store (Redis or
# in-memory per STORAGE_BACKEND), the write retry policy, KV repositories, entitlement
# gate, usage tracker, session manager, diagnosis orchestrator and PlantCareService.
# 🔗 Dependencies:
# app.shared.config (settings, RedisConfig), app.shared.infrastructure, domain services
# 🔄 Connected Modules / Calls From:
# app.main (lifespan), presentation dependencies, tests

from dataclasses import dataclass, field
from typing import Optional

from app.shared.config.redis import RedisConfig
from app.shared.config.settings import Settings, get_settings
from app.shared.core.retry import RetryPolicy
from app.shared.infrastructure.storage.kv_store import (
    InMemoryKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
)
from app.shared.utils.logging import get_logger

from .domain.services.diagnosis_service import DiagnosisOrchestrator, DiagnosisTransport
from .domain.services.entitlement_service import EntitlementGate
from .domain.services.plant_care_service import PlantCareService
from .domain.services.session_service import SessionManager
from .domain.services.usage_service import UsageTracker
from .infrastructure.external.anthropic_client import AnthropicDiagnosisTransport
from .infrastructure.storage import KVPlantRepository, KVUsageRepository, KVUserRepository

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    store: KeyValueStore
    transport: DiagnosisTransport
    session_manager: SessionManager
    usage_tracker: UsageTracker
    gate: EntitlementGate
    orchestrator: DiagnosisOrchestrator
    plant_care: PlantCareService
    redis_config: Optional[RedisConfig] = field(default=None, repr=False)

    @classmethod
    def build(
        cls,
        settings: Settings,
        store: KeyValueStore,
        transport: DiagnosisTransport,
        retry_policy: Optional[RetryPolicy] = None,
        redis_config: Optional[RedisConfig] = None,
    ) -> "ServiceContainer":
        """Wire the services over an already created store and transport."""
        retry_policy = retry_policy or RetryPolicy.from_settings(settings)
        gate = EntitlementGate.from_settings(settings)

        user_repository = KVUserRepository(store, retry_policy)
        usage_repository = KVUsageRepository(store, retry_policy)
        plant_repository = KVPlantRepository(store, retry_policy, gate)

        usage_tracker = UsageTracker(usage_repository)
        orchestrator = DiagnosisOrchestrator.from_settings(transport, settings)

        return cls(
            settings=settings,
            store=store,
            transport=transport,
            session_manager=SessionManager(
                user_repository,
                min_password_length=settings.MIN_PASSWORD_LENGTH,
            ),
            usage_tracker=usage_tracker,
            gate=gate,
            orchestrator=orchestrator,
            plant_care=PlantCareService(
                plant_repository=plant_repository,
                usage_tracker=usage_tracker,
                gate=gate,
                orchestrator=orchestrator,
            ),
            redis_config=redis_config,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ServiceContainer":
        settings = settings or get_settings()

        redis_config = None
        if settings.STORAGE_BACKEND == "redis":
            redis_config = RedisConfig(settings)
            store: KeyValueStore = RedisKeyValueStore(
                redis_config.create_redis_client(),
                namespace=settings.REDIS_KEY_PREFIX,
            )
        else:
            store = InMemoryKeyValueStore()

        transport = AnthropicDiagnosisTransport.from_settings(settings)
        if not transport.configured:
            logger.warning("ANTHROPIC_API_KEY is not set, every diagnosis will fall back")

        logger.info(
            "Plant health services initialized",
            extra={"storage_backend": settings.STORAGE_BACKEND}
        )
        return cls.build(settings, store, transport, redis_config=redis_config)

    async def close(self) -> None:
        close_transport = getattr(self.transport, "close", None)
        if close_transport is not None:
            await close_transport()

        if self.redis_config is not None:
            await self.redis_config.close_connections()
        else:
            await self.store.close()
        logger.info("Plant health services closed")
