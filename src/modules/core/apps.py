import structlog
from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = structlog.get_logger(__name__)


class CoreConfig(AppConfig):
    name = "modules.core"
    label = "core"

    def ready(self) -> None:
        from modules.core.store.factory import DYNAMODB, MEMORY

        if settings.STORE_BACKEND not in (DYNAMODB, MEMORY):
            raise ImproperlyConfigured(
                f"STORE_BACKEND must be '{DYNAMODB}' or '{MEMORY}', "
                f"got '{settings.STORE_BACKEND}'."
            )
        logger.info(
            "store.configured",
            backend=settings.STORE_BACKEND,
            customers_table=settings.CUSTOMERS_TABLE,
            addresses_table=settings.ADDRESSES_TABLE,
        )
