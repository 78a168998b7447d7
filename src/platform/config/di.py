"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.metrics.checkout_metrics import metrics as checkout_metrics
from src.service.checkout.driven_adapter.payment_gateway.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from src.service.checkout.driven_adapter.payment_gateway.stripe_payment_gateway_impl import (
    StripePaymentGatewayImpl,
)
from src.service.checkout.driven_adapter.payment_gateway.webhook_signature_verifier import (
    WebhookSignatureVerifier,
)
from src.service.checkout.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (one engine per event loop)
    database = providers.Singleton(Database, db_url=config_service.provided.DATABASE_URL_ASYNC)

    # Units of work: a fresh one per call, sharing the database session factory
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork.scoped, session_factory=database.provided.session_factory
    )
    ad_hoc_unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork.ad_hoc, session_factory=database.provided.session_factory
    )

    # Payment gateway, chosen by PAYMENT_GATEWAY_MODE
    payment_gateway = providers.Selector(
        config_service.provided.PAYMENT_GATEWAY_MODE,
        mock=providers.Singleton(MockPaymentGatewayImpl),
        stripe=providers.Singleton(
            StripePaymentGatewayImpl,
            base_url=config_service.provided.PAYMENT_GATEWAY_BASE_URL,
            secret_key=config_service.provided.PAYMENT_GATEWAY_SECRET_KEY.get_secret_value.call(),
            timeout_seconds=config_service.provided.PAYMENT_GATEWAY_TIMEOUT_SECONDS,
        ),
    )
    webhook_verifier = providers.Singleton(
        WebhookSignatureVerifier,
        secret=config_service.provided.PAYMENT_WEBHOOK_SECRET.get_secret_value.call(),
        tolerance_seconds=config_service.provided.PAYMENT_WEBHOOK_TOLERANCE_SECONDS,
    )

    # Auth service
    jwt_auth = providers.Singleton(
        JwtAuth,
        secret=config_service.provided.SECRET_KEY.get_secret_value.call(),
        algorithm=config_service.provided.ALGORITHM,
    )

    # Prometheus collectors are process-global
    metrics = providers.Object(checkout_metrics)


container = Container()
