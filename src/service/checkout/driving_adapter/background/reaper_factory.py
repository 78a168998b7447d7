from src.platform.config.di import Container
from src.service.checkout.app.command.release_expired_reservations_use_case import (
    ReleaseExpiredReservationsUseCase,
)
from src.service.checkout.driving_adapter.background.lock_reaper import LockReaper


def build_lock_reaper(container: Container) -> LockReaper:
    settings = container.config_service()
    use_case = ReleaseExpiredReservationsUseCase(
        uow_factory=container.unit_of_work.provider,
        ad_hoc_uow_factory=container.ad_hoc_unit_of_work.provider,
        metrics=container.metrics(),
        batch_size=settings.LOCK_REAPER_BATCH_SIZE,
    )
    return LockReaper(use_case=use_case, interval_seconds=settings.LOCK_REAPER_INTERVAL_SECONDS)
