"""
Modules that need dependency injection wiring (Provide[...] markers).
Shared between the API app, the standalone reaper and tests.
"""

from types import ModuleType

from src.service.checkout.app.command import (
    cancel_order_use_case,
    create_order_use_case,
    fail_payment_use_case,
    finalize_payment_use_case,
)
from src.service.checkout.app.query import get_order_use_case
from src.service.checkout.driving_adapter.http_controller import webhook_controller
from src.service.checkout.driving_adapter.http_controller.auth import current_principal


WIRE_MODULES: list[ModuleType] = [
    create_order_use_case,
    finalize_payment_use_case,
    fail_payment_use_case,
    cancel_order_use_case,
    get_order_use_case,
    current_principal,
    webhook_controller,
]
