from prometheus_client import Counter, Histogram


class CheckoutMetrics:
    """Checkout counters exposed on /metrics"""

    def __init__(self) -> None:
        # ========== Checkout ==========
        self.orders = Counter(
            'checkout_orders_total',
            'Checkout attempts by outcome',
            ['result'],  # created/conflict/invalid/gateway_error/error
        )

        self.checkout_duration = Histogram(
            'checkout_duration_seconds',
            'Time to reserve inventory, create the payment intent and commit',
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
        )

        self.inventory_conflicts = Counter(
            'checkout_inventory_conflicts_total',
            'Guarded inventory updates that matched zero rows',
            ['kind'],  # general_admission/seat
        )

        # ========== Payment ==========
        self.payments_finalized = Counter(
            'checkout_payments_finalized_total',
            'Gateway callbacks by outcome',
            ['result'],  # completed/failed/duplicate/seat_conflict/charged_after_expiry
        )

        # ========== Reaper ==========
        self.reaper_released = Counter(
            'checkout_reaper_released_total',
            'Reservations released by the lock reaper',
            ['kind'],  # expired_order/seat_lock
        )

    # ========== Helper Methods ==========

    def record_order(self, *, result: str, duration: float | None = None) -> None:
        self.orders.labels(result=result).inc()
        if duration is not None:
            self.checkout_duration.observe(duration)

    def record_inventory_conflict(self, *, kind: str) -> None:
        self.inventory_conflicts.labels(kind=kind).inc()

    def record_payment(self, *, result: str) -> None:
        self.payments_finalized.labels(result=result).inc()

    def record_reaper_release(self, *, kind: str, count: int) -> None:
        if count:
            self.reaper_released.labels(kind=kind).inc(count)


# Global metrics instance
metrics = CheckoutMetrics()
