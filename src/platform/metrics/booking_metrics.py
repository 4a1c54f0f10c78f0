from prometheus_client import Counter, Gauge, Histogram


class BookingMetrics:
    """
    Booking engine metrics collector

    Tracks seat claim contention, booking lifecycle transitions and refunds.
    Label cardinality is kept to schedule ids and results, never customer ids.
    """

    def __init__(self):
        # ========== Seat Claim Metrics ==========
        self.seat_claim_requests = Counter(
            'seat_claim_requests_total',
            'Total seat claim attempts',
            ['schedule_id', 'result'],  # result: success/conflict/not_found/timeout/error
        )

        self.seat_claim_duration = Histogram(
            'seat_claim_duration_seconds',
            'Seat claim processing time including lock wait and persistence',
            ['schedule_id'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
        )

        self.seats_available = Gauge(
            'seats_available',
            'Available seats per schedule',
            ['schedule_id'],
        )

        # ========== Booking Lifecycle Metrics ==========
        self.booking_transitions = Counter(
            'booking_transitions_total',
            'Booking and payment state transitions',
            ['transition'],  # created/paid/completed/cancelled/payment_failed
        )

        self.refund_amount = Counter(
            'booking_refund_amount_total',
            'Sum of refunded money (currency major units)',
        )

        self.persistence_failures = Counter(
            'booking_persistence_failures_total',
            'Unit of work commits that failed and were rolled back',
            ['operation'],
        )

    # ========== Helper Methods ==========

    def record_seat_claim(self, *, schedule_id: str, result: str, duration: float) -> None:
        self.seat_claim_requests.labels(schedule_id=schedule_id, result=result).inc()
        self.seat_claim_duration.labels(schedule_id=schedule_id).observe(duration)

    def update_seats_available(self, *, schedule_id: str, count: int) -> None:
        self.seats_available.labels(schedule_id=schedule_id).set(count)

    def record_transition(self, *, transition: str) -> None:
        self.booking_transitions.labels(transition=transition).inc()

    def record_refund(self, *, amount: float) -> None:
        if amount > 0:
            self.refund_amount.inc(amount)

    def record_persistence_failure(self, *, operation: str) -> None:
        self.persistence_failures.labels(operation=operation).inc()


# Global metrics instance
metrics = BookingMetrics()
