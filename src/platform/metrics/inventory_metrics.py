from prometheus_client import Counter, Gauge, Histogram


class InventoryMetrics:
    """
    Inventory engine metrics collector

    Tracks purchase outcomes, capacity releases and cancellation cascades
    """

    def __init__(self):
        # ========== Purchase Metrics ==========
        self.ticket_purchases = Counter(
            'inventory_ticket_purchases_total',
            'Ticket purchase attempts by outcome',
            ['event_id', 'mode', 'result'],  # mode: single/bulk, result: success/<error code>
        )

        self.ticket_purchase_duration = Histogram(
            'inventory_ticket_purchase_duration_seconds',
            'Ticket purchase processing time (lock wait included)',
            ['mode'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.event_remaining_capacity = Gauge(
            'inventory_event_remaining_capacity',
            'Remaining capacity after the last mutation',
            ['event_id'],
        )

        # ========== Capacity Release Metrics ==========
        self.capacity_releases = Counter(
            'inventory_capacity_releases_total',
            'Capacity units returned to events',
            ['reason'],  # reason: ticket_cancel/ticket_refund/event_cancel
        )

        # ========== Lifecycle Metrics ==========
        self.event_transitions = Counter(
            'inventory_event_transitions_total',
            'Event status transitions',
            ['from_status', 'to_status'],
        )

        self.cancellation_cascade_size = Histogram(
            'inventory_cancellation_cascade_tickets',
            'Tickets affected by a single event cancellation',
            buckets=[0, 1, 10, 50, 100, 500, 1000, 5000, 10000],
        )

        # ========== Concurrency Metrics ==========
        self.transient_conflicts = Counter(
            'inventory_transient_conflicts_total',
            'Operations that gave up after bounded retries',
            ['operation'],
        )

    # ========== Helper Methods ==========

    def record_purchase(self, *, event_id: int, mode: str, result: str, duration: float):
        self.ticket_purchases.labels(event_id=event_id, mode=mode, result=result).inc()
        self.ticket_purchase_duration.labels(mode=mode).observe(duration)

    def update_remaining_capacity(self, *, event_id: int, remaining: int):
        self.event_remaining_capacity.labels(event_id=event_id).set(remaining)

    def record_capacity_release(self, *, reason: str, count: int = 1):
        if count > 0:
            self.capacity_releases.labels(reason=reason).inc(count)

    def record_event_transition(self, *, from_status: str, to_status: str):
        self.event_transitions.labels(from_status=from_status, to_status=to_status).inc()

    def record_cancellation_cascade(self, *, affected_tickets: int):
        self.cancellation_cascade_size.observe(affected_tickets)

    def record_transient_conflict(self, *, operation: str):
        self.transient_conflicts.labels(operation=operation).inc()


# Global metrics instance
metrics = InventoryMetrics()
