from prometheus_client import Counter


reconcile_ticks_total = Counter(
    "reminder_reconcile_ticks_total",
    "Total reconciliation ticks started",
)

reconcile_tick_failures_total = Counter(
    "reminder_reconcile_tick_failures_total",
    "Total reconciliation ticks that failed before processing reminders",
)

reminders_sent_total = Counter(
    "reminders_sent_total",
    "Total follow-up reminders enqueued and recorded on their chain",
)

reminders_cancelled_total = Counter(
    "reminders_cancelled_total",
    "Total reminder chains stopped because the order notification was read",
)

reminders_max_reached_total = Counter(
    "reminders_max_reached_total",
    "Total reminder chains stopped after their final reminder",
)

reminders_errored_total = Counter(
    "reminders_errored_total",
    "Total reminder chains force-stopped after a processing error",
)
