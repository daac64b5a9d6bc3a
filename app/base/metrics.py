from prometheus_client import Counter, Histogram


# === Scheduling Metrics ===
# HTTP-level metrics come from prometheus-fastapi-instrumentator in app.main

booking_attempts_total = Counter(
    "booking_attempts_total", "Booking commit attempts by outcome",
    ["outcome"]  # created, slot_taken, quota_exceeded, invalid, unavailable
)

booking_commit_duration = Histogram(
    "booking_commit_duration_seconds", "Time spent inside the atomic booking commit"
)

booking_cancellations_total = Counter(
    "booking_cancellations_total", "Booking cancellations by result",
    ["result"]  # cancelled, not_found
)

slot_pages_served_total = Counter(
    "slot_pages_served_total", "Slot listing pages served"
)

scheduler_exception_counter = Counter(
    "scheduler_exceptions_total", "API exceptions by type",
    ["type"]
)
