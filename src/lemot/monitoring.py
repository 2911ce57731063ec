"""Monitoring metrics for the trainer."""
from prometheus_client import Counter, Gauge, start_http_server

# Learning metrics
sessions_started = Counter(
    "lemot_sessions_started_total",
    "Total number of practice sessions started",
)

session_words = Gauge(
    "lemot_session_words",
    "Number of words in the most recently started session",
)

answers_recorded = Counter(
    "lemot_answers_total",
    "Total number of answers recorded",
    ["outcome"],
)

words_graduated = Counter(
    "lemot_words_graduated_total",
    "Total number of words that reached the graduation streak",
)

# Word management metrics
words_imported = Counter(
    "lemot_words_imported_total",
    "Total number of new words added by imports",
)

# Error metrics
error_count = Counter(
    "lemot_errors_total",
    "Total number of errors encountered",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
