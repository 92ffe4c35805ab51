"""Health probe resources for liveness and readiness checks."""
