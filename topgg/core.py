"""Service identity attached to every structured log record."""
SERVICE_NAME = "topgg"
