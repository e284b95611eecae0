"""Configuration module for the installment planner."""

from installment_planner.config.logging import configure_logging, get_logger
from installment_planner.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "configure_logging", "get_logger"]
