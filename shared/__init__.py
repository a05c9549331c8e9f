"""
Shared utilities for the dashboard components.

This package contains common functionality used by both control and console:
- logging_config: consistent logging setup for each component
"""
