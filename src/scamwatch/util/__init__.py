"""
Utility functions and helpers for Scamwatch.

- **logger.py**: Centralized logging configuration with colored console output,
  rotating file handlers, and per-session log aggregation. Suppresses noise from
  Discord internals. Uses prompt_toolkit for console output.

- **format_utils.py**: Discord timestamp tags, role mentions, and CDN banner
  URL helpers shared by the dispatcher and the renderers.
"""
