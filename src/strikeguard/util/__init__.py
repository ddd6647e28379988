"""
Utility functions and helpers for StrikeGuard.

- **logger.py**: Centralized logging configuration with colored console output,
  rotating file handlers, and per-session log aggregation.

- **discord_utils.py**: Stateless Discord helpers: permission checks, duration
  formatting, spam notice embeds, and the timeout/DM/notice sequence.
"""
