"""
Discord integration for StrikeGuard.

- **events_listener.py**: Bot lifecycle (on_ready) and command error handling
- **message_listener.py**: Feeds guild messages into the spam detector and
  enforces violations
- **settings_cmds.py**: /settings panel and /settings-dump
"""
