"""
Interactive Discord UI components for StrikeGuard.

- **settings_ui.py**: Settings panel embed and the button view that toggles the
  notice icon and creator footer and cycles the notice colour
"""
