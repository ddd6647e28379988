"""
Configuration management for StrikeGuard.

- **app_configuration.py**: YAML loader for global settings (spam detector
  constants, settings file location, keep-alive server). Falls back to
  defaults on missing or malformed files.

- **spam_settings.py**: Typed, validated detector constants.

- **display_settings.py**: Whole-file JSON store for the notice display
  settings, guarded by fcntl locks.
"""
