"""
StrikeGuard - Rolling-Window Spam Moderation for Discord

Core Components:

- **Spam Detection**: Per-guild rolling-window detector that flags members who
  send more than a configured number of messages inside a trailing window
- **Escalating Timeouts**: Each violation adds a strike and doubles the timeout
  (5, 10, 20, ... minutes by default)
- **Notifications**: Best-effort DM to the offender and a public notice embed
- **Display Settings**: File-locked JSON settings controlling the notice look,
  editable through the /settings panel

Usage:
    from strikeguard.main import main
    main()
"""
