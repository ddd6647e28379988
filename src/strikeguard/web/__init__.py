"""
HTTP endpoints served alongside the bot.

- **keep_alive.py**: Optional aiohttp server answering ``GET /`` health checks
"""
