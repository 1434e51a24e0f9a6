"""
Scamwatch - Discord Scammer Registry Bot

Scamwatch keeps a shared list of reported scammers and self-registered
trainer profiles for trading communities, and warns a server when a
reported account joins.

Core Components:

- **Record Store**: aiosqlite-backed persistence for trainer profiles and
  scammer records, with uniqueness enforced per Discord user ID
- **Command Dispatcher**: parses prefixed text commands, checks permissions
  and arguments, and produces replies
- **Join Alerts**: checks every joining member against the registry and
  broadcasts an alert to the server's notice channel

Usage:
    from scamwatch.main import main
    main()
"""
