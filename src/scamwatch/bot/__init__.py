"""
Discord-facing side of Scamwatch.

- **command_parser.py**: Splits a chat line into a command and its arguments.
- **command_dispatcher.py**: Validates and executes parsed commands against the
  record store and the platform gateway.
- **platform_gateway.py**: Narrow wrapper over py-cord and the Discord REST API
  used for user, member, and banner lookups.
- **scammer_alerts.py**: Member-join reconciliation against the scammer registry.
- **cogs/**: py-cord listeners wiring the above into Discord events.
"""
