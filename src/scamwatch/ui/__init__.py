"""
Rendering of dispatcher replies into Discord message payloads.

- **reply_renderer.py**: Converts :class:`~scamwatch.datatypes.command_datatypes.Reply`
  values into plain strings or ``discord.Embed`` objects.
"""
