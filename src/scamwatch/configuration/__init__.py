"""
Configuration management for Scamwatch.

- **app_configuration.py**: YAML configuration loader for global settings
  (command prefix, alert channel keyword, Discord API/CDN base URLs). Falls
  back to defaults on missing or malformed config files.

- **environment.py**: Loads the ``.env`` file and reads the required secrets
  (bot token, database connection string).
"""
