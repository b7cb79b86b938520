"""Settings, environment overrides and declaration files."""
