"""Runtime configuration (``config.settings.config``)."""
