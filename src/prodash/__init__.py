"""prodash: a local productivity dashboard (tasks, notes, chat assistant, news, settings)."""

__version__ = "0.1.0"
