"""Core building blocks: models, results, events, configuration and logging."""
