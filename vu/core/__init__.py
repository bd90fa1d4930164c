"""Core types: results, configuration, secrets, exit codes and logging."""
