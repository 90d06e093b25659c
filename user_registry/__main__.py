"""Allow `python -m user_registry`."""

from user_registry.main import run

run()
