"""ASGI entrypoint; settings come from the environment or .env files."""

from hunt_ledger.api.app import create_app
from hunt_ledger.config import Settings
from hunt_ledger.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
