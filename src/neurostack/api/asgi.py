"""ASGI entrypoint for the NeuroStack API."""

from neurostack.api.app import create_app
from neurostack.containers import build_container

app = create_app(build_container())
