# src/tasker/__main__.py

from .cli.main import run

run()
