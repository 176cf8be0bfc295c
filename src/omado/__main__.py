# src/omado/__main__.py

from .cli.main import run

run()
