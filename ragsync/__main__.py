# ragsync/__main__.py
from ragsync.cli.cli import app

if __name__ == "__main__":
    app()
