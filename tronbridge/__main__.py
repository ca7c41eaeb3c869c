"""
Entry point for running tronbridge as a module: python -m tronbridge
"""

from tronbridge.cli.commands import app

if __name__ == "__main__":
    app()
