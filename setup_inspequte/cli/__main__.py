"""
Entry point for running the setup-inspequte CLI as a module.

Usage: python -m setup_inspequte.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
