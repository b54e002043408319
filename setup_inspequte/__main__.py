"""
Entry point for running the setup-inspequte CLI as a module.

Usage: python -m setup_inspequte [command] [options]
"""

from setup_inspequte.cli.parser import main

if __name__ == "__main__":
    main()
