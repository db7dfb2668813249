#!/usr/bin/env python3
"""
dockgate
Application entry point
"""

from dockgate.cli import run_cli


def main():
    """Main function"""
    run_cli()


if __name__ == "__main__":
    main()
