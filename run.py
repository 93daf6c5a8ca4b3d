"""Exporter entry point."""

from pingdom_exporter.cli import main

if __name__ == "__main__":
    main()
