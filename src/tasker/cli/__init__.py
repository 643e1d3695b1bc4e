"""
Command-line layer.

- commands.py: verb registry, argument parsing, handlers
- main.py: process entrypoint (logging, store lifetime, exit codes)
"""
