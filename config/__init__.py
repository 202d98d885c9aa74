"""Configuration package for the benchmark tooling.

Settings are resolved from defaults, an optional JSON file, environment
variables and command-line flags (see ``config.config``).
"""
