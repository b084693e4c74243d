"""CLI subcommands for taginfo."""
