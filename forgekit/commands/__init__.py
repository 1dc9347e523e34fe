"""CLI subcommands for forgekit."""
