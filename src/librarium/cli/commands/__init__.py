# ABOUTME: Subcommands of the librarium CLI, one module per command.
