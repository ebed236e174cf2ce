"""Use-case orchestration between the CLI/server and the receipt core."""
