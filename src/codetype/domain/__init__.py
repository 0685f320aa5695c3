"""Domain model for CODETYPE: practice history entries and caller identities."""
