"""Service layer orchestrating the matching engine and the record store."""
