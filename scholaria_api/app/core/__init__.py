"""Configuration, logging, errors and the record store."""
