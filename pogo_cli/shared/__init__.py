"""Configuration, logging and connection helpers shared by pogo commands."""
