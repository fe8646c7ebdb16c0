"""Configuration, logging, errors and monitoring shared by the proxy."""
