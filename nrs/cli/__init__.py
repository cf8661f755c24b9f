"""Command line interface for the synthetics client."""
