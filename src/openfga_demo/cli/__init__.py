"""Operational commands for the demo API and a local OpenFGA server."""
