"""Demo API and operational tooling for hierarchical resource sharing on OpenFGA."""

__version__ = "0.1.0"
