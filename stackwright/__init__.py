"""stackwright -- interactive full-stack project scaffolding."""

__version__ = "0.1.0"
