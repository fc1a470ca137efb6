"""tfpick - pick, fetch and install a Terraform release."""

__version__ = "0.3.0"
