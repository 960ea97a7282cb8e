"""grokloc - encrypted identity and org provisioning."""

__version__ = "0.1.0"
