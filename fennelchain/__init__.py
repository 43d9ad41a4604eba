"""In-memory ledger modules for certificates, identities, submissions and keys, on a shared runtime."""

__version__ = "0.1.0"