"""SealKit: authenticated-encryption envelopes with pluggable AES cipher kits."""

__version__ = "0.1.0"
