"""Core package of SealKit."""
