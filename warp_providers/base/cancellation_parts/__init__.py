"""Cancellation implementation parts; import from ``warp_providers.base.cancellation``."""
