"""Periodic USD price snapshots from liquidity-pool reserves."""
