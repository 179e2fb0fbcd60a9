"""Reconciliation stages applied to parsed clippings."""
