"""Payments app: payment records, gateway abstraction and notification handling."""
