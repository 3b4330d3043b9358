"""Bookings app package.

This app encapsulates the booking domain: the booking record, the slot
claim that makes a (vendor, instant) pair exclusive, and the creation
protocol that couples the two in one transaction behind the idempotency
gate. The unique constraint on slot claims is the only thing that keeps
two buyers out of the same slot; availability checks are advisory.
"""
