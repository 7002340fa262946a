"""Bookings app package.

The room booking engine: an interval store over booking rows, the
availability check and slot generator built on it, and the lifecycle
commands that move a booking from ``pending`` through approval and QR
check-in. Creation locks the room row inside a transaction so two
overlapping requests can never both be persisted.
"""
