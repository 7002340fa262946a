"""Outgoing notifications (email) for the room booking engine."""
