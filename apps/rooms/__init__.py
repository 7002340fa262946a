"""Rooms app package.

Master data for bookable campus rooms. A room's status is descriptive
only: the booking engine accepts requests for rooms under maintenance
unless the ``REJECT_MAINTENANCE_ROOMS`` policy is switched on.
"""
