"""
Admin Module

Oversight endpoints for platform administrators: a booking and occupancy
overview, a cross-spot booking listing, and on-demand runs of the
background sweeps (expired reservations, reminders, notification cleanup).
"""

from . import router

__all__ = ["router"]
