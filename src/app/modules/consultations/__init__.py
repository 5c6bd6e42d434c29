"""
Consultations Module

One-to-one advisor sessions: booking, rescheduling and cancellation with
slot-overlap checks.
"""
