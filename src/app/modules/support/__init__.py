"""
Support Module

Help-desk tickets with threaded messages between students and staff.
"""
