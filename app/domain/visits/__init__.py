"""
Visits Domain

Visit booking with conflict detection, the status workflow, calendar
events and dashboard statistics.
"""
