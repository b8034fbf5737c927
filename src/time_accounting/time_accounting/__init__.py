"""Time accounting package.

Attendance and reported work segments are netted of break rules, compared per
user-day, and discrepancies are queued for supervisor review. Day-end auto-close
and clear retention run from the scheduling module.
"""
