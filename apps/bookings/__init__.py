"""Bookings app package.

This app holds the booking admission engine: validating a requested
window against a space's availability, pricing it with the tiered
hourly/daily rule, and driving the request through the owner's
decision. Approval records a slot in the same transaction, guarded by a
row lock and a conditional status update, so a space is never committed
twice.
"""
