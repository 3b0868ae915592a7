"""Parking spaces app package.

Owners list spaces with an availability window, rates and capacity.
Seekers browse the spaces the booking engine still offers.
"""
