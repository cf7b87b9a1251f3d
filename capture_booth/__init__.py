"""Capture Booth – gesture / smile triggered photo kiosk."""
