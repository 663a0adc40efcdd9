"""Dining hours service: schedule normalization and open/closed status for campus dining locations."""
