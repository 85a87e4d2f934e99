"""Notification Service: reacts to order events."""
