"""Membership domain services."""
