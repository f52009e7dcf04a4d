"""Utility modules for treerm."""
