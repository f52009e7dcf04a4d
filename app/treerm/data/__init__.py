"""Bundled data files for treerm."""
