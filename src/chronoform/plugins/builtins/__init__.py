"""Plugins shipped with chronoform."""
