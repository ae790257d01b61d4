"""Waste reporting domain core: matching, live sync and collaborator interfaces."""
