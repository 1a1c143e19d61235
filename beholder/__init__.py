"""Beholder: pipeline progress/status events -> tracker, chat and media notifications."""
