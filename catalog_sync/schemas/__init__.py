"""
schemas/ — Pydantic response models for the sync API

Gives the trigger endpoints typed, documented JSON bodies.
"""
