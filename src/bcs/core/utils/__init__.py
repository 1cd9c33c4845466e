"""Shared utilities for the BCS core library."""
