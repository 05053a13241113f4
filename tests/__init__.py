"""Tests for specplan."""
