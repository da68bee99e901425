"""Tests - Test suite for the arithmetization core."""
