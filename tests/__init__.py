"""Test suite for chainarb."""
