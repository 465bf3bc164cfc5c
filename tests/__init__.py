"""
Test suite for flextype

Contains:
- tests/unit/          : Unit tests for individual modules
"""
