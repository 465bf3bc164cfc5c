"""
Core domain models, conversion rules and numeric primitives.

This module contains the foundational building blocks of FlexType that are
independent of any caller state (contexts, caches).
"""
