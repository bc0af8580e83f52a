"""
Test helper utilities for edfplus testing.

This module provides reusable utilities for:
- Building synthetic EDF+ byte streams
- Encoding TAL annotation records
- A testing data signal double
"""
