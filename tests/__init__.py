"""
Centralized test suite for the Portfolio backend.

Test Organization:
- integration/ - store backends, concurrency and management commands
- App-specific tests remain in their respective app directories (e.g., contact/tests.py)
"""
