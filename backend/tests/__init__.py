"""
Dungeon Delve Backend Test Suite

Test structure:
- unit/: Test components in isolation with mocks
- integration/: Full play-throughs of a session
- mocks/: Mock implementations for testing
"""
