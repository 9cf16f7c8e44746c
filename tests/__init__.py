"""
Tests package - Test suite for the workspace provisioner.

Contains:
- unit/: Unit tests for individual components, mirroring the package layout
"""
