"""CLI commands.

This package contains the implementation of CLI commands:
    - plan: Print the host commands emitted for a manifest
    - run: Execute the host commands emitted for a manifest
    - locate: Resolve a command or toolchain command
    - doctor: Diagnose executable resolution
    - version: Show version information
"""
