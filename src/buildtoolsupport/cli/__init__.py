"""Build tool support CLI module.

This module provides the command-line interface, enabling users to:
    - Preview the host commands a plugin emits with `bts plan`
    - Run those commands with `bts run`
    - Check executable resolution with `bts locate` and `bts doctor`
"""
