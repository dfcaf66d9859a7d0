"""Core components for stylectl: configuration, checking and orchestration.

Submodules are imported directly (``stylectl.core.config``,
``stylectl.core.orchestrator``); the rule registry depends on
``stylectl.core.exceptions`` so nothing is re-exported here.
"""
