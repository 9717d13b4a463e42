"""
Test Suite for the ticker dashboard state engine

Unit tests for the value types, layout store, registry, resolver,
presentation controller and persistence, plus orchestrator-level tests of
the dashboard's behavioural guarantees.
"""
