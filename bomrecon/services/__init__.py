"""Reconciliation services: normalization, rules, key resolution and comparison."""
