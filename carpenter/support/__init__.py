"""Shared plumbing: driver manager base class and record helpers."""
