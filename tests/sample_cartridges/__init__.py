"""Cartridge package used by the discovery and application tests."""
