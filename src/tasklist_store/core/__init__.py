"""Ports, errors and time helpers shared by all subsystems."""
