"""Buccaneer — a pirate-adventure narrator that answers with help from world tools."""
