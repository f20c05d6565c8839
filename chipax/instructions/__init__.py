"""Opcode handlers, one module per instruction group."""
