"""Sink and source implementations for the COBS sender and receiver."""
