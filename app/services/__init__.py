"""Reservation lifecycle and table seating core"""
