"""Service de réservation de chambres"""
