"""Contratos (Protocol) del Core.

El dispatcher depende de estas abstracciones, no del cliente HTTP concreto.
"""
