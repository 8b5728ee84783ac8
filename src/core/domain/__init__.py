"""Dominio del generador.

Configuración del servicio, respuestas tipadas, resultados y errores.
Nada de HTTP ni de CLI aquí.
"""
