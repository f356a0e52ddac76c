"""
Divisas - Calculadora de Divisas Bot

A Telegram bot that converts USD prices to bolívares using the day
(parallel) rate, shows the BCV-rate dollar equivalent and the exchange gap,
and can look up current rates through a web-search grounded AI model.
"""

__version__ = "1.1.0"
