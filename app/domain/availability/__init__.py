"""Agent weekly availability"""
