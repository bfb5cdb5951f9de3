"""Tkinter front end."""
