"""
Employee punch clock: phone + PIN login, photo and GPS verified punches,
and an admin panel for reviewing and exporting attendance.
"""

__version__ = '1.0.0'
