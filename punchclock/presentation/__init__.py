"""
Kivy presentation layer: screens, widgets and notices.
"""
