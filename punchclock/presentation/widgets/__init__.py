"""
Custom widgets for the punch clock application.
"""

from .debounced_button import DebouncedButton
from .digit_input import DigitInput

__all__ = ['DebouncedButton', 'DigitInput']
