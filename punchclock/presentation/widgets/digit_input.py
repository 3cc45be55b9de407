"""
Digits-only text input for phone numbers and PINs.
"""
from kivy.uix.textinput import TextInput
from kivy.properties import NumericProperty


class DigitInput(TextInput):
    """TextInput that drops non-digit characters and caps the length"""

    max_length = NumericProperty(0)  # 0 means unlimited

    def __init__(self, **kwargs):
        kwargs.setdefault('multiline', False)
        kwargs.setdefault('input_filter', None)
        super().__init__(**kwargs)

    def insert_text(self, substring, from_undo=False):
        if from_undo:
            return super().insert_text(substring, from_undo)

        digits = ''.join(ch for ch in substring if ch.isdigit())
        if self.max_length:
            room = int(self.max_length) - len(self.text)
            digits = digits[:max(room, 0)]
        if not digits:
            return
        return super().insert_text(digits, from_undo)
