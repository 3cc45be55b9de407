"""
Debounced button widget to prevent double taps.
"""
import time
from kivy.uix.button import Button
from kivy.properties import NumericProperty


class DebouncedButton(Button):
    """Button that swallows touches arriving within debounce_seconds of the last one"""

    debounce_seconds = NumericProperty(0.3)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._last_touch_time = 0.0

    def on_touch_down(self, touch):
        if not self.collide_point(*touch.pos):
            return super().on_touch_down(touch)

        now = time.monotonic()
        if now - self._last_touch_time < self.debounce_seconds:
            return True  # Consume the event without action
        self._last_touch_time = now

        return super().on_touch_down(touch)
