"""
Transient notices ("toasts") shown after user actions.
"""
import logging
from kivy.uix.popup import Popup
from kivy.uix.label import Label
from kivy.uix.boxlayout import BoxLayout
from kivy.clock import Clock

from .widgets import DebouncedButton

logger = logging.getLogger(__name__)

INFO_COLOR = (1, 1, 1, 1)
ERROR_COLOR = (1, 0.3, 0.3, 1)
SUCCESS_COLOR = (0.3, 0.9, 0.3, 1)


class NoticeService:
    """Auto-dismissing popups for success, info and error notices"""

    def _show(self, title: str, message: str, color, duration: float):
        popup = Popup(
            title=title,
            content=Label(text=message, color=color, halign='center'),
            size_hint=(0.8, None),
            height='220dp'
        )
        popup.open()
        Clock.schedule_once(lambda dt: popup.dismiss(), duration)
        return popup

    def show_info(self, title: str, message: str, duration: float = 3.0):
        return self._show(title, message, INFO_COLOR, duration)

    def show_error(self, title: str, message: str, duration: float = 5.0):
        logger.debug(f"Error notice: {title}: {message}")
        return self._show(title, message, ERROR_COLOR, duration)

    def show_success(self, title: str, message: str, duration: float = 3.0):
        return self._show(title, message, SUCCESS_COLOR, duration)

    def confirm(self, title: str, message: str, on_confirm):
        """
        Ask a yes/no question; on_confirm runs only on "Yes".
        """
        content = BoxLayout(orientation='vertical', spacing=10, padding=10)
        content.add_widget(Label(text=message, halign='center'))
        buttons = BoxLayout(orientation='horizontal', spacing=10, size_hint_y=None, height='50dp')
        cancel_btn = DebouncedButton(text="Cancel")
        yes_btn = DebouncedButton(text="Yes", background_color=(0.9, 0.3, 0.3, 1))
        buttons.add_widget(cancel_btn)
        buttons.add_widget(yes_btn)
        content.add_widget(buttons)

        popup = Popup(title=title, content=content, size_hint=(0.8, 0.5), auto_dismiss=False)
        cancel_btn.bind(on_release=popup.dismiss)

        def _confirmed(*args):
            popup.dismiss()
            on_confirm()

        yes_btn.bind(on_release=_confirmed)
        popup.open()
        return popup
