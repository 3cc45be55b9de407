"""
Camera screen: captures the verification photo for a punch.
"""
import logging
from kivy.uix.screenmanager import Screen
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label

from ..widgets import DebouncedButton
from ..tasks import run_async
from ...utils.errors import PunchClockError

logger = logging.getLogger(__name__)


class CameraScreen(Screen):
    """
    Captures one photo and hands it to the callback it was opened with.

    The caller passes its completion handler to open_for(); nothing is kept
    once the capture finished or was cancelled.
    """

    def __init__(self, camera_service, notices, **kwargs):
        super().__init__(**kwargs)
        self.camera_service = camera_service
        self.notices = notices
        self._on_capture = None
        self._on_cancel = None
        self._capturing = False

        layout = BoxLayout(orientation='vertical', spacing=12, padding=30)
        layout.add_widget(Label(text="Camera Capture", font_size='26sp', bold=True, size_hint_y=None, height='50dp'))
        self.status_label = Label(text="Take a photo for attendance", font_size='18sp')
        layout.add_widget(self.status_label)

        buttons = BoxLayout(orientation='horizontal', spacing=10, size_hint_y=None, height='60dp')
        self.cancel_button = DebouncedButton(text="Cancel")
        self.cancel_button.bind(on_release=lambda *a: self.cancel())
        self.capture_button = DebouncedButton(text="Capture", background_color=(0.2, 0.7, 0.3, 1))
        self.capture_button.bind(on_release=lambda *a: self.capture())
        buttons.add_widget(self.cancel_button)
        buttons.add_widget(self.capture_button)
        layout.add_widget(buttons)

        self.add_widget(layout)

    def open_for(self, on_capture, on_cancel):
        """
        Args:
            on_capture: Called with the validated PhotoData
            on_cancel: Called when the user backs out
        """
        self._on_capture = on_capture
        self._on_cancel = on_cancel
        self.status_label.text = "Take a photo for attendance"

    def _finish(self):
        callbacks = (self._on_capture, self._on_cancel)
        self._on_capture = None
        self._on_cancel = None
        return callbacks

    def cancel(self):
        if self._capturing:
            return
        _, on_cancel = self._finish()
        if on_cancel:
            on_cancel()

    def capture(self):
        if self._capturing:
            return
        run_async(self._capture(), self.notices)

    async def _capture(self):
        self._capturing = True
        self.status_label.text = "Processing..."
        try:
            photo = await self.camera_service.capture_validated()
        except PunchClockError as e:
            logger.warning(f"[CAMERA] Capture rejected: {e}")
            self.status_label.text = "Take a photo for attendance"
            self.notices.show_error("Camera", f"{e}. Please try again.")
            return
        finally:
            self._capturing = False

        on_capture, _ = self._finish()
        if on_capture:
            on_capture(photo)
