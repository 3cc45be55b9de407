"""
Punch screen: shows today's status and offers the next punch.
"""
import datetime
import logging
from kivy.uix.screenmanager import Screen
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label
from kivy.clock import Clock

from ..widgets import DebouncedButton
from ..tasks import run_async
from ...data.models import PunchType
from ...utils.errors import PunchClockError

logger = logging.getLogger(__name__)

CLOCK_REFRESH_SECONDS = 60


def format_time(dt: datetime.datetime) -> str:
    return dt.astimezone().strftime('%I:%M %p').lstrip('0')


def format_day(dt: datetime.datetime) -> str:
    return dt.astimezone().strftime('%A, %b %d')


class PunchScreen(Screen):
    def __init__(self, punch_service, location_service, auth_service, notices,
                 on_camera_capture, on_logout, **kwargs):
        """
        Args:
            punch_service: PunchService for status and punches
            location_service: LocationService for the location line
            auth_service: AuthService, used to log out
            notices: NoticeService for user feedback
            on_camera_capture: Called with (on_capture, on_cancel) to open the camera
            on_logout: Called after the session was cleared
        """
        super().__init__(**kwargs)
        self.punch_service = punch_service
        self.location_service = location_service
        self.auth_service = auth_service
        self.notices = notices
        self.camera_callback = on_camera_capture
        self.logout_callback = on_logout

        self.employee = None
        self.current_location = None
        self.next_punch = PunchType.IN
        self._busy = False
        self._clock_event = None

        layout = BoxLayout(orientation='vertical', spacing=8, padding=20)
        self.greeting_label = Label(font_size='24sp', bold=True, size_hint_y=None, height='44dp')
        self.date_label = Label(font_size='16sp', size_hint_y=None, height='28dp')
        self.time_label = Label(font_size='16sp', size_hint_y=None, height='28dp')
        self.location_label = Label(text="Location: Getting location...", font_size='15sp',
                                    size_hint_y=None, height='28dp')
        self.last_punch_label = Label(font_size='15sp', size_hint_y=None, height='28dp')
        self.count_label = Label(font_size='15sp', size_hint_y=None, height='28dp')
        for widget in (self.greeting_label, self.date_label, self.time_label,
                       self.location_label, self.last_punch_label, self.count_label):
            layout.add_widget(widget)

        self.punch_button = DebouncedButton(text="Tap to Punch In", font_size='22sp',
                                            size_hint_y=None, height='90dp',
                                            background_color=(0.2, 0.7, 0.3, 1))
        self.punch_button.bind(on_release=lambda *a: self.request_punch())
        layout.add_widget(self.punch_button)

        self.state_label = Label(font_size='16sp', size_hint_y=None, height='30dp')
        layout.add_widget(self.state_label)
        layout.add_widget(Label(text="(You will be asked to take a photo)", font_size='13sp',
                                size_hint_y=None, height='24dp'))

        actions = BoxLayout(orientation='horizontal', spacing=10, size_hint_y=None, height='50dp')
        refresh_button = DebouncedButton(text="Refresh")
        refresh_button.bind(on_release=lambda *a: self.refresh())
        logout_button = DebouncedButton(text="Logout")
        logout_button.bind(on_release=lambda *a: self.logout())
        actions.add_widget(refresh_button)
        actions.add_widget(logout_button)
        layout.add_widget(actions)

        self.summary_label = Label(font_size='14sp', halign='left', valign='top')
        layout.add_widget(self.summary_label)

        self.add_widget(layout)

    def set_employee(self, employee):
        self.employee = employee
        self.current_location = None
        self.greeting_label.text = f"Hello, {employee.name}"

    def on_enter(self, *args):
        self.update_clock()
        self._clock_event = Clock.schedule_interval(self.update_clock, CLOCK_REFRESH_SECONDS)
        run_async(self._load(quiet=True), self.notices)

    def on_leave(self, *args):
        if self._clock_event:
            self._clock_event.cancel()
            self._clock_event = None

    def update_clock(self, *args):
        now = datetime.datetime.now().astimezone()
        self.date_label.text = f"Today: {format_day(now)}"
        self.time_label.text = format_time(now)

    def refresh(self):
        if self._busy:
            return
        run_async(self._load(quiet=False), self.notices)

    async def _load(self, quiet=True):
        if self.employee is None:
            return
        self._busy = True
        try:
            await self._load_status()
            location = await self.location_service.get_location_with_timeout()
            if location is not None:
                self.current_location = location
            self._show_location()
            if not quiet:
                self.notices.show_success("Refreshed", "Status refreshed!")
        except PunchClockError as e:
            logger.error(f"[PUNCH] Failed to load status: {e}")
            self.notices.show_error("Error", "Failed to refresh status")
        finally:
            self._busy = False

    async def _load_status(self):
        status = await self.punch_service.status(self.employee.id)
        self.next_punch = PunchType.OUT if status.is_punched_in else PunchType.IN

        self.punch_button.text = f"Tap to Punch {self.next_punch.value.title()}"
        self.state_label.text = f"Status: You are currently {status.state.value.replace('_', ' ')}"
        if status.last_punch_time:
            self.last_punch_label.text = (
                f"Last Punch: PUNCHED {status.last_punch_type.value} at {format_time(status.last_punch_time)}"
            )
        else:
            self.last_punch_label.text = "Last Punch: No punches today"
        self.count_label.text = f"Today's Records: {len(status.today_records)} punches"
        self.summary_label.text = "\n".join(
            f"{record.punch_type.value}    {format_time(record.timestamp)}"
            for record in status.today_records
        )

    def _show_location(self):
        if self.current_location is None:
            self.location_label.text = "Location: unavailable"
        else:
            display = self.location_service.format_location_for_display(self.current_location)
            self.location_label.text = f"Location: {display}"

    def request_punch(self):
        if self._busy or self.employee is None:
            return
        self.camera_callback(self.complete_punch, self.cancel_punch)

    def cancel_punch(self):
        logger.info("[PUNCH] Photo capture cancelled")

    def complete_punch(self, photo):
        run_async(self._complete_punch(photo), self.notices)

    async def _complete_punch(self, photo):
        self._busy = True
        self.punch_button.text = "Processing..."
        try:
            result = await self.punch_service.punch(self.employee, photo, self.current_location)
            if result.success:
                record = result.record
                where = self.location_service.format_location_for_display(record.location)
                self.notices.show_success(
                    f"Punched {record.punch_type.value}",
                    f"Punched {record.punch_type.value} at {format_time(record.timestamp)}\n{where}\nPhoto saved"
                )
            else:
                self.notices.show_error("Punch Failed", result.error or "Failed to record attendance.")
            await self._load_status()
        except PunchClockError as e:
            logger.error(f"[PUNCH] Failed to refresh after punch: {e}")
            self.notices.show_error("Error", "Failed to record attendance. Please try again.")
        finally:
            self._busy = False
            self.punch_button.text = f"Tap to Punch {self.next_punch.value.title()}"

    def logout(self):
        if self._busy:
            return
        run_async(self._logout(), self.notices)

    async def _logout(self):
        try:
            await self.auth_service.logout()
        except PunchClockError as e:
            logger.error(f"[PUNCH] Logout error: {e}")
            self.notices.show_error("Logout", "Logout failed")
            return
        self.employee = None
        self.logout_callback()
        self.notices.show_success("Logout", "Logged out successfully")
