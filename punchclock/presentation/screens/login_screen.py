"""
Login screen: phone number + 4-digit PIN.
"""
import logging
from kivy.uix.screenmanager import Screen
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label

from ..widgets import DebouncedButton, DigitInput
from ..tasks import run_async
from ...utils.errors import EmployeeNotFoundError, InvalidCredentialError, PunchClockError

logger = logging.getLogger(__name__)

PIN_LENGTH = 4


class LoginScreen(Screen):
    def __init__(self, auth_service, notices, on_login, on_admin_access, **kwargs):
        """
        Args:
            auth_service: AuthService used to validate credentials
            notices: NoticeService for user feedback
            on_login: Called with the Session after a successful login
            on_admin_access: Called when the admin button is pressed
        """
        super().__init__(**kwargs)
        self.auth_service = auth_service
        self.notices = notices
        self.login_callback = on_login
        self.admin_callback = on_admin_access
        self._busy = False

        layout = BoxLayout(orientation='vertical', spacing=12, padding=40)
        layout.add_widget(Label(text="Employee Login", font_size='28sp', bold=True))
        layout.add_widget(Label(text="Enter your details to continue", font_size='16sp'))

        layout.add_widget(Label(text="Phone Number", size_hint_y=None, height='30dp'))
        self.phone_input = DigitInput(hint_text="Enter phone number", max_length=15,
                                      size_hint_y=None, height='48dp')
        layout.add_widget(self.phone_input)

        layout.add_widget(Label(text="4-digit PIN", size_hint_y=None, height='30dp'))
        self.pin_input = DigitInput(hint_text="Enter PIN", password=True, max_length=PIN_LENGTH,
                                    size_hint_y=None, height='48dp')
        layout.add_widget(self.pin_input)

        self.login_button = DebouncedButton(text="Login", size_hint_y=None, height='60dp',
                                            background_color=(0.2, 0.6, 0.9, 1))
        self.login_button.bind(on_release=lambda *a: self.login())
        layout.add_widget(self.login_button)

        admin_button = DebouncedButton(text="Admin Panel", size_hint_y=None, height='44dp')
        admin_button.bind(on_release=lambda *a: self.admin_callback())
        layout.add_widget(admin_button)

        self.add_widget(layout)

    def on_enter(self, *args):
        self.pin_input.text = ""
        self._busy = False

    def login(self):
        phone = self.phone_input.text
        pin = self.pin_input.text
        if self._busy:
            logger.debug("[LOGIN] blocked - already logging in")
            return
        if not phone or len(pin) != PIN_LENGTH:
            self.notices.show_error("Login", f"Enter your phone number and {PIN_LENGTH}-digit PIN.")
            return
        run_async(self._login(phone, pin), self.notices)

    async def _login(self, phone, pin):
        self._busy = True
        self.login_button.text = "Logging in..."
        try:
            session = await self.auth_service.login(phone, pin)
        except EmployeeNotFoundError:
            self.notices.show_error("Login Failed", "No employee is registered with this phone number.")
        except InvalidCredentialError:
            self.notices.show_error("Login Failed", "Incorrect PIN.")
        except PunchClockError as e:
            logger.error(f"[LOGIN] Unexpected error: {e}")
            self.notices.show_error("Login Failed", f"Could not log in: {e}")
        else:
            self.pin_input.text = ""
            await self.login_callback(session)
        finally:
            self._busy = False
            self.login_button.text = "Login"
