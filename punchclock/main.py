"""
Punch clock application entry point.

Builds one record store and the services on top of it, and hands them to
the screens that need them.
"""
import asyncio
import logging
import os

# IMPORTANT: Config must be set BEFORE importing Kivy modules
from kivy.config import Config

Config.set('kivy', 'exit_on_escape', '0')
Config.set('graphics', 'resizable', '1')

from kivy.app import App
from kivy.uix.screenmanager import ScreenManager
from kivy.clock import Clock

from .config import Settings
from .data.database import KeyValueMappingStore, open_database
from .data.record_store import RecordStore
from .hardware.camera import get_camera_provider
from .hardware.location import get_geocoder, get_location_provider
from .services.auth_service import AuthService
from .services.camera_service import CameraService
from .services.location_service import LocationService
from .services.punch_service import PunchService
from .presentation.notices import NoticeService
from .presentation.tasks import run_async
from .presentation.screens import AdminScreen, CameraScreen, LoginScreen, PunchScreen
from .utils.errors import PunchClockError

logger = logging.getLogger(__name__)


class WindowManager(ScreenManager):
    pass


class PunchClockApp(App):
    """Main application - screens talk to services, never to each other"""

    title = "Punch Clock"

    def __init__(self, settings=None, **kwargs):
        super().__init__(**kwargs)
        self.settings = settings or Settings.from_env()
        self.mapping = None
        self.store = None
        self.notices = NoticeService()

    def build(self):
        settings = self.settings
        db = open_database(settings.db_file, settings.encryption_key)
        self.mapping = KeyValueMappingStore(db)
        self.store = RecordStore(self.mapping)

        location_service = LocationService(
            get_location_provider(settings.use_mock_hardware, settings.mock_latitude, settings.mock_longitude),
            timeout=settings.location_timeout,
            geocoder=get_geocoder(settings.reverse_geocode and not settings.use_mock_hardware,
                                  settings.geocoder_user_agent),
        )
        camera_service = CameraService(get_camera_provider(settings.use_mock_hardware, settings.photo_dir))
        self.auth_service = AuthService(self.store)
        punch_service = PunchService(self.store, location_service)

        manager = WindowManager()
        manager.add_widget(LoginScreen(
            self.auth_service, self.notices,
            on_login=self.handle_login,
            on_admin_access=lambda: self.show('admin'),
            name='login',
        ))
        manager.add_widget(PunchScreen(
            punch_service, location_service, self.auth_service, self.notices,
            on_camera_capture=self.open_camera,
            on_logout=lambda: self.show('login'),
            name='punch',
        ))
        manager.add_widget(CameraScreen(camera_service, self.notices, name='camera'))
        manager.add_widget(AdminScreen(
            self.store, self.notices,
            on_back=lambda: self.show('login'),
            export_dir=settings.export_path,
            name='admin',
        ))

        Clock.schedule_once(lambda dt: run_async(self.check_auth_status(), self.notices), 0)
        return manager

    def show(self, screen_name):
        self.root.current = screen_name

    async def check_auth_status(self):
        """Resume a persisted session, if its employee still exists"""
        try:
            restored = await self.auth_service.restore_session()
        except PunchClockError as e:
            logger.error(f"Error checking auth status: {e}")
            return
        if restored:
            _, employee = restored
            self._enter_punch(employee)

    async def handle_login(self, session):
        employee = await self.store.get_employee(session.employee_id)
        if employee is None:
            self.notices.show_error("Login", "Employee no longer exists.")
            await self.auth_service.logout()
            return
        self._enter_punch(employee)

    def _enter_punch(self, employee):
        self.root.get_screen('punch').set_employee(employee)
        self.show('punch')

    def open_camera(self, on_capture, on_cancel):
        """Open the camera; the punch screen's handlers come back once it is done"""
        def _captured(photo):
            self.show('punch')
            on_capture(photo)

        def _cancelled():
            self.show('punch')
            on_cancel()

        self.root.get_screen('camera').open_for(_captured, _cancelled)
        self.show('camera')

    def on_stop(self):
        """Cleanup on app stop"""
        if self.mapping:
            self.mapping.close()


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    logger.info(f"Starting punch clock (db={os.path.abspath(settings.db_file)}, "
                f"mock_hardware={settings.use_mock_hardware})")
    asyncio.run(PunchClockApp(settings).async_run(async_lib='asyncio'))


if __name__ == '__main__':
    main()
