"""
Admin screen for reviewing, exporting and managing attendance data.
"""
import datetime
import logging
from kivy.uix.screenmanager import Screen
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.gridlayout import GridLayout
from kivy.uix.label import Label
from kivy.uix.scrollview import ScrollView
from kivy.uix.spinner import Spinner
from kivy.uix.textinput import TextInput

from ..widgets import DebouncedButton, DigitInput
from ..tasks import run_async
from ...data.models import Employee, validate_name, validate_phone, validate_pin
from ...services.report_service import ALL_EMPLOYEES, AttendanceReport, format_export_timestamp, format_location
from ...utils.errors import PunchClockError, ValidationError

logger = logging.getLogger(__name__)

ALL_EMPLOYEES_LABEL = "All Employees"


class AdminScreen(Screen):
    def __init__(self, store, notices, on_back, export_dir=None, **kwargs):
        super().__init__(**kwargs)
        self.store = store
        self.notices = notices
        self.back_callback = on_back
        self.export_dir = export_dir
        self.report = None
        self._employee_ids = {ALL_EMPLOYEES_LABEL: ALL_EMPLOYEES}

        layout = BoxLayout(orientation='vertical', spacing=8, padding=15)

        header = BoxLayout(orientation='horizontal', size_hint_y=None, height='50dp')
        header.add_widget(Label(text="Admin Panel", font_size='24sp', bold=True))
        back_button = DebouncedButton(text="Back to App", size_hint_x=0.35)
        back_button.bind(on_release=lambda *a: self.back_callback())
        header.add_widget(back_button)
        layout.add_widget(header)

        filters = BoxLayout(orientation='horizontal', spacing=8, size_hint_y=None, height='48dp')
        self.employee_spinner = Spinner(text=ALL_EMPLOYEES_LABEL, values=[ALL_EMPLOYEES_LABEL])
        self.employee_spinner.bind(text=lambda *a: self.apply_filter())
        self.date_input = TextInput(hint_text="YYYY-MM-DD", multiline=False)
        self.date_input.bind(on_text_validate=lambda *a: self.apply_filter())
        export_button = DebouncedButton(text="Export", size_hint_x=0.6)
        export_button.bind(on_release=lambda *a: self.export_csv())
        refresh_button = DebouncedButton(text="Refresh", size_hint_x=0.6)
        refresh_button.bind(on_release=lambda *a: self.apply_filter())
        for widget in (self.employee_spinner, self.date_input, export_button, refresh_button):
            filters.add_widget(widget)
        layout.add_widget(filters)

        self.stats_label = Label(font_size='16sp', size_hint_y=None, height='36dp')
        layout.add_widget(self.stats_label)

        scroll = ScrollView(size_hint=(1, 1), do_scroll_x=False, bar_width=10)
        self.records_grid = GridLayout(cols=5, spacing=4, size_hint_y=None, row_default_height='32dp')
        self.records_grid.bind(minimum_height=self.records_grid.setter('height'))
        scroll.add_widget(self.records_grid)
        layout.add_widget(scroll)

        add_row = BoxLayout(orientation='horizontal', spacing=8, size_hint_y=None, height='48dp')
        self.name_input = TextInput(hint_text="Name", multiline=False)
        self.phone_input = DigitInput(hint_text="Phone", max_length=15)
        self.pin_input = DigitInput(hint_text="PIN", max_length=4)
        add_button = DebouncedButton(text="Add Employee", size_hint_x=0.8)
        add_button.bind(on_release=lambda *a: self.add_employee())
        for widget in (self.name_input, self.phone_input, self.pin_input, add_button):
            add_row.add_widget(widget)
        layout.add_widget(add_row)

        clear_button = DebouncedButton(text="Clear All Data", size_hint_y=None, height='44dp',
                                       background_color=(0.9, 0.2, 0.2, 1))
        clear_button.bind(on_release=lambda *a: self.clear_all_data())
        layout.add_widget(clear_button)

        self.add_widget(layout)

    def on_enter(self, *args):
        self.apply_filter()

    def _selected_date(self):
        text = self.date_input.text.strip()
        if not text:
            return None
        return datetime.date.fromisoformat(text)

    def apply_filter(self):
        try:
            date = self._selected_date()
        except ValueError:
            self.notices.show_error("Filter", "Enter the date as YYYY-MM-DD.")
            return
        employee_id = self._employee_ids.get(self.employee_spinner.text, ALL_EMPLOYEES)
        run_async(self._load(employee_id, date), self.notices)

    async def _load(self, employee_id, date):
        try:
            report = await AttendanceReport(self.store, employee_id, date).load()
        except PunchClockError as e:
            logger.error(f"Loading admin data failed: {e}")
            self.notices.show_error("Error", "Failed to load data")
            return
        self.report = report
        self._update_employees(report.employees)
        self._render(report)

    def _update_employees(self, employees):
        self._employee_ids = {ALL_EMPLOYEES_LABEL: ALL_EMPLOYEES}
        for employee in employees:
            self._employee_ids[f"{employee.name} ({employee.phone_number})"] = employee.id
        self.employee_spinner.values = list(self._employee_ids)
        if self.employee_spinner.text not in self._employee_ids:
            self.employee_spinner.text = ALL_EMPLOYEES_LABEL

    def _render(self, report):
        summary = report.summary
        self.stats_label.text = (
            f"Employees: {summary.total_employees}   Records: {summary.total_records}   "
            f"Punch Ins: {summary.punch_in_count}   Unsynced: {summary.unsynced_count}"
        )
        self.records_grid.clear_widgets()
        for title in ('Employee', 'Type', 'Time', 'Location', 'Synced'):
            self.records_grid.add_widget(Label(text=title, bold=True))
        if not report.records:
            self.records_grid.add_widget(Label(text="No records found"))
            return
        for record in report.records:
            self.records_grid.add_widget(Label(text=report.employee_name(record)))
            self.records_grid.add_widget(Label(text=record.punch_type.value))
            self.records_grid.add_widget(Label(text=format_export_timestamp(record.timestamp)))
            self.records_grid.add_widget(Label(text=format_location(record), font_size='12sp'))
            self.records_grid.add_widget(Label(text='Yes' if record.is_synced else 'No'))

    def export_csv(self):
        if self.report is None:
            self.notices.show_info("Export Info", "Nothing loaded yet.")
            return
        try:
            path = self.report.save(self.export_dir)
        except PunchClockError as e:
            logger.error(f"CSV export failed: {e}")
            self.notices.show_error("Export Error", f"Failed to export: {e}")
            return
        self.notices.show_success(
            "Export Success",
            f"Export ({len(self.report.records)} records) saved to:\n{path}"
        )

    def add_employee(self):
        try:
            name = validate_name(self.name_input.text)
            phone = validate_phone(self.phone_input.text)
            pin = validate_pin(self.pin_input.text)
        except ValidationError as e:
            self.notices.show_error("Add Employee", str(e))
            return
        run_async(self._add_employee(name, phone, pin), self.notices)

    async def _add_employee(self, name, phone, pin):
        try:
            employee = Employee(id=self.store.generate_id(), phone_number=phone, name=name, pin=pin)
            await self.store.upsert_employee(employee)
        except PunchClockError as e:
            logger.error(f"Adding employee failed: {e}")
            self.notices.show_error("Add Employee", f"Could not save employee: {e}")
            return
        self.name_input.text = ""
        self.phone_input.text = ""
        self.pin_input.text = ""
        self.notices.show_success("Add Employee", f"Employee {name} created.")
        self.apply_filter()

    def clear_all_data(self):
        self.notices.confirm(
            "Clear All Data",
            "This will permanently delete all employees\nand attendance records.",
            lambda: run_async(self._clear_all_data(), self.notices)
        )

    async def _clear_all_data(self):
        try:
            await self.store.clear_all_data()
        except PunchClockError as e:
            logger.error(f"Clearing data failed: {e}")
            self.notices.show_error("Error", "Failed to clear data")
            return
        self.notices.show_success("Cleared", "All data cleared successfully")
        self.apply_filter()
