# UI.py
""""PySide6 user interface for the calculator.

Structure
---------
- Calculator UI: main window with displays and button grid
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Build window, displays, layout and buttons
- Translate button clicks and key presses into CalculatorEngine calls
- Render the DisplayState the engine returns (primary, secondary, error)
- Keep the display readable (auto-resizing font, dark/light mode)
- Clipboard integration: copy the result, Shift + click pastes a number


Responsibilities (Settings)
---------------------------

- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input (e.g. minimum digit cap)
- Save and apply theme / digit cap changes immediately


The engine is synchronous; every event is handled to completion on the Qt
thread before the next one.
"""""

from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QTimer, Signal
import logging
import sys
from pathlib import Path
from pynput.keyboard import Controller
import pyperclip
from . import error as E  # Imports error.py as a module
from . import config_manager as config_manager  # Imports config_manager.py as a module
from . import CalculatorEngine as CalculatorEngine  # Imports CalculatorEngine.py as a module

logger = logging.getLogger(__name__)

# Resolve project root depending on run mode (Script or .exe)
if getattr(sys, 'frozen', False):
    # We are running in a PyInstaller bundle (.exe)
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    # We are running in a normal Python environment (.py)
    PROJECT_ROOT = Path(__file__).resolve().parent.parent


DIGIT_BUTTONS = "0123456789"
OPERATOR_BUTTONS = ["+", "−", "×", "÷"]
COPY_LABEL = '📋'
PASTE_LABEL = '📑'
SETTINGS_LABEL = '⚙️'

# Keyboard shortcuts that are not plain button texts
KEY_ACTIONS = {
    Qt.Key.Key_Return: "=",
    Qt.Key.Key_Enter: "=",
    Qt.Key.Key_Backspace: "⌫",
    Qt.Key.Key_Delete: "CE",
    Qt.Key.Key_Escape: "C",
}

TEXT_ACTIONS = {
    "+": "+",
    "-": "−",
    "*": "×",
    "x": "×",
    "/": "÷",
    ".": ".",
    ",": ".",
    "%": "%",
    "=": "=",
}


def is_shift_pressed():
    """""

    Small and simple check, whether shift is pressed or not.
    Used for the "shift to paste" setting.

    """""

    keyboard_controller = Controller()
    return keyboard_controller.shift_pressed


def paste_characters(text):
    """""

    Checks clipboard text and returns (negative, characters) to feed into the engine,
    or None if the text is not a plain decimal number.

    """""

    text = text.strip().replace(",", ".")
    negative = text.startswith("-")
    if negative:
        text = text[1:]

    if not text or text.count(".") > 1 or any(char not in "0123456789." for char in text):
        return None
    if not any(char in DIGIT_BUTTONS for char in text):
        return None
    return negative, text


class SettingsDialog(QtWidgets.QDialog):
    """""

    This class is responsible for managing the settings window, saving the new settings and opening and error
    message if something went wrong.

    All of the Settings can be seperated into two categories:
    1. Checkboxes   (Managed with True or False)
    2. Input Fields (Managed as a String, stored as int)

    """""

    settings_saved = Signal()  # Signal to tell the main window to update

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}  # Dictionary, in which all of the Widgets (Setting options) are saved and stored.

        # --- 1. Window Setup ---
        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(320, 200)

        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            # --- 3a. Checkbox Builder (for Boolean settings) ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- 3b. Input Field Builder (for Integer settings) ---
            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                minimum = config_manager.SETTING_MINIMUMS.get(key_value)
                suffix = f" (min. {minimum}):" if minimum is not None else ":"
                label = QtWidgets.QLabel(description + suffix)
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder

                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            # --- 1. Handle Checkboxes ---
            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            # --- 2. Handle Input Fields (like 'max_digits') ---
            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()

                # If user left it blank, keep the old value
                if new_value_str == "":
                    continue

                try:
                    new_value_int = int(new_value_str)
                    minimum = config_manager.SETTING_MINIMUMS.get(key_value)
                    if minimum is not None and new_value_int < minimum:
                        raise ValueError(f"'{new_value_int}' is too small. Minimum is {minimum}.")
                except ValueError as e:
                    logger.info("Invalid input for %s: %s", key_value, e)
                    QtWidgets.QMessageBox.critical(
                        self, "Invalid Input:",
                        f"Error 4502: {E.ERROR_MESSAGES['4502']}{key_value}\n\n{e}\n\nPlease correct your input.")
                    return  # Stop saving!

                setting_value_list[key_value] = new_value_int

        # --- 3. Write to File ---
        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(
                self, "Error", f"Error 4501: {E.ERROR_MESSAGES['4501']}{config_manager.config_json}")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class CalculatorWindow(QtWidgets.QWidget):
    # --- Class-level attributes for button hold logic ---
    initial_delay = 500
    repeat_interval = 100

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")

        # --- 2. Instance State Variables ---
        self.engine = CalculatorEngine.CalculatorEngine(max_digits=config_manager.get_max_digits())
        self.shift_is_held = False
        self.first_run = True  # For font resizing logic
        self.was_held = False
        self.held_button_value = None
        self.hold_timer = QTimer(self)  # Timer for button hold
        self.hold_timer.timeout.connect(self.handle_hold_tick)
        self.is_error = False

        # --- 3. Window Setup ---
        icon_path = PROJECT_ROOT / "icons" / "icon.png"
        if icon_path.exists():
            self.setWindowIcon(QtGui.QIcon(str(icon_path)))
        self.button_objects = {}  # Dictionary to store button widgets
        self.setWindowTitle("Calculator")
        self.resize(320, 480)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        # --- 4. Display Setup ---
        # Secondary line: memory indicator left, committed expression right
        status_row = QtWidgets.QHBoxLayout()
        self.memory_label = QtWidgets.QLabel("")
        self.equation_label = QtWidgets.QLabel("")
        self.equation_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        status_row.addWidget(self.memory_label)
        status_row.addWidget(self.equation_label, 1)
        main_v_layout.addLayout(status_row)

        self.display = QtWidgets.QLineEdit("0")
        self.display.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.display.setReadOnly(True)
        font = self.display.font()
        font.setPointSize(46)
        self.display.setFont(font)
        self.display.setSizePolicy(expanding_policy)
        main_v_layout.addWidget(self.display, 1)

        # --- 5. Button Grid Setup ---
        button_container = QtWidgets.QWidget()
        main_v_layout.addWidget(button_container, 3)
        button_grid = QtWidgets.QGridLayout(button_container)
        button_grid.setSpacing(0)
        button_grid.setContentsMargins(0, 0, 0, 0)

        for i in range(7):  # vertical
            button_grid.setRowStretch(i, 1)
        for j in range(4):  # horizontal
            button_grid.setColumnStretch(j, 1)

        # (text, row, column, column span)
        self.buttons = [
            ('MC', 0, 0, 1), ('MR', 0, 1, 1), ('M+', 0, 2, 1), ('M−', 0, 3, 1),
            ('%', 1, 0, 1), ('CE', 1, 1, 1), ('C', 1, 2, 1), ('⌫', 1, 3, 1),
            ('7', 2, 0, 1), ('8', 2, 1, 1), ('9', 2, 2, 1), ('÷', 2, 3, 1),
            ('4', 3, 0, 1), ('5', 3, 1, 1), ('6', 3, 2, 1), ('×', 3, 3, 1),
            ('1', 4, 0, 1), ('2', 4, 1, 1), ('3', 4, 2, 1), ('−', 4, 3, 1),
            ('±', 5, 0, 1), ('0', 5, 1, 1), ('.', 5, 2, 1), ('+', 5, 3, 1),
            (SETTINGS_LABEL, 6, 0, 1), (COPY_LABEL, 6, 1, 1), ('=', 6, 2, 2)
        ]

        # Buttons that support "press and hold"
        HOLD_BUTTONS = list(DIGIT_BUTTONS) + ['⌫']

        # --- 6. Button Creation Loop ---
        for text, row, col, span in self.buttons:
            button = QtWidgets.QPushButton(text)
            button.setSizePolicy(expanding_policy)
            button.setFocusPolicy(Qt.FocusPolicy.NoFocus)  # keep key events on the window

            if text == SETTINGS_LABEL:
                button.clicked.connect(self.open_settings)
            elif text in HOLD_BUTTONS:
                button.pressed.connect(lambda val=text: self.handle_button_pressed_hold(val))
                button.released.connect(self.handle_button_released_hold)
                button.clicked.connect(lambda checked=False, val=text: self.handle_button_clicked_hold(val))
            else:
                button.clicked.connect(lambda checked=False, val=text: self.handle_button_press(val))

            button_grid.addWidget(button, row, col, 1, span)
            self.button_objects[text] = button

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.update_darkmode()
        self.render(self.engine.display())

    # --- Button Hold Logic ---
    def handle_button_pressed_hold(self, value):
        self.was_held = False
        self.held_button_value = value
        self.hold_timer.setInterval(self.initial_delay)
        self.hold_timer.start()

    def handle_button_released_hold(self):
        self.hold_timer.stop()
        self.held_button_value = None

    def handle_button_clicked_hold(self, value):
        # A click that ends a hold was already handled by the timer
        if not self.was_held:
            self.handle_button_press(value)

    def handle_hold_tick(self):
        self.was_held = True
        if self.hold_timer.interval() == self.initial_delay:
            self.hold_timer.setInterval(self.repeat_interval)

        if self.held_button_value:
            self.handle_button_press(self.held_button_value)

    # --- Window/Key Event Handlers ---
    def resizeEvent(self, event):
        super().resizeEvent(event)

        if self.first_run == False:
            for button_instance in self.button_objects.values():
                new_size = max(12, int(button_instance.height() / 4))
                font = button_instance.font()
                font.setPointSize(new_size)
                button_instance.setFont(font)
        else:
            for button_instance in self.button_objects.values():
                font = button_instance.font()
                font.setPointSize(12)
                button_instance.setFont(font)
            self.first_run = False

        self.update_font_size_display()

    def update_button_labels(self):
        """
        Toggle the clipboard button label depending on Shift state.
        - Shift held   → show 📑 (Paste)
        - Shift up     → show 📋 (Copy)
        """
        clipboard_button = self.button_objects.get(COPY_LABEL)
        if not clipboard_button:
            return
        if self.shift_is_held and self.setting_value_list["shift_to_paste"]:
            clipboard_button.setText(PASTE_LABEL)
        else:
            clipboard_button.setText(COPY_LABEL)

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_Shift:
            self.shift_is_held = True
            self.update_button_labels()
        elif key in KEY_ACTIONS:
            self.handle_button_press(KEY_ACTIONS[key])
            return
        else:
            text = event.text()
            if len(text) == 1 and text in DIGIT_BUTTONS:
                self.handle_button_press(text)
                return
            if text in TEXT_ACTIONS:
                self.handle_button_press(TEXT_ACTIONS[text])
                return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = False
            self.update_button_labels()
        super().keyReleaseEvent(event)

    def handle_button_press(self, value):
        engine = self.engine
        actions = {
            '=': engine.submit_equals,
            '.': engine.submit_decimal_point,
            '%': engine.submit_percent,
            '±': engine.submit_sign,
            '⌫': engine.submit_backspace,
            'CE': engine.submit_clear_entry,
            'C': engine.submit_full_reset,
            'MC': engine.memory_clear,
            'MR': engine.memory_recall,
            'M+': engine.memory_add,
            'M−': engine.memory_subtract,
        }

        if value in DIGIT_BUTTONS:
            state = engine.submit_digit(value)
        elif value in OPERATOR_BUTTONS:
            state = engine.submit_operator(value)
        elif value == COPY_LABEL or value == PASTE_LABEL:
            self.handle_clipboard()
            return
        elif value in actions:
            state = actions[value]()
        else:
            logger.debug("Ignoring unknown button %r", value)
            return

        self.render(state)

    def render(self, state):
        """Show a DisplayState returned by the engine."""
        primary_text, secondary_text, is_error = state
        self.display.setText(primary_text)
        self.equation_label.setText(secondary_text)
        self.memory_label.setText("M" if self.engine.has_memory else "")

        if is_error != self.is_error:
            self.is_error = is_error
            self.update_display_style()

        self.update_font_size_display()

    # --- Clipboard ---
    def handle_clipboard(self):
        paste_mode = self.setting_value_list["shift_to_paste"] and (self.shift_is_held or is_shift_pressed())

        if paste_mode:
            clipboard_text = QtWidgets.QApplication.clipboard().text()
            self.paste_number(clipboard_text)
            return

        try:
            pyperclip.copy(self.display.text())
        except pyperclip.PyperclipException as e:
            # No system copy mechanism available, use Qt's clipboard instead
            logger.warning("pyperclip failed, falling back to Qt clipboard: %s", e)
            QtWidgets.QApplication.clipboard().setText(self.display.text())

    def paste_number(self, clipboard_text):
        """Replace the current operand with a number taken from the clipboard."""
        parsed = paste_characters(clipboard_text)
        if parsed is None:
            logger.info("Clipboard text %r is not a number", clipboard_text)
            self.show_error_box("4001", f"Clipboard: {clipboard_text[:40]!r}")
            return

        negative, characters = parsed
        engine = self.engine
        state = engine.submit_clear_entry()
        for char in characters:
            if char == ".":
                state = engine.submit_decimal_point()
            else:
                state = engine.submit_digit(char)
        if negative:
            state = engine.submit_sign()
        self.render(state)

    def show_error_box(self, error_code, details):
        error_box = QtWidgets.QMessageBox(self)
        error_box.setIcon(QtWidgets.QMessageBox.Icon.Critical)
        error_box.setWindowTitle("Calculator")
        error_box.setText(f"Error {error_code}: {E.ERROR_MESSAGES.get(error_code, 'Unknown error')}")
        error_box.setInformativeText(details)
        error_box.setStandardButtons(QtWidgets.QMessageBox.StandardButton.Ok)
        error_box.setStyleSheet(self.get_message_box_stylesheet())
        error_box.exec()

    # --- Display Styling ---
    def update_font_size_display(self):
        # --- Dynamic Font Resizing for Display ---
        current_text = self.display.text()
        MAX_FONT_SIZE = 60
        MIN_FONT_SIZE = 10
        STEP = 0.5

        font = self.display.font()
        current_size = font.pointSizeF()

        margins = self.display.textMargins()
        padding = margins.left() + margins.right() + 10
        available_width = self.display.width() - padding

        # --- Shrink font if too big ---
        while current_size > MIN_FONT_SIZE:
            font.setPointSizeF(current_size)
            if QtGui.QFontMetrics(font).horizontalAdvance(current_text) <= available_width:
                break
            current_size -= STEP

        # --- Grow font while it still fits ---
        while current_size + STEP <= MAX_FONT_SIZE:
            font.setPointSizeF(current_size + STEP)
            if QtGui.QFontMetrics(font).horizontalAdvance(current_text) > available_width:
                break
            current_size += STEP

        font.setPointSizeF(current_size)
        self.display.setFont(font)

    def update_display_style(self):
        color = "white" if self.setting_value_list["darkmode"] == True else "black"
        if self.is_error:
            color = "#e53935"
        background = "background-color: #121212; " if self.setting_value_list["darkmode"] == True else ""
        self.display.setStyleSheet(f"{background}color: {color}; font-weight: bold;")

    def update_darkmode(self):
        # --- Apply Dark/Light Mode to all buttons ---
        if self.setting_value_list["darkmode"] == True:
            for text, button in self.button_objects.items():
                if text == '=':
                    button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
                else:
                    button.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")

            self.setStyleSheet("background-color: #121212;")
            self.equation_label.setStyleSheet("color: #aaaaaa;")
            self.memory_label.setStyleSheet("color: #aaaaaa;")

        else:
            for text, button in self.button_objects.items():
                if text == '=':
                    button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
                else:
                    button.setStyleSheet("font-weight: normal;")

            self.setStyleSheet("")
            self.equation_label.setStyleSheet("color: #666666;")
            self.memory_label.setStyleSheet("color: #666666;")

        self.update_display_style()

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()  # modal

        # --- Reload settings after dialog closes ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.engine.max_digits = config_manager.get_max_digits()
        self.update_button_labels()
        self.update_darkmode()

    def get_message_box_stylesheet(self):
        if self.setting_value_list["darkmode"] == True:
            return """
                QMessageBox {
                    background-color: #121212;
                    color: white;
                }
                QLabel {
                    color: white;
                }
                QPushButton {
                    background-color: #2e2e2e;
                    color: white;
                    border: 1px solid #444444;
                    padding: 5px 15px;
                }
                QPushButton:hover {
                    background-color: #444444;
                }
            """
        else:
            return ""


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
