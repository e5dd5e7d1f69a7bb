"""
Qt based front ends for asking and telling the user, made with PySide6.

These may replace the terminal defaults of a `Dispatcher`:

    Dispatcher(configuration, confirm=gui.ask_confirmation,
               notify=gui.show_notification)
"""
# NOTE: Qt's naming conventions are only used for Qt's own API here.

# 3rd party
from PySide6 import QtWidgets

TITLE = 'Open with'

def get_application():
    """
    Return the running `QApplication`. A new one is created if there is
    none, since message boxes can't exist without it.
    """
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app

def ask_confirmation(question, parent=None):
    """
    Show `question` inside a modal message box offering "Yes" and "No".
    Return True if the user chose "Yes". Closing the box counts as "No".
    """
    get_application()
    buttons = QtWidgets.QMessageBox.StandardButton
    answer = QtWidgets.QMessageBox.question(
        parent, TITLE, question, buttons.Yes | buttons.No, buttons.No)
    return answer == buttons.Yes

def show_notification(message, parent=None):
    """
    Show `message` inside an informational message box.
    """
    get_application()
    QtWidgets.QMessageBox.information(parent, TITLE, message)
