from decimal import Decimal

from tests import helpers
from ledgerbook import app as app_module
from ledgerbook.app import INVALID_AMOUNT, INVALID_DATE, PopupField, PopupMode
from ledgerbook.models import StorageFailure
from ledgerbook.storage import read_entries


def _select_2024_last(app):
    app.cycle_focus()
    app.previous()
    app.cycle_focus()


def test_open_add_prefills_today(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_add(helpers.TODAY)
    popup = app.popup
    assert popup.mode is PopupMode.ADDING
    assert popup.field is PopupField.AMOUNT
    assert popup.date_text == "2024-12-15"
    assert popup.amount_text == ""
    assert popup.error is None


def test_open_edit_prefills_selected_entry(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_edit()
    popup = app.popup
    assert popup.mode is PopupMode.EDITING
    assert popup.field is PopupField.DATE
    assert (popup.date_text, popup.amount_text) == ("2025-01-05", "-75.75")
    assert popup.original.date == "2025-01-05"


def test_cycle_field_keeps_buffers(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_edit()
    app.cycle_field()
    assert app.popup.field is PopupField.AMOUNT
    app.cycle_field()
    assert app.popup.field is PopupField.DATE
    assert app.popup.amount_text == "-75.75"


def test_date_buffer_is_bounded(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_add(helpers.TODAY)
    app.cycle_field()
    helpers.type_text(app, "99")
    assert app.popup.date_text == "2024-12-15"
    app.backspace()
    app.backspace()
    helpers.type_text(app, "0x")
    assert app.popup.date_text == "2024-12-0x"


def test_amount_buffer_filters_characters(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_add(helpers.TODAY)
    helpers.type_text(app, "-5")
    assert app.popup.amount_text == "-5"
    helpers.type_text(app, "-")
    assert app.popup.amount_text == "-5"
    helpers.type_text(app, "a,+ ")
    assert app.popup.amount_text == "-5"
    helpers.type_text(app, ".25")
    assert app.popup.amount_text == "-5.25"
    helpers.type_text(app, "٣")  # non-ASCII digit
    assert app.popup.amount_text == "-5.25"


def test_backspace_on_amount(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_add(helpers.TODAY)
    helpers.type_text(app, "12")
    app.backspace()
    assert app.popup.amount_text == "1"
    app.backspace()
    app.backspace()
    assert app.popup.amount_text == ""


def test_invalid_date_keeps_popup_open(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_add(helpers.TODAY)
    helpers.type_text(app, "10")
    app.cycle_field()
    for _ in range(10):
        app.backspace()
    helpers.type_text(app, "bad")

    assert app.save_popup() is False
    assert app.popup.mode is PopupMode.ADDING
    assert app.popup.error == INVALID_DATE
    assert (app.popup.date_text, app.popup.amount_text) == ("bad", "10")

    app.type_char("2")
    assert app.popup.error is None


def test_invalid_amount(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_add(helpers.TODAY)
    helpers.type_text(app, "-")
    app.save_popup()
    assert app.popup.error == INVALID_AMOUNT
    app.backspace()
    assert app.popup.error is None
    helpers.type_text(app, "1.2.3")
    app.save_popup()
    assert app.popup.error == INVALID_AMOUNT


def test_add_appends_and_reloads(tmp_path):
    path = helpers.write_ledger(tmp_path, "test.csv", "date;amount\n2024-09-11;700\n")
    app = helpers.make_app(tmp_path, [path])
    app.open_add(helpers.TODAY)
    app.cycle_field()
    for _ in range(5):
        app.backspace()
    helpers.type_text(app, "09-12")
    app.cycle_field()
    helpers.type_text(app, "42.42")

    assert app.save_popup() is True
    assert not app.popup.active
    assert read_entries(path) == [
        app_module.Entry("2024-09-11", Decimal("700")),
        app_module.Entry("2024-09-12", Decimal("42.42")),
    ]
    assert app.report.total == "742.42"
    assert app.current_year.rows[-1] == ("September 12", "42.42")


def test_edit_rewrites_original_entry(tmp_path):
    app = helpers.make_app(tmp_path)
    _select_2024_last(app)
    app.next()  # first 2024 row: 2024-01-15;-50.25
    app.open_edit()
    app.cycle_field()
    for _ in range(len("-50.25")):
        app.backspace()
    helpers.type_text(app, "-60")

    assert app.save_popup() is True
    content = (tmp_path / "expenses.csv").read_text()
    assert "2024-01-15;-60\n" in content
    assert "-50.25" not in content
    assert app.current_year.subtotal == "-185.50"


def test_edit_uses_snapshot_not_current_selection(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_edit()  # 2025-01-05;-75.75
    app.selection.year = 0
    app.selection.entry = 0
    for _ in range(2):
        app.backspace()
    helpers.type_text(app, "20")
    assert app.save_popup() is True
    content = (tmp_path / "expenses.csv").read_text()
    assert "2025-01-20;-75.75" in content
    assert "2024-01-15;-50.25" in content


def test_edit_moves_entry_to_other_year(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_edit()  # the only 2025 entry
    for _ in range(10):
        app.backspace()
    helpers.type_text(app, "2024-04-01")
    assert app.save_popup() is True
    assert [y.year for y in app.report.years] == ["2024"]
    assert app.current_year is not None
    assert app.selection.entry < len(app.current_year.rows)


def test_cancel_discards_popup(tmp_path):
    app = helpers.make_app(tmp_path)
    before = (tmp_path / "expenses.csv").read_text()
    app.open_add(helpers.TODAY)
    helpers.type_text(app, "5")
    app.close_popup()
    assert app.popup.mode is PopupMode.INACTIVE
    assert app.popup.amount_text == ""
    assert (tmp_path / "expenses.csv").read_text() == before


def test_storage_failure_is_shown_in_popup(tmp_path, monkeypatch):
    app = helpers.make_app(tmp_path)
    report = app.report

    def broken(path, entry):
        raise StorageFailure("disk full")

    monkeypatch.setattr(app_module, "add_entry", broken)
    app.open_add(helpers.TODAY)
    helpers.type_text(app, "5")
    assert app.save_popup() is False
    assert app.popup.mode is PopupMode.ADDING
    assert app.popup.error == "Failed to save: disk full"
    assert app.report is report

    app.close_popup()
    app.open_add(helpers.TODAY)
    assert app.popup.error is None


def test_edit_target_removed_externally(tmp_path):
    app = helpers.make_app(tmp_path)
    app.open_edit()
    helpers.write_ledger(tmp_path, "expenses.csv", "date;amount\n2024-01-15;-50.25\n")
    assert app.save_popup() is False
    assert app.popup.error.startswith("Failed to save")
    assert app.popup.mode is PopupMode.EDITING
