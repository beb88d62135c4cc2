"""Tests for widget rendering and the renderer registry."""
from conftest import field_named
from form_engine.core.paths import resolve
from form_engine.schemas.field import FieldKind
from form_engine.services.interpreter import FormInterpreter, initialize
from form_engine.services.renderers import (
    FieldRenderer,
    RendererRegistry,
    default_renderers,
    toggle_option,
)


def by_path(widgets):
    found = {}
    for widget in widgets:
        found[widget.path] = widget
        found.update(by_path(widget.children or []))
    return found


def test_every_kind_has_a_default_renderer():
    for kind in FieldKind:
        assert default_renderers.supports(kind)


def test_render_mirrors_schema(interpreter, session):
    widgets = by_path(interpreter.render(session))

    assert set(widgets) == {"title", "tags", "plan", "resume", "address", "address.city", "address.zip"}
    assert widgets["title"].widget == "input"
    assert widgets["title"].attrs["type"] == "text"
    assert widgets["title"].required is True
    assert widgets["tags"].widget == "checkboxes"
    assert [option.id for option in widgets["tags"].options] == ["a", "b"]
    assert widgets["plan"].value == "free"
    assert widgets["address"].widget == "card"
    assert [child.path for child in widgets["address"].children] == ["address.city", "address.zip"]


def test_render_carries_errors(interpreter, session, nested_fields):
    interpreter.on_field_change(session, field_named(nested_fields, "address", "zip"), "1", "address")
    widgets = by_path(interpreter.render(session))
    assert widgets["address.zip"].error == "Invalid ZIP"
    assert widgets["address.zip"].value == "1"
    assert widgets["address.city"].error is None


def test_widget_change_goes_through_interpreter(interpreter, session):
    widgets = by_path(interpreter.render(session))
    widgets["address.city"].change("Pune")
    widgets["tags"].change(toggle_option(widgets["tags"].value, "b", True))

    assert resolve(session.state, "address.city") == "Pune"
    assert resolve(session.state, "tags") == ["b"]


def test_date_widgets(registry):
    widgets = default_renderers.render_fields(
        registry.get("basic").fields, initialize(registry.get("basic").fields), {}, lambda *_: None
    )
    start = by_path(widgets)["start"]
    assert start.attrs == {"type": "date", "min": "2024-01-01"}


def test_missing_renderer_is_reported_not_raised(registry, transport, session):
    renderers = default_renderers.copy()
    renderers.unregister(FieldKind.FILE)
    interpreter = FormInterpreter(registry, transport, renderers)

    resume = by_path(interpreter.render(session))["resume"]

    assert resume.widget == "unsupported"
    assert resume.error == "Unsupported field type: file"
    assert resume.attrs["error_kind"] == "UnsupportedFieldKind"
    assert default_renderers.supports(FieldKind.FILE)


def test_registering_a_renderer(registry, transport, session):
    renderers = RendererRegistry()

    @renderers.register(FieldKind.TEXT)
    class Plain(FieldRenderer):
        widget = "plain"

        def attrs(self, descriptor):
            return {"upper": descriptor.name.upper()}

    widgets = by_path(FormInterpreter(registry, transport, renderers).render(session))
    assert widgets["title"].widget == "plain"
    assert widgets["title"].attrs == {"upper": "TITLE"}
    assert widgets["tags"].widget == "unsupported"


class TestToggleOption:

    def test_check_appends(self):
        assert toggle_option(["a"], "b", True) == ["a", "b"]

    def test_check_is_idempotent(self):
        assert toggle_option(["a"], "a", True) == ["a"]

    def test_uncheck_removes(self):
        assert toggle_option(["a", "b"], "a", False) == ["b"]

    def test_non_list_value_starts_empty(self):
        assert toggle_option("", "a", True) == ["a"]

    def test_does_not_mutate_input(self):
        current = ["a"]
        toggle_option(current, "b", True)
        assert current == ["a"]
