"""Widget descriptions for each field kind.

A renderer turns one field into a :class:`Widget` a frontend can draw. The
registry picks the renderer by kind; adding a kind means registering a new
renderer class, nothing else.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging

from pydantic import BaseModel, PrivateAttr

from form_engine.core.paths import join_path, resolve
from form_engine.core.state import Group
from form_engine.schemas.field import FieldDescriptor, FieldKind, FieldOption

logger = logging.getLogger(__name__)

OnChange = Callable[[Any], Any]


class Widget(BaseModel):
    path: str
    kind: str
    widget: str
    label: str = ''
    required: bool = False
    value: Any = None
    error: Optional[str] = None
    attrs: Dict[str, Any] = {}
    options: Optional[List[FieldOption]] = None
    children: Optional[List['Widget']] = None

    _on_change: Optional[OnChange] = PrivateAttr(default=None)

    def change(self, value: Any) -> Any:
        if self._on_change is None:
            raise RuntimeError(f"Widget {self.path} does not accept changes")
        return self._on_change(value)


Widget.model_rebuild()


class FieldRenderer(ABC):
    widget: str = 'input'

    def render(
        self,
        descriptor: FieldDescriptor,
        value: Any,
        error: Optional[str],
        on_change: Optional[OnChange],
        *,
        path: str,
        children: Optional[List[Widget]] = None,
    ) -> Widget:
        widget = Widget(
            path=path,
            kind=descriptor.kind.value,
            widget=self.widget,
            label=descriptor.label,
            required=descriptor.required,
            value=value,
            error=error,
            attrs=self.attrs(descriptor),
            options=descriptor.options,
            children=children,
        )
        widget._on_change = on_change
        return widget

    @abstractmethod
    def attrs(self, descriptor: FieldDescriptor) -> Dict[str, Any]:
        ...


def _hint_attrs(descriptor: FieldDescriptor, **extra) -> Dict[str, Any]:
    attrs = {'placeholder': descriptor.placeholder, **extra}
    return {key: value for key, value in attrs.items() if value is not None}


class RendererRegistry:
    def __init__(self):
        self._renderers: Dict[FieldKind, FieldRenderer] = {}

    def register(self, *kinds: FieldKind):
        def decorator(renderer_cls):
            for kind in kinds:
                self._renderers[kind] = renderer_cls()
            return renderer_cls
        return decorator

    def supports(self, kind: FieldKind) -> bool:
        return kind in self._renderers

    def copy(self) -> 'RendererRegistry':
        clone = RendererRegistry()
        clone._renderers = dict(self._renderers)
        return clone

    def unregister(self, kind: FieldKind) -> None:
        self._renderers.pop(kind, None)

    def render_fields(
        self,
        fields: Iterable[FieldDescriptor],
        state: Group,
        errors: Dict[str, str],
        make_on_change: Callable[[FieldDescriptor, str], OnChange],
        parent_path: str = '',
    ) -> List[Widget]:
        widgets = []
        for descriptor in fields:
            path = join_path(parent_path, descriptor.name)
            renderer = self._renderers.get(descriptor.kind)
            if renderer is None:
                widgets.append(unsupported_widget(descriptor, path))
                continue
            if descriptor.is_group:
                children = self.render_fields(
                    descriptor.children, state, errors, make_on_change, path
                )
                widgets.append(renderer.render(descriptor, None, None, None, path=path, children=children))
            else:
                widgets.append(renderer.render(
                    descriptor,
                    resolve(state, path, ''),
                    errors.get(path),
                    make_on_change(descriptor, parent_path),
                    path=path,
                ))
        return widgets


def unsupported_widget(descriptor: FieldDescriptor, path: str) -> Widget:
    logger.warning(f"No renderer for field type {descriptor.kind.value} at {path}")
    return Widget(
        path=path,
        kind=descriptor.kind.value,
        widget='unsupported',
        label=descriptor.label,
        error=f"Unsupported field type: {descriptor.kind.value}",
        attrs={'error_kind': 'UnsupportedFieldKind'},
    )


default_renderers = RendererRegistry()


@default_renderers.register(FieldKind.TEXT, FieldKind.EMAIL, FieldKind.TEL)
class TextInputRenderer(FieldRenderer):
    def attrs(self, descriptor):
        return _hint_attrs(descriptor, type=descriptor.kind.value, pattern=descriptor.validator_pattern)


@default_renderers.register(FieldKind.NUMBER)
class NumberInputRenderer(FieldRenderer):
    def attrs(self, descriptor):
        return _hint_attrs(descriptor, type='number', min=descriptor.min, max=descriptor.max, step=descriptor.step)


@default_renderers.register(FieldKind.TEXTAREA)
class TextareaRenderer(FieldRenderer):
    widget = 'textarea'

    def attrs(self, descriptor):
        return _hint_attrs(descriptor, rows=4)


@default_renderers.register(FieldKind.DATE, FieldKind.DATETIME)
class DateInputRenderer(FieldRenderer):
    def attrs(self, descriptor):
        input_type = 'datetime-local' if descriptor.kind == FieldKind.DATETIME else 'date'
        return _hint_attrs(descriptor, type=input_type, min=descriptor.min, max=descriptor.max)


@default_renderers.register(FieldKind.SELECT)
class SelectRenderer(FieldRenderer):
    widget = 'select'

    def attrs(self, descriptor):
        return {'empty_label': 'Select an option'}


@default_renderers.register(FieldKind.MULTISELECT)
class CheckboxGroupRenderer(FieldRenderer):
    widget = 'checkboxes'

    def attrs(self, descriptor):
        return {}


@default_renderers.register(FieldKind.BUTTONS)
class ButtonGroupRenderer(FieldRenderer):
    widget = 'buttons'

    def attrs(self, descriptor):
        return {}


@default_renderers.register(FieldKind.FILE)
class FileInputRenderer(FieldRenderer):
    widget = 'file'

    def attrs(self, descriptor):
        return {'has_upload_target': descriptor.upload is not None}


@default_renderers.register(FieldKind.GROUP)
class CardRenderer(FieldRenderer):
    widget = 'card'

    def attrs(self, descriptor):
        return {}


def toggle_option(current: Any, option_id: str, checked: bool) -> List[str]:
    """New multiselect value after ticking or unticking ``option_id``."""
    selected = list(current) if isinstance(current, (list, tuple)) else []
    if checked and option_id not in selected:
        selected.append(option_id)
    elif not checked and option_id in selected:
        selected.remove(option_id)
    return selected
