"""
Session Bridge for NodeScope.

Re-emits session-state, breadcrumb and error notifications from the editor
core as Qt signals, so widgets can bind to the core with plain signal/slot
connections.
"""

import logging
from typing import TYPE_CHECKING, Any, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from nodescope.core.breadcrumbs import Crumb
from nodescope.core.errors import EditorError
from nodescope.core.messages import ROOT, Message, SwitchToGraphPath

if TYPE_CHECKING:
    from nodescope.core.editor_core import EditorCore

logger = logging.getLogger(__name__)


class SessionSignals(QObject):
    """
    Qt face of an EditorCore.

    Signals:
        context_changed: Emitted when the live graph context changes (key)
        selection_changed: Emitted when the selected node changes (handle or None)
        output_changed: Emitted when the output node changes (handle or None)
        render_result_changed: Emitted with each new render world
        node_types_changed: Emitted with the catalog's type names
        breadcrumbs_changed: Emitted with the trail's labels
        command_failed: Emitted when a dispatched message fails (message name, error text)
    """

    context_changed = pyqtSignal(str)
    selection_changed = pyqtSignal(object)
    output_changed = pyqtSignal(object)
    render_result_changed = pyqtSignal(object)
    node_types_changed = pyqtSignal(list)
    breadcrumbs_changed = pyqtSignal(list)
    command_failed = pyqtSignal(str, str)

    def __init__(self, core: "EditorCore", parent: Optional[QObject] = None):
        """
        Initialize the bridge and register with the core.

        Args:
            core: EditorCore instance
            parent: Parent object
        """
        super().__init__(parent)
        self._core = core

        core.state.on_change(self._on_state_change)
        core.breadcrumbs.on_change(self._on_breadcrumbs_change)
        core.on_error(self._on_error)

    @property
    def core(self) -> "EditorCore":
        return self._core

    def select_crumb(self, index: int) -> bool:
        """Slot for breadcrumb buttons."""
        crumbs = self._core.breadcrumbs.crumbs
        if not 0 <= index < len(crumbs):
            logger.warning(f"Breadcrumb index out of range: {index}")
            return False
        target = ROOT if index == 0 else crumbs[index].context
        return self._core.dispatch(SwitchToGraphPath(target))

    def _on_state_change(self, field_name: str, value: Any) -> None:
        if field_name == "current_context":
            self.context_changed.emit(str(value) if value is not None else "")
        elif field_name == "selected_node":
            self.selection_changed.emit(value)
        elif field_name == "output_node":
            self.output_changed.emit(value)
        elif field_name == "render_result":
            self.render_result_changed.emit(value)
        elif field_name == "node_types":
            self.node_types_changed.emit([t.name for t in value])

    def _on_breadcrumbs_change(self, crumbs: List[Crumb]) -> None:
        self.breadcrumbs_changed.emit([crumb.label for crumb in crumbs])

    def _on_error(self, message: Message, error: EditorError) -> None:
        self.command_failed.emit(type(message).__name__, str(error))
