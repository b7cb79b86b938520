"""
Multi-value expander.

When a list is submitted for a field that allows multiples, the field
is cloned once per element as ``name:index``. Each clone is validated
like any other field, then folded back: its value returns to its index
in the list and its errors are copied onto the original field.
"""

from typing import TYPE_CHECKING, Any, List, Optional

from ...core.entities.field_entity import Field
from ...core.entities.params_entity import DEFAULT_ARRAY_DELIMITER, indexed_name
from ...shared.logging.logger_interface import LoggerInterface
from ...shared.logging.structured_logger import get_logger

if TYPE_CHECKING:
    from ...shared.validation.validation_engine import ValidationEngine


class MultiValueExpander:
    """Creates and collapses per-element field clones."""

    def __init__(
        self,
        array_delimiter: str = DEFAULT_ARRAY_DELIMITER,
        logger: Optional[LoggerInterface] = None
    ):
        self.array_delimiter = array_delimiter
        self.logger = logger or get_logger(__name__)

    def expand(self, engine: "ValidationEngine", field: Field, values: List[Any]) -> List[str]:
        """
        Replace a list-valued field with one clone per element.

        Clones are named ``{name}:{index}``, labelled ``{label} #{index+1}``
        and may not expand further. They are queued right after the
        original in the current run, and the original list parameter is
        removed until the clones collapse.

        Args:
            engine: Engine running the validation
            field: Field receiving the list
            values: Submitted list

        Returns:
            List[str]: Clone names, in element order
        """
        run = engine.current_run
        names: List[str] = []

        for index, value in enumerate(values):
            name = indexed_name(field.name, index, self.array_delimiter)
            clone = field.copy(name, {"label": f"{field.label} #{index + 1}", "multiples": 0})
            clone.directives.pop("alias", None)
            engine.fields[name] = clone
            engine.params[name] = value
            if run is not None:
                run.clones[name] = (field.name, index)
            names.append(name)

        engine.params.pop(field.name, None)
        if run is not None:
            run.replace(field.name, names)

        self.logger.debug(
            f"Expanded {field.name} into {len(names)} clones",
            field=field.name,
            clones=names
        )
        return names

    def collapse(self, engine: "ValidationEngine", clone: Field) -> bool:
        """
        Fold a clone back into its original field.

        Fields that are not clones of the current run are left alone.

        Returns:
            bool: True when the field was a clone and has been removed
        """
        run = engine.current_run
        if run is None or clone.name not in run.clones:
            return False

        source, index = run.clones.pop(clone.name)
        value = engine.params.pop(clone.name, clone.value)

        collected = engine.params.get(source)
        if not isinstance(collected, list):
            collected = []
        while len(collected) <= index:
            collected.append(None)
        collected[index] = value
        engine.params[source] = collected

        original = engine.fields.get(source)
        if original is not None:
            original.errors.extend(clone.errors)

        engine.fields.pop(clone.name, None)
        run.retired[clone.name] = clone
        return True
