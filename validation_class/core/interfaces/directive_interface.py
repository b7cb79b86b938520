"""
Directive interface.

A directive is a named rule that can be attached to fields (and, when
allowed, to mixins). Behaviour is split into four optional hooks, all
no-ops by default:

* ``normalize`` runs for every field at the start of each run;
* ``before_validation`` may reshape the field or its parameter;
* ``validate`` checks the parameter and records errors;
* ``after_validation`` undoes per-run changes.

Within a phase, hooks run in the order given by each directive's
declared dependencies.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..entities.field_entity import Field, has_value, truthy

if TYPE_CHECKING:
    from ...shared.validation.validation_engine import ValidationEngine


class ValidationPhase(Enum):
    """Phases with an independent directive ordering."""
    NORMALIZATION = "normalization"
    VALIDATION = "validation"


def render_message(template: str, *values: Any) -> str:
    """
    Substitute ``%s`` placeholders in order.

    Missing values render as empty strings and surplus values are
    dropped, so overridden templates with fewer placeholders still work.
    """
    parts = template.split("%s")
    rendered = [parts[0]]
    for position, part in enumerate(parts[1:]):
        rendered.append(str(values[position]) if position < len(values) else "")
        rendered.append(part)
    return "".join(rendered)


class Directive:
    """
    Base class for directives.

    Subclasses set the class attributes and override the hooks they
    need. ``argument_types`` restricts the accepted argument types; None
    accepts anything.
    """

    name: str = ""
    mixin: bool = False
    field: bool = False
    multi: bool = False
    message: Optional[str] = None
    dependencies: Dict[str, List[str]] = {}
    argument_types: Optional[Tuple[type, ...]] = None

    def dependencies_for(self, phase: ValidationPhase) -> List[str]:
        """Names that must run before this directive in a phase."""
        return list(self.dependencies.get(phase.value, []))

    def accepts(self, argument: Any) -> bool:
        """Whether an argument has an acceptable type."""
        if argument is None or self.argument_types is None:
            return True
        return isinstance(argument, self.argument_types)

    def is_active(self, field: Field, param: Any) -> bool:
        """
        Whether checks should run for this field.

        Optional fields left blank pass silently; checks only fire when
        the field is required or a value was supplied.
        """
        return truthy(field.get("required")) or has_value(param)

    def normalize(self, engine: "ValidationEngine", field: Field, param: Any) -> None:
        pass

    def before_validation(self, engine: "ValidationEngine", field: Field, param: Any) -> None:
        pass

    def validate(self, engine: "ValidationEngine", field: Field, param: Any) -> bool:
        return True

    def after_validation(self, engine: "ValidationEngine", field: Field, param: Any) -> None:
        pass

    def error_template(self, engine: "ValidationEngine", field: Field) -> str:
        """
        Pick the message template for a failure on this field.

        Field ``messages`` win over engine ``messages``, which win over the
        directive's own default.
        """
        field_messages = field.get("messages")
        if isinstance(field_messages, dict) and self.name in field_messages:
            return field_messages[self.name]
        errors = field.get("errors")
        if isinstance(errors, dict) and self.name in errors:
            return errors[self.name]
        if self.name in engine.messages:
            return engine.messages[self.name]
        return self.message or "%s is invalid"

    def error(self, engine: "ValidationEngine", field: Field, *args: Any) -> bool:
        """
        Record a failure for a field.

        A field-level ``error`` (or a string ``errors``) replaces every
        message for that field. The message is added to both the field
        and the engine's error collections.

        Returns:
            bool: Always False, so validators can ``return self.error(...)``
        """
        override = field.get("error")
        if override is None and isinstance(field.get("errors"), str):
            override = field.get("errors")

        if override is not None:
            message = str(override)
        else:
            message = render_message(self.error_template(engine, field), field.label, *args)

        field.errors.add(message)
        engine.errors.add(message)
        return False

    def describe(self) -> Dict[str, Any]:
        """Summary used by listings."""
        return {
            "name": self.name,
            "mixin": self.mixin,
            "field": self.field,
            "multi": self.multi,
            "message": self.message or "",
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"
