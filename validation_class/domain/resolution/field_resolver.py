"""
Field resolver.

Turns raw field and mixin declarations into fully resolved fields:
directive keys are checked against the registry, mixins and
``mixin_field`` templates are merged in, defaults are filled and alias
collisions are rejected. Every problem found here is a programming
error in the declarations and raises ConfigurationError.
"""

import copy
import re
from typing import Any, Dict, List, Optional

from .merge_service import merge_field_into_field, merge_mixin_into_field
from ...core.entities.field_entity import Field, as_list
from ...infrastructure.registry.directive_registry import DirectiveRegistry
from ...infrastructure.registry.filter_registry import FilterRegistry
from ...shared.exceptions.exceptions import ConfigurationError
from ...shared.logging.logger_interface import LoggerInterface
from ...shared.logging.structured_logger import get_logger

# reserved for indexed clones such as "phone:0"
ILLEGAL_FIELD_NAME = re.compile(r"(:.*:|:\d+.)")
COSMETIC_DIRECTIVES = ("label", "error", "help")


class FieldResolver:
    """Resolves declarations against a directive and a filter registry."""

    def __init__(
        self,
        registry: DirectiveRegistry,
        filters: FilterRegistry,
        logger: Optional[LoggerInterface] = None
    ):
        self.registry = registry
        self.filters = filters
        self.logger = logger or get_logger(__name__)

    def resolve(
        self,
        fields: Dict[str, Dict[str, Any]],
        mixins: Dict[str, Dict[str, Any]],
        filtering: str = "pre"
    ) -> Dict[str, Field]:
        """
        Resolve every field declaration.

        Args:
            fields: Field name to directive mapping, in declaration order
            mixins: Mixin name to directive mapping
            filtering: Default filtering mode for fields without one

        Returns:
            Dict[str, Field]: Resolved fields, in declaration order

        Raises:
            ConfigurationError: On any invalid declaration
        """
        for name, directives in mixins.items():
            self._check_keys("mixin", name, directives)
            self._check_arguments("mixin", name, directives)

        for name, directives in fields.items():
            if ILLEGAL_FIELD_NAME.search(name):
                raise ConfigurationError(
                    f"Field name {name} is not allowed, colon-separated segments "
                    f"are reserved for indexed parameters",
                    operation="resolve",
                    field=name
                )
            self._check_keys("field", name, directives)
            self._check_arguments("field", name, directives)

        merged: Dict[str, Dict[str, Any]] = {}
        for name in fields:
            self._merge(name, fields, mixins, merged, [])

        resolved: Dict[str, Field] = {}
        for name in fields:
            directives = merged[name]
            if directives.get("filters") is None:
                directives["filters"] = []
            if directives.get("filtering") is None:
                directives["filtering"] = filtering
            for key in COSMETIC_DIRECTIVES:
                if isinstance(directives.get(key), str):
                    directives[key] = re.sub(r"\s+", " ", directives[key]).strip()
            self._check_arguments("field", name, directives)
            self._check_filters(name, directives)
            resolved[name] = Field(name, directives)

        self._check_aliases(resolved)

        self.logger.debug(
            "Resolved field declarations",
            fields=len(resolved),
            mixins=len(mixins)
        )
        return resolved

    def _merge(
        self,
        name: str,
        fields: Dict[str, Dict[str, Any]],
        mixins: Dict[str, Dict[str, Any]],
        merged: Dict[str, Dict[str, Any]],
        stack: List[str]
    ) -> Dict[str, Any]:
        if name in merged:
            return merged[name]
        if name in stack:
            chain = " -> ".join(stack + [name])
            raise ConfigurationError(
                f"Circular mixin_field reference: {chain}",
                operation="resolve",
                field=name
            )

        directives = copy.deepcopy(fields[name])
        directives.pop("name", None)
        directives = self._apply_mixins(name, directives, directives.get("mixin"), mixins)

        source_name = directives.get("mixin_field")
        if source_name is not None:
            if source_name not in fields:
                raise ConfigurationError(
                    f"Field {name} uses mixin_field {source_name} which does not exist",
                    operation="resolve",
                    field=name
                )
            source = self._merge(source_name, fields, mixins, merged, stack + [name])
            directives = merge_field_into_field(directives, source, self.registry)
            directives = self._apply_mixins(name, directives, source.get("mixin"), mixins)

        merged[name] = directives
        return directives

    def _apply_mixins(
        self,
        name: str,
        directives: Dict[str, Any],
        mixin_names: Any,
        mixins: Dict[str, Dict[str, Any]]
    ) -> Dict[str, Any]:
        for mixin_name in as_list(mixin_names):
            if mixin_name not in mixins:
                raise ConfigurationError(
                    f"Field {name} uses mixin {mixin_name} which does not exist",
                    operation="resolve",
                    field=name
                )
            directives = merge_mixin_into_field(directives, mixins[mixin_name], self.registry)
        return directives

    def _check_keys(self, kind: str, name: str, directives: Dict[str, Any]) -> None:
        if not isinstance(directives, dict):
            raise ConfigurationError(
                f"The {kind} {name} must be declared as a mapping of directives",
                operation="resolve",
                **{kind: name}
            )
        for key in directives:
            directive = self.registry.get(key)
            usable = directive is not None and (directive.mixin if kind == "mixin" else directive.field)
            if not usable:
                raise ConfigurationError(
                    f"The {key} directive supplied by the {name} {kind} is not supported",
                    operation="resolve",
                    directive=key,
                    **{kind: name}
                )

    def _check_arguments(self, kind: str, name: str, directives: Dict[str, Any]) -> None:
        for key, argument in directives.items():
            directive = self.registry.get(key)
            if directive is not None and not directive.accepts(argument):
                raise ConfigurationError(
                    f"The {key} directive of the {name} {kind} has an invalid "
                    f"argument: {argument!r}",
                    operation="resolve",
                    directive=key,
                    **{kind: name}
                )

    def _check_filters(self, name: str, directives: Dict[str, Any]) -> None:
        for entry in as_list(directives.get("filters")):
            if not self.filters.is_known(entry):
                raise ConfigurationError(
                    f"Field {name} uses filter {entry} which does not exist",
                    operation="resolve",
                    field=name
                )

    def _check_aliases(self, fields: Dict[str, Field]) -> None:
        owners: Dict[str, str] = {}
        for field in fields.values():
            for alias in as_list(field.get("alias")):
                if alias in fields and alias != field.name:
                    raise ConfigurationError(
                        f"Alias {alias} of field {field.name} collides with "
                        f"field {alias}",
                        operation="resolve",
                        field=field.name,
                        other=alias
                    )
                if alias in owners and owners[alias] != field.name:
                    raise ConfigurationError(
                        f"Alias {alias} is declared by both field {owners[alias]} "
                        f"and field {field.name}",
                        operation="resolve",
                        field=field.name,
                        other=owners[alias]
                    )
                owners[alias] = field.name
