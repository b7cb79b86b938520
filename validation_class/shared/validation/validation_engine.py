"""
Validation engine.

This module provides the engine that owns field and mixin declarations,
the submitted parameters and the error collections, and runs the
validation pipeline:

normalize -> pre-filters -> target selection -> per-field directive
hooks -> custom validation -> restore parameters -> post-filters.
"""

import copy
import re
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..exceptions.error_handler import UnknownPolicy, UnknownPolicyHandler
from ..exceptions.exceptions import ConfigurationError, UnknownProfileError
from ..logging.log_formatter import LogFormatter
from ..logging.logger_interface import LoggerInterface, LogLevel
from ..logging.structured_logger import configure_logging, get_logger
from ...core.entities.error_entity import ErrorCollection
from ...core.entities.field_entity import Field, Mixin, as_list, has_value
from ...core.entities.params_entity import collapse_indexed, flatten_params, unflatten_params
from ...core.entities.run_entity import ValidationRun
from ...core.interfaces.directive_interface import Directive, ValidationPhase
from ...domain.expansion.multi_value_expander import MultiValueExpander
from ...domain.resolution.field_resolver import FieldResolver
from ...infrastructure.config.environment_config import ValidationSettings
from ...infrastructure.registry.directive_registry import DirectiveRegistry, get_default_registry
from ...infrastructure.registry.filter_registry import FilterRegistry, get_default_filters

TOGGLE_PREFIX = re.compile(r"^([+-])(.+)$")
REGEX_SELECTOR = re.compile(r"^/(.+)/$")

_MISSING = object()

Profile = Callable[..., Any]


def parse_selector(text: str) -> Any:
    """
    Turn a textual selector into what ``validate()`` accepts.

    ``/pattern/`` becomes a compiled regular expression; anything else is
    returned unchanged (including ``+``/``-`` toggle prefixes).
    """
    match = REGEX_SELECTOR.match(text)
    return re.compile(match.group(1)) if match else text


def selector_profile(selectors: Iterable[str]) -> Profile:
    """Build a profile that validates a fixed list of selectors."""
    parsed = [parse_selector(selector) for selector in selectors]

    def profile(engine: "ValidationEngine", *args: Any, **kwargs: Any) -> bool:
        return engine.validate(*parsed)

    return profile


class ValidationEngine:
    """
    Engine for declaring fields and validating parameters against them.

    An engine owns its fields, parameters and errors and must not be used
    by more than one thread at a time. Directive and filter registries
    may be shared between engines; an engine copies a shared registry
    before adding to it.
    """

    def __init__(
        self,
        params: Optional[Dict[str, Any]] = None,
        fields: Optional[Dict[str, Dict[str, Any]]] = None,
        mixins: Optional[Dict[str, Dict[str, Any]]] = None,
        profiles: Optional[Dict[str, Profile]] = None,
        settings: Optional[ValidationSettings] = None,
        registry: Optional[DirectiveRegistry] = None,
        filters: Optional[FilterRegistry] = None,
        messages: Optional[Dict[str, str]] = None,
        stash: Optional[Dict[str, Any]] = None,
        logger: Optional[LoggerInterface] = None,
        **switches: Any
    ):
        """
        Initialize the engine.

        Args:
            params: Parameters to validate, nested mappings are flattened
            fields: Field declarations, name to directive mapping
            mixins: Mixin declarations, name to directive mapping
            profiles: Named validation routines
            settings: Engine settings
            registry: Directive registry, defaults to the built-ins
            filters: Filter registry, defaults to the built-ins
            messages: Engine-wide message templates per directive
            stash: Initial stash contents
            logger: Optional logger
            **switches: Setting overrides such as ignore_unknown=True
        """
        self.settings = (settings or ValidationSettings()).with_overrides(**switches)
        self.logger = logger or get_logger(__name__)
        self.registry = registry or get_default_registry()
        self.filters = filters or get_default_filters()
        self.messages: Dict[str, str] = dict(messages or {})
        self.profiles: Dict[str, Profile] = {}
        self.errors = ErrorCollection()
        self.unknown = UnknownPolicyHandler(self._policy(), self.logger)
        self.expander = MultiValueExpander(self.settings.array_delimiter, self.logger)

        self._declared_fields: Dict[str, Dict[str, Any]] = {}
        self._declared_mixins: Dict[str, Dict[str, Any]] = {}
        self._fields: Dict[str, Field] = {}
        self._dirty = True
        self._params: Dict[str, Any] = {}
        self._stash: Dict[str, Any] = dict(stash or {})
        self._queued: List[Any] = []
        self._aliased: List[str] = []
        self._retired: Dict[str, Field] = {}
        self._scratch: Dict[str, Dict[str, Any]] = {}
        self._run: Optional[ValidationRun] = None

        for name, directives in (mixins or {}).items():
            self.add_mixin(name, directives)
        for name, directives in (fields or {}).items():
            self.add_field(name, directives)
        for name, routine in (profiles or {}).items():
            self.add_profile(name, routine)
        self.params = params or {}

    @classmethod
    def from_config(
        cls,
        path: str,
        environment: Optional[str] = None,
        **overrides: Any
    ) -> "ValidationEngine":
        """
        Build an engine from a YAML declaration file.

        Args:
            path: Declaration file path
            environment: Optional overlay name (``rules.<environment>.yaml``)
            **overrides: Setting overrides applied last

        Returns:
            ValidationEngine: Configured engine
        """
        from ...infrastructure.config.config_manager import ConfigManager
        from ...infrastructure.config.environment_config import EnvironmentConfig

        declarations = ConfigManager(path, environment).load()
        config = EnvironmentConfig(declarations.settings)
        settings = config.settings().with_overrides(**overrides)

        logger = None
        if config.get_log_level():
            try:
                level = LogLevel.parse(str(config.get_log_level()))
            except ValueError as e:
                raise ConfigurationError(str(e), operation="load_config") from e
            logger = configure_logging(__name__, level)

        return cls(
            fields=declarations.fields,
            mixins=declarations.mixins,
            profiles={
                name: selector_profile(selectors)
                for name, selectors in declarations.profiles.items()
            },
            messages=declarations.messages,
            settings=settings,
            logger=logger,
        )

    # declarations

    def add_field(self, name: str, directives: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        """Declare (or redeclare) a field."""
        self._declared_fields[name] = {**(directives or {}), **kwargs}
        self._dirty = True

    def add_mixin(self, name: str, directives: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        """Declare (or redeclare) a mixin."""
        self._declared_mixins[name] = {**(directives or {}), **kwargs}
        self._dirty = True

    def add_profile(self, name: str, routine: Profile) -> None:
        """
        Register a validation profile.

        The routine is called as ``routine(engine, *args, **kwargs)`` by
        :meth:`validate_profile` and its result returned as is.
        """
        if not callable(routine):
            raise ConfigurationError(
                f"Profile {name} must be callable",
                operation="add_profile",
                profile=name
            )
        self.profiles[name] = routine

    def add_filter(self, name: str, function: Callable[[str], str]) -> None:
        """Register a named filter on this engine only."""
        if self.filters is get_default_filters():
            self.filters = self.filters.copy()
        self.filters.register(name, function)
        self._dirty = True

    def add_directive(self, directive: Directive) -> None:
        """Register a directive on this engine only."""
        if self.registry is get_default_registry():
            self.registry = self.registry.copy()
        self.registry.register(directive)
        self._dirty = True

    def resolve(self) -> Dict[str, Field]:
        """
        Resolve the declarations now rather than on first use.

        Raises:
            ConfigurationError: If any declaration is invalid
        """
        resolver = FieldResolver(self.registry, self.filters, self.logger)
        self._fields = resolver.resolve(
            self._declared_fields,
            self._declared_mixins,
            self.settings.filtering
        )
        self._dirty = False
        return self._fields

    def clone(self, source: str, name: str, overrides: Optional[Dict[str, Any]] = None) -> Field:
        """
        Declare a new field copied from an existing one.

        Aliases are not copied, since two fields may not share one.

        Args:
            source: Field to copy
            name: Name of the new field
            overrides: Directives replacing the copied ones

        Returns:
            Field: The resolved new field
        """
        fields = self.fields
        if source not in fields:
            raise ConfigurationError(
                f"Cannot clone field {source} which does not exist",
                operation="clone",
                field=source
            )
        directives = fields[source].to_dict()
        directives.pop("name", None)
        directives.pop("alias", None)
        directives.update(copy.deepcopy(overrides or {}))
        self.add_field(name, directives)
        return self.fields[name]

    @property
    def fields(self) -> Dict[str, Field]:
        """Resolved fields, resolving pending declarations first."""
        if self._dirty:
            self.resolve()
        return self._fields

    @property
    def mixins(self) -> Dict[str, Mixin]:
        return {
            name: Mixin(name, copy.deepcopy(directives))
            for name, directives in self._declared_mixins.items()
        }

    def field_label(self, name: str) -> str:
        """Label of a field, or the name itself when it is not declared."""
        field = self._fields.get(name)
        return field.label if field is not None else name

    # parameters

    @property
    def params(self) -> Dict[str, Any]:
        return self._params

    @params.setter
    def params(self, value: Dict[str, Any]) -> None:
        self._params = flatten_params(
            value,
            self.settings.hash_delimiter,
            self.settings.array_delimiter
        )

    def param(self, name: str, value: Any = _MISSING) -> Any:
        """Get a parameter, or set it when a value is given."""
        if value is _MISSING:
            return self._params.get(name)
        self._params[name] = value
        return value

    def get_params(self, *names: str) -> List[Any]:
        """Values of the named parameters, or of every parameter."""
        if not names:
            return list(self._params.values())
        return [self._params.get(name) for name in names]

    def get_params_hash(self) -> Dict[str, Any]:
        """Parameters rebuilt into a nested structure."""
        return unflatten_params(
            self._params,
            self.settings.hash_delimiter,
            self.settings.array_delimiter
        )

    def set_params_hash(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the parameters with a nested structure, returning the flat view."""
        self.params = params
        return dict(self._params)

    # run state used by directives

    @property
    def current_run(self) -> Optional[ValidationRun]:
        return self._run

    def record_alias(self, name: str) -> None:
        """Note that a parameter was submitted under an alias of ``name``."""
        if name not in self._aliased:
            self._aliased.append(name)

    def scratch(self, name: str) -> Dict[str, Any]:
        """Per-run scratch space for a directive."""
        space = self._run.scratch if self._run is not None else self._scratch
        return space.setdefault(name, {})

    # pipeline

    def normalize(self) -> None:
        """
        Bring fields and parameters into shape for a run.

        Flattens nested parameters, clears field state and errors, and runs
        every directive's normalize hook on every field.
        """
        fields = self.fields
        self._params = collapse_indexed(
            flatten_params(self._params, self.settings.hash_delimiter, self.settings.array_delimiter),
            fields,
            self.settings.array_delimiter
        )
        self._aliased = []
        self.reset_fields()
        self.reset_errors()

        order = self.registry.ordered(ValidationPhase.NORMALIZATION, self.registry.names())
        for field in list(fields.values()):
            for name in order:
                self.registry.get(name).normalize(self, field, self._params.get(field.name))

    def apply_filters(self, state: str = "pre") -> None:
        """
        Run the declared filters of every field in the given filtering state.

        Args:
            state: "pre" or "post"
        """
        if not state:
            return
        for field in self.fields.values():
            if field.get("filtering") != state:
                continue
            key = field.name
            if key not in self._params:
                # restored params still hold values submitted under an alias
                key = next((a for a in as_list(field.get("alias")) if a in self._params), key)
            value = self._params.get(key)
            if not has_value(value):
                continue
            filtered = self.filters.apply(as_list(field.get("filters")), value)
            self._params[key] = filtered
            field.value = filtered

    def validate(self, *selectors: Any) -> bool:
        """
        Validate parameters against fields.

        Selectors may be field names (optionally prefixed with ``+`` or
        ``-`` to force ``required`` on or off for this call), compiled
        regular expressions matched against field names, lists of those,
        or a mapping renaming submitted parameters to field names. Without
        selectors every submitted parameter is validated, or every field
        when nothing was submitted.

        Parameters are restored afterwards; only post-filtering of a
        successful run is kept.

        Returns:
            bool: True when no errors were recorded
        """
        started = time.perf_counter()
        self.unknown.policy = self._policy()
        snapshot = copy.deepcopy(self._params)
        run = ValidationRun()
        valid = False

        try:
            self.normalize()
            self.apply_filters("pre")
            run.targets = self._resolve_targets(list(self._queued) + list(selectors))
            self._run = run

            position = 0
            while position < len(run.targets):
                self._validate_field(self._fields[run.targets[position]], run)
                position += 1

            valid = self.errors.count() == 0
        finally:
            self._run = None
            for name in list(run.clones):
                self._fields.pop(name, None)
            # a run aborted by an exception skips the toggle after hooks
            for name, (present, value) in run.scratch.pop("toggle", {}).items():
                if name not in self._fields:
                    continue
                if present:
                    self._fields[name]["required"] = value
                else:
                    self._fields[name].directives.pop("required", None)
            for field in self._fields.values():
                field.toggle = None
            self._retired = dict(run.retired)
            self._params = snapshot

        if valid:
            self.apply_filters("post")

        self.logger.debug(
            "Validation finished",
            valid=valid,
            targets=run.targets,
            errors=self.errors.count(),
            duration=LogFormatter.format_duration(time.perf_counter() - started)
        )
        return valid

    def validate_profile(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Run a registered profile.

        Fields and errors are reset first. An unknown profile follows the
        unknown field policy.

        Returns:
            Any: Whatever the profile returns
        """
        self.unknown.policy = self._policy()
        snapshot = copy.deepcopy(self._params)
        self.normalize()
        self._params = snapshot

        routine = self.profiles.get(name)
        if routine is None:
            self.unknown.handle(
                f"Validation profile {name} does not exist",
                errors=self.errors,
                error_type=UnknownProfileError,
                profile=name
            )
            return self.errors.count() == 0

        self.logger.debug(f"Running validation profile {name}", profile=name)
        return routine(self, *args, **kwargs)

    def _policy(self) -> UnknownPolicy:
        return UnknownPolicy.from_switches(
            self.settings.ignore_unknown,
            self.settings.report_unknown
        )

    def _expand_selectors(self, selectors: Iterable[Any]) -> List[Any]:
        expanded: List[Any] = []
        for selector in selectors:
            if isinstance(selector, (list, tuple, set)):
                expanded.extend(self._expand_selectors(selector))
            else:
                expanded.append(selector)
        return expanded

    def _resolve_targets(self, selectors: List[Any]) -> List[str]:
        fields = self._fields
        requested: List[str] = []
        toggles: Dict[str, str] = {}

        for selector in self._expand_selectors(selectors):
            if isinstance(selector, dict):
                for param_name, field_name in selector.items():
                    if param_name != field_name and param_name in self._params:
                        self._params[field_name] = self._params.pop(param_name)
                    requested.append(field_name)
            elif isinstance(selector, re.Pattern):
                requested.extend(name for name in sorted(fields) if selector.search(name))
            elif isinstance(selector, str):
                match = TOGGLE_PREFIX.match(selector)
                if match:
                    toggles[match.group(2)] = match.group(1)
                    requested.append(match.group(2))
                else:
                    requested.append(selector)
            else:
                raise ConfigurationError(
                    f"Unsupported field selector: {selector!r}",
                    operation="validate"
                )

        if selectors:
            requested.extend(self._aliased)
        else:
            requested = list(self._params) or list(fields)
            if not requested:
                self.unknown.handle(
                    "No parameters were submitted and no fields are registered, "
                    "nothing to validate",
                    errors=self.errors
                )

        aliases = {
            alias: field.name
            for field in fields.values()
            for alias in as_list(field.get("alias"))
        }

        targets: List[str] = []
        for name in requested:
            canonical = name if name in fields else aliases.get(name, name)
            if name in toggles:
                toggles.setdefault(canonical, toggles[name])
            if canonical not in targets:
                targets.append(canonical)

        known: List[str] = []
        for name in targets:
            if name in fields:
                known.append(name)
            else:
                self.unknown.handle(
                    f"Data validation field {name} does not exist",
                    errors=self.errors,
                    field=name
                )

        for name, switch in toggles.items():
            if name in fields:
                fields[name].toggle = switch

        return known

    def _directive_keys(self, field: Field) -> List[str]:
        keys = [
            key for key, value in field.directives.items()
            if value is not None and key in self.registry
        ]
        if field.toggle is not None and "toggle" not in keys:
            keys.append("toggle")
        return keys

    def _ordered_directives(self, field: Field) -> List[Directive]:
        order = self.registry.ordered(ValidationPhase.VALIDATION, self._directive_keys(field))
        return [self.registry.get(name) for name in order]

    def _validate_field(self, field: Field, run: ValidationRun) -> None:
        name = field.name

        for directive in self._ordered_directives(field):
            directive.before_validation(self, field, self._params.get(name))

        field.value = self._params.get(name)
        # before hooks may have added directives (toggle sets required)
        directives = self._ordered_directives(field)

        if not run.is_replaced(name):
            for directive in directives:
                if field.halted:
                    break
                directive.validate(self, field, self._params.get(name))
            if not field.halted:
                self._run_custom_validation(field)

        for directive in directives:
            directive.after_validation(self, field, self._params.get(name))

    def _run_custom_validation(self, field: Field) -> None:
        callback = field.get("validation")
        if not callable(callback) or not has_value(field.value):
            return

        class_count = self.errors.count()
        field_count = field.errors.count()
        if callback(self, field, self._params):
            return

        if field.errors.count() != field_count:
            self.errors.extend(field.errors)
        if self.errors.count() != class_count:
            return

        override = field.get("error")
        if override is None and isinstance(field.get("errors"), str):
            override = field.get("errors")
        message = override if override is not None else f"{field.label} did not pass validation"
        field.errors.add(message)
        self.errors.add(message)

    # queue, errors and stash

    def queue(self, *selectors: Any) -> None:
        """Add selectors validated by every later ``validate()`` call."""
        self._queued.extend(selectors)

    def clear_queue(self) -> List[Any]:
        """
        Empty the queue.

        Returns:
            List[Any]: Current values of the queued parameters, in queue order
        """
        values = []
        for selector in self._expand_selectors(self._queued):
            if isinstance(selector, str):
                match = TOGGLE_PREFIX.match(selector)
                values.append(self._params.get(match.group(2) if match else selector))
        self._queued = []
        return values

    def reset(self) -> None:
        """Clear the queue, the errors and every field's working state."""
        self._queued = []
        self.reset_fields()
        self.reset_errors()

    def reset_fields(self) -> None:
        for field in self.fields.values():
            field.reset()
        self._retired = {}

    def reset_errors(self) -> None:
        self.errors.clear()
        for field in self._fields.values():
            field.errors.clear()

    def set_errors(self, *messages: str) -> None:
        """Add class-level error messages."""
        self.errors.add(*messages)

    @property
    def error_count(self) -> int:
        return self.errors.count()

    def error_fields(self, *names: str) -> Dict[str, List[str]]:
        """
        Field-level messages of the last run.

        Clones created for list values during the last run are included
        under their ``name:index`` names.

        Args:
            *names: Optional field names to restrict the result to

        Returns:
            Dict[str, List[str]]: Field name to messages, fields without
            errors omitted
        """
        pool = {**self._fields, **self._retired}
        return {
            name: field.errors.all()
            for name, field in pool.items()
            if field.errors and (not names or name in names)
        }

    def get_errors(self, *criteria: Any) -> List[str]:
        """
        Error messages, optionally filtered.

        Args:
            *criteria: Field names and/or compiled patterns matched
                against the messages

        Returns:
            List[str]: Matching messages without duplicates
        """
        if not criteria:
            return self.errors.all()

        pool = {**self._fields, **self._retired}
        messages: List[str] = []
        for criterion in criteria:
            if isinstance(criterion, re.Pattern):
                found = self.errors.find(criterion)
            else:
                field = pool.get(criterion)
                found = field.errors.all() if field is not None else []
            messages.extend(message for message in found if message not in messages)
        return messages

    def errors_to_string(
        self,
        delimiter: str = ", ",
        transform: Optional[Callable[[str], str]] = None
    ) -> str:
        return self.errors.to_string(delimiter, transform)

    def stash(self, key: Any = None, value: Any = _MISSING, **updates: Any) -> Any:
        """
        Side-channel storage for custom validation callbacks.

        ``stash()`` returns the whole mapping, ``stash(key)`` one value,
        ``stash(key, value)`` sets and returns a value, and
        ``stash({...})`` or ``stash(key=value)`` updates several at once.
        """
        if isinstance(key, dict):
            self._stash.update(key)
            key = None
        self._stash.update(updates)
        if key is None:
            return self._stash
        if value is _MISSING:
            return self._stash.get(key)
        self._stash[key] = value
        return value

    def __repr__(self) -> str:
        return (
            f"<ValidationEngine fields={len(self._declared_fields)} "
            f"params={len(self._params)} errors={self.errors.count()}>"
        )
