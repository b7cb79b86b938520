"""
Built-in directives.

Every directive known to a default registry is defined here. Most are
simple predicates over the submitted value; a few (alias, default,
readonly, toggle, multiples) reshape the parameters or the field during
the run instead.
"""

import copy
import re
from typing import Any, Dict, List, Optional, Pattern, Tuple

from ...core.entities.field_entity import Field, as_list, has_value, truthy
from ...core.interfaces.directive_interface import Directive

FLAG_TYPES = (bool, int, str)
TEXT_OR_LIST = (str, list, tuple)

CHECK_DEPENDENCIES: Dict[str, List[str]] = {
    "normalization": [],
    "validation": ["required"],
}


def join_list(items: List[Any], word: str) -> str:
    """Render ``a, b and c`` style lists."""
    items = [str(item) for item in items]
    if len(items) < 2:
        return "".join(items)
    return f"{', '.join(items[:-1])} {word} {items[-1]}"


def flatten_whitespace(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return re.sub(r"\s+", " ", value).strip()


def is_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


class CheckDirective(Directive):
    """
    Base for directives that check the submitted value.

    The check only runs when the directive has an argument, a scalar value
    is present, and the field is active (required, or a value was given).
    """

    mixin = True
    field = True
    dependencies = CHECK_DEPENDENCIES

    def validate(self, engine, field: Field, param: Any) -> bool:
        argument = field.get(self.name)
        if argument is None or param is None or isinstance(param, (list, dict)):
            return True
        if not self.is_active(field, param):
            return True
        return self.check(engine, field, param, argument)

    def check(self, engine, field: Field, param: Any, argument: Any) -> bool:
        raise NotImplementedError


class FlagCheckDirective(CheckDirective):
    """Check switched on by a truthy argument and driven by a regex."""

    argument_types = FLAG_TYPES
    regex: Optional[Pattern] = None

    def check(self, engine, field, param, argument):
        if not truthy(argument):
            return True
        if self.regex.search(str(param)):
            return True
        return self.error(engine, field)


class NamedFormatDirective(CheckDirective):
    """
    Check against one or more named formats.

    The argument may be ``1``/``True`` (every format), a format name, or a
    list of format names.
    """

    formats: Dict[str, Pattern] = {}
    all_formats: Optional[List[str]] = None

    def selected(self, argument: Any) -> List[str]:
        if isinstance(argument, (list, tuple)):
            return [str(name) for name in argument]
        if argument is True or str(argument) == "1":
            return list(self.all_formats or sorted(self.formats))
        return [str(argument)]

    def accepts(self, argument: Any) -> bool:
        if argument is None:
            return True
        if not isinstance(argument, FLAG_TYPES + (list, tuple)):
            return False
        if argument is False or str(argument) in ("0", ""):
            return True
        return all(name in self.formats for name in self.selected(argument))

    def check(self, engine, field, param, argument):
        if argument is False or str(argument) in ("0", ""):
            return True
        text = str(param)
        for name in self.selected(argument):
            if self.formats[name].search(text):
                return True
        return self.error(engine, field)


class NumericArgumentDirective(CheckDirective):
    """Check whose argument is a number."""

    def accepts(self, argument: Any) -> bool:
        return argument is None or is_number(argument)


class Alias(Directive):
    """Alternate parameter names mapped onto the field."""

    name = "alias"
    field = True
    argument_types = TEXT_OR_LIST

    def normalize(self, engine, field, param):
        for alias in as_list(field.get("alias")):
            if alias != field.name and alias in engine.params:
                engine.params[field.name] = engine.params.pop(alias)
                engine.record_alias(field.name)


class Between(CheckDirective):
    name = "between"
    multi = True
    message = "%s must contain between %s characters"
    argument_types = TEXT_OR_LIST

    @staticmethod
    def bounds(argument: Any) -> Tuple[int, int]:
        if isinstance(argument, (list, tuple)):
            if len(argument) > 1:
                return int(argument[0]), int(argument[1])
            argument = argument[0]
        parts = [part for part in re.split(r"\s*\D+\s*", str(argument)) if part]
        return int(parts[0]), int(parts[1])

    def accepts(self, argument):
        if argument is None:
            return True
        try:
            self.bounds(argument)
        except (IndexError, TypeError, ValueError):
            return False
        return True

    def check(self, engine, field, param, argument):
        low, high = self.bounds(argument)
        if low <= len(str(param)) <= high:
            return True
        return self.error(engine, field, f"{low}-{high}")


class Creditcard(NamedFormatDirective):
    name = "creditcard"
    message = "%s requires a valid credit card number"
    formats = {
        "amex": re.compile(r"^3[4|7]\d{13}$"),
        "bankcard": re.compile(r"^56(10\d\d|022[1-5])\d{10}$"),
        "diners": re.compile(r"^(?:3(0[0-5]|[68]\d)\d{11})|(?:5[1-5]\d{14})$"),
        "disc": re.compile(r"^(?:6011|650\d)\d{12}$"),
        "electron": re.compile(r"^(?:417500|4917\d{2}|4913\d{2})\d{10}$"),
        "enroute": re.compile(r"^2(?:014|149)\d{11}$"),
        "jcb": re.compile(r"^(3\d{4}|2100|1800)\d{11}$"),
        "maestro": re.compile(r"^(?:5020|6\d{3})\d{12}$"),
        "mastercard": re.compile(r"^5[1-5]\d{14}$"),
        "solo": re.compile(r"^(6334[5-9][0-9]|6767[0-9]{2})\d{10}(\d{2,3})?$"),
        "switch": re.compile(
            r"^(?:49(03(0[2-9]|3[5-9])|11(0[1-2]|7[4-9]|8[1-2])|36[0-9]{2})\d{10}(\d{2,3})?)"
            r"|(?:564182\d{10}(\d{2,3})?)"
            r"|(6(3(33[0-4][0-9])|759[0-9]{2})\d{10}(\d{2,3})?)$"
        ),
        "visa": re.compile(r"^4\d{12}(\d{3})?$"),
        "voyager": re.compile(r"^8699[0-9]{11}$"),
        "any": re.compile(
            r"^(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|6011[0-9]{12}"
            r"|3(?:0[0-5]|[68][0-9])[0-9]{11}|3[47][0-9]{13})$"
        ),
    }
    all_formats = ["any"]


_LEAP_YEAR = r"(?:(?:1[6-9]|[2-9]\d)?(?:0[48]|[2468][048]|[13579][26])|(?:(?:16|[2468][048]|[3579][26])00))"
_MONTH_NAMES = (
    r"(Jan(uary)?|Feb(ruary)?|Ma(r(ch)?|y)|Apr(il)?|Ju((ly?)|(ne?))|Aug(ust)?|Oct(ober)?"
    r"|(Sep(?=\b|t)t?|Nov|Dec)(ember)?)"
)


class Date(NamedFormatDirective):
    """
    Date formats.

    dmy 27-12-2006, mdy 12-27-2006, ymd 2006-12-27 (separators may be a
    space, period, dash or slash), dMy 27 December 2006, Mdy December 27,
    2006, My December 2006, my 12/2006.
    """

    name = "date"
    message = "%s requires a valid date"
    formats = {
        "dmy": re.compile(
            r"^(?:(?:31(\/|-|\.|\x20)(?:0?[13578]|1[02]))\1|(?:(?:29|30)(\/|-|\.|\x20)(?:0?[1,3-9]|1[0-2])\2))"
            r"(?:(?:1[6-9]|[2-9]\d)?\d{2})$"
            r"|^(?:29(\/|-|\.|\x20)0?2\3" + _LEAP_YEAR + r")$"
            r"|^(?:0?[1-9]|1\d|2[0-8])(\/|-|\.|\x20)(?:(?:0?[1-9])|(?:1[0-2]))\4(?:(?:1[6-9]|[2-9]\d)?\d{2})$"
        ),
        "mdy": re.compile(
            r"^(?:(?:(?:0?[13578]|1[02])(\/|-|\.|\x20)31)\1|(?:(?:0?[13-9]|1[0-2])(\/|-|\.|\x20)(?:29|30)\2))"
            r"(?:(?:1[6-9]|[2-9]\d)?\d{2})$"
            r"|^(?:0?2(\/|-|\.|\x20)29\3" + _LEAP_YEAR + r")$"
            r"|^(?:(?:0?[1-9])|(?:1[0-2]))(\/|-|\.|\x20)(?:0?[1-9]|1\d|2[0-8])\4(?:(?:1[6-9]|[2-9]\d)?\d{2})$"
        ),
        "ymd": re.compile(
            r"^(?:(?:" + _LEAP_YEAR + r"(\/|-|\.|\x20)(?:0?2\1(?:29)))"
            r"|(?:(?:(?:1[6-9]|[2-9]\d)?\d{2})(\/|-|\.|\x20)(?:(?:(?:0?[13578]|1[02])\2(?:31))"
            r"|(?:(?:0?[1,3-9]|1[0-2])\2(29|30))|(?:(?:0?[1-9])|(?:1[0-2]))\2(?:0?[1-9]|1\d|2[0-8]))))$"
        ),
        "dMy": re.compile(
            r"^((31(?!\ (Feb(ruary)?|Apr(il)?|June?|(Sep(?=\b|t)t?|Nov)(ember)?)))|((30|29)(?!\ Feb(ruary)?))"
            r"|(29(?=\ Feb(ruary)?\ (((1[6-9]|[2-9]\d)(0[48]|[2468][048]|[13579][26])|((16|[2468][048]|[3579][26])00)))))"
            r"|(0?[1-9])|1\d|2[0-8])\ " + _MONTH_NAMES + r"\ ((1[6-9]|[2-9]\d)\d{2})$"
        ),
        "Mdy": re.compile(
            r"^(?:(((Jan(uary)?|Ma(r(ch)?|y)|Jul(y)?|Aug(ust)?|Oct(ober)?|Dec(ember)?)\ 31)"
            r"|((Jan(uary)?|Ma(r(ch)?|y)|Apr(il)?|Ju((ly?)|(ne?))|Aug(ust)?|Oct(ober)?|(Sep)(tember)?|(Nov|Dec)(ember)?)"
            r"\ (0?[1-9]|([12]\d)|30))"
            r"|(Feb(ruary)?\ (0?[1-9]|1\d|2[0-8]|(29(?=,?\ ((1[6-9]|[2-9]\d)(0[48]|[2468][048]|[13579][26])"
            r"|((16|[2468][048]|[3579][26])00)))))))\,?\ ((1[6-9]|[2-9]\d)\d{2}))$"
        ),
        "My": re.compile(r"^" + _MONTH_NAMES + r"[ /]((1[6-9]|[2-9]\d)\d{2})$"),
        "my": re.compile(r"^(((0[123456789]|10|11|12)([- /.])(([1][9][0-9][0-9])|([2][0-9][0-9][0-9]))))$"),
    }


class Decimal(CheckDirective):
    """
    Decimal numbers, sign and exponent optional.

    ``0`` accepts any number of decimal places, ``1`` requires a
    fractional part, and ``N`` above one requires exactly N places.
    """

    name = "decimal"
    message = "%s requires a valid decimal number"

    def accepts(self, argument):
        if argument is None:
            return True
        if isinstance(argument, bool):
            return True
        return is_number(argument) and float(argument) == int(float(argument)) >= 0

    @staticmethod
    def pattern(places: int) -> Pattern:
        lnum = r"[0-9]+"
        dnum = r"[0-9]*[.]" + lnum
        sign = r"[+-]?"
        exp = r"(?:[eE]" + sign + lnum + r")?"
        if places == 0:
            return re.compile(r"^" + sign + r"(?:" + lnum + "|" + dnum + r")" + exp + r"$")
        if places == 1:
            return re.compile(r"^" + sign + dnum + exp + r"$")
        exact = r"[0-9]{" + str(places) + r"}"
        dnum = r"(?:[0-9]*[.]" + exact + "|" + lnum + r"[.]" + exact + r")"
        return re.compile(r"^" + sign + dnum + exp + r"$")

    def check(self, engine, field, param, argument):
        if self.pattern(int(float(argument))).search(str(param)):
            return True
        return self.error(engine, field)


class Default(Directive):
    """Value used when the parameter is not submitted. Callables receive the engine."""

    name = "default"
    mixin = True
    field = True
    multi = True
    dependencies = {"normalization": ["alias", "filters", "readonly"], "validation": []}

    def normalize(self, engine, field, param):
        default = field.get("default")
        if default is None or field.name in engine.params:
            return
        values = [
            value(engine) if callable(value) else copy.deepcopy(value)
            for value in as_list(default)
        ]
        engine.params[field.name] = values[0] if len(values) == 1 else values


class DependsOn(CheckDirective):
    name = "depends_on"
    multi = True
    message = "%s requires %s to have %s"
    argument_types = TEXT_OR_LIST

    def check(self, engine, field, param, argument):
        blanks = [
            engine.field_label(dependent)
            for dependent in as_list(argument)
            if not has_value(engine.params.get(dependent))
        ]
        if not blanks:
            return True
        return self.error(
            engine, field, ", ".join(blanks), "values" if len(blanks) > 1 else "a value"
        )


class Email(FlagCheckDirective):
    name = "email"
    message = "%s requires a valid email address"
    regex = re.compile(
        r"^[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*@"
        r"(?:[-_a-z0-9][-_a-z0-9]*\.)*(?:[a-z0-9][-a-z0-9]{0,62})\."
        r"(?:(?:[a-z]{2}\.)?[a-z]{2,4}|museum|travel)$",
        re.IGNORECASE
    )


class Error(Directive):
    """Single message replacing every failure message of the field."""

    name = "error"
    field = True
    argument_types = (str,)

    def normalize(self, engine, field, param):
        if field.get("error") is not None:
            field["error"] = flatten_whitespace(field["error"])


class Errors(Directive):
    """Either a single replacement message or a mapping of per-directive messages."""

    name = "errors"
    field = True
    argument_types = (str, dict)


class Filtering(Directive):
    name = "filtering"
    mixin = True
    field = True
    argument_types = (str,)

    def accepts(self, argument):
        return argument is None or argument in ("pre", "post", "")

    def normalize(self, engine, field, param):
        if field.get("filtering") is None:
            field["filtering"] = engine.settings.filtering


class Filters(Directive):
    name = "filters"
    mixin = True
    field = True
    multi = True

    def accepts(self, argument):
        return all(isinstance(entry, str) or callable(entry) for entry in as_list(argument))

    def normalize(self, engine, field, param):
        if field.get("filters") is None:
            field["filters"] = []


class Help(Directive):
    name = "help"
    field = True
    argument_types = (str,)

    def normalize(self, engine, field, param):
        if field.get("help") is not None:
            field["help"] = flatten_whitespace(field["help"])


class Hostname(FlagCheckDirective):
    name = "hostname"
    message = "%s requires a valid hostname"
    regex = re.compile(
        r"^(?:[-_a-z0-9][-_a-z0-9]*\.)*(?:[a-z0-9][-a-z0-9]{0,62})\."
        r"(?:(?:[a-z]{2}\.)?[a-z]{2,4}|museum|travel)$",
        re.IGNORECASE
    )


class Label(Directive):
    name = "label"
    field = True
    argument_types = (str,)

    def normalize(self, engine, field, param):
        if field.get("label") is not None:
            field["label"] = flatten_whitespace(field["label"])


class Length(NumericArgumentDirective):
    name = "length"
    message = "%s must contain exactly %s %s"

    def check(self, engine, field, param, argument):
        if len(str(param)) == float(argument):
            return True
        unit = "characters" if float(argument) > 1 else "character"
        return self.error(engine, field, argument, unit)


class Matches(CheckDirective):
    """Value must equal the values of the named sibling parameters."""

    name = "matches"
    multi = True
    message = "%s does not match %s"
    argument_types = TEXT_OR_LIST

    def check(self, engine, field, param, argument):
        text = "" if param is None else str(param)
        mismatched = []
        for dependent in as_list(argument):
            other = engine.params.get(dependent)
            if text != ("" if other is None else str(other)):
                mismatched.append(engine.field_label(dependent))
        if not mismatched:
            return True
        return self.error(engine, field, join_list(mismatched, "and"))


class CountDirective(NumericArgumentDirective):
    """Bound on the number of characters matching ``counted``."""

    counted: Pattern = re.compile(r".", re.DOTALL)
    maximum = True

    def check(self, engine, field, param, argument):
        count = len(self.counted.findall(str(param)))
        limit = float(argument)
        if (count <= limit) if self.maximum else (count >= limit):
            return True
        return self.error(engine, field, argument)


class MaxAlpha(CountDirective):
    name = "max_alpha"
    message = "%s must contain %s or less alphabetic characters"
    counted = re.compile(r"[a-zA-Z]")


class MaxDigits(CountDirective):
    name = "max_digits"
    message = "%s must contain %s or less digits"
    counted = re.compile(r"[0-9]")


class MaxLength(CountDirective):
    name = "max_length"
    message = "%s must not contain more than %s characters"


class MaxSum(NumericArgumentDirective):
    name = "max_sum"
    message = "%s can't be greater than %s"

    def check(self, engine, field, param, argument):
        if is_number(param) and float(param) <= float(argument):
            return True
        return self.error(engine, field, argument)


class MaxSymbols(CountDirective):
    name = "max_symbols"
    message = "%s must not contain more than %s special characters"
    counted = re.compile(r"[^a-zA-Z0-9]")


class Messages(Directive):
    name = "messages"
    mixin = True
    field = True
    argument_types = (dict,)


class MinAlpha(CountDirective):
    name = "min_alpha"
    message = "%s must contain at-least %s alphabetic characters"
    counted = re.compile(r"[a-zA-Z]")
    maximum = False


class MinDigits(CountDirective):
    name = "min_digits"
    message = "%s must not contain less than %s digits"
    counted = re.compile(r"[0-9]")
    maximum = False


class MinLength(CountDirective):
    name = "min_length"
    message = "%s must not contain less than %s characters"
    maximum = False


class MinSum(NumericArgumentDirective):
    name = "min_sum"
    message = "%s can't be less than %s"

    def check(self, engine, field, param, argument):
        if is_number(param) and float(param) >= float(argument):
            return True
        return self.error(engine, field, argument)


class MinSymbols(CountDirective):
    name = "min_symbols"
    message = "%s must contain at-least %s special characters"
    counted = re.compile(r"[^a-zA-Z0-9]")
    maximum = False


class MixinDirective(Directive):
    name = "mixin"
    field = True
    multi = True
    argument_types = TEXT_OR_LIST


class MixinField(Directive):
    name = "mixin_field"
    field = True
    argument_types = (str,)


class Multiples(Directive):
    """
    Permission to submit a list of values.

    A list submitted to a field allowing multiples is split into one
    clone per element, each validated on its own and folded back into
    the list afterwards.
    """

    name = "multiples"
    field = True
    message = "%s does not support multiple values"
    argument_types = FLAG_TYPES
    dependencies = {
        "normalization": [],
        "validation": [
            "alias", "between", "depends_on", "error", "errors", "filtering",
            "filters", "label", "length", "matches", "max_alpha", "max_digits",
            "max_length", "max_sum", "min_alpha", "min_digits", "min_length",
            "min_sum", "mixin", "mixin_field", "name", "options", "pattern",
            "readonly", "required", "toggle",
        ],
    }

    def normalize(self, engine, field, param):
        if field.get("multiples") is None:
            field["multiples"] = 0

    def before_validation(self, engine, field, param):
        if not isinstance(param, list) or not param:
            return
        if not truthy(field.get("multiples")):
            field.halted = True
            self.error(engine, field)
            return
        engine.expander.expand(engine, field, param)

    def after_validation(self, engine, field, param):
        engine.expander.collapse(engine, field)


class Name(Directive):
    name = "name"
    mixin = True
    field = True
    argument_types = (str,)


class Options(CheckDirective):
    name = "options"
    message = "%s must be either %s"
    argument_types = TEXT_OR_LIST

    @staticmethod
    def choices(argument: Any) -> List[str]:
        if isinstance(argument, (list, tuple)):
            return [str(option) for option in argument]
        return [option for option in re.split(r"\s*[,\-]+\s*", str(argument).strip()) if option]

    def check(self, engine, field, param, argument):
        options = self.choices(argument)
        if not options or str(param) in options:
            return True
        return self.error(engine, field, join_list(options, "or"))


class PatternDirective(CheckDirective):
    """
    Regular expression or mask.

    In a mask string ``#`` stands for a digit and ``X`` for a letter;
    every other character is literal and the whole value must match.
    """

    name = "pattern"
    message = "%s does not match the pattern %s"
    argument_types = (str, re.Pattern)

    @staticmethod
    def compile(argument: Any) -> Tuple[Pattern, bool]:
        if isinstance(argument, re.Pattern):
            return argument, False
        mask = "".join(
            r"\d" if char == "#" else "[a-zA-Z]" if char == "X" else re.escape(char)
            for char in argument
        )
        return re.compile(mask), True

    def check(self, engine, field, param, argument):
        regex, whole = self.compile(argument)
        text = str(param)
        if (regex.fullmatch(text) if whole else regex.search(text)):
            return True
        shown = argument.pattern if isinstance(argument, re.Pattern) else argument
        return self.error(engine, field, shown)


class Readonly(Directive):
    """Submitted values for the field are discarded."""

    name = "readonly"
    field = True
    argument_types = FLAG_TYPES

    def normalize(self, engine, field, param):
        if truthy(field.get("readonly")):
            engine.params.pop(field.name, None)


class Required(Directive):
    """Presence check. A failure stops every other check on the field."""

    name = "required"
    mixin = True
    field = True
    message = "%s is required"
    argument_types = FLAG_TYPES
    dependencies = {"normalization": [], "validation": ["alias", "toggle"]}

    def validate(self, engine, field, param):
        if truthy(field.get("required")) and not has_value(param):
            field.halted = True
            return self.error(engine, field)
        return True


class SSN(FlagCheckDirective):
    name = "ssn"
    message = "%s is not a valid social security number"
    regex = re.compile(r"\A\b(?!000)[0-9]{3}-[0-9]{2}-[0-9]{4}\b\Z")


US_STATES = [
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
    "Connecticut", "Delaware", "Florida", "Georgia", "Hawaii", "Idaho",
    "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky", "Louisiana", "Maine",
    "Maryland", "Massachusetts", "Michigan", "Minnesota", "Mississippi",
    "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire", "New Jersey",
    "New Mexico", "New York", "North Carolina", "North Dakota", "Ohio",
    "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island", "South Carolina",
    "South Dakota", "Tennessee", "Texas", "Utah", "Vermont", "Virginia",
    "Washington", "West Virginia", "Wisconsin", "Wyoming",
    "District of Columbia", "Puerto Rico", "Guam", "American Samoa",
    "U.S. Virgin Islands", "Northern Mariana Islands",
]


class State(NamedFormatDirective):
    """US states and territories, as abbreviations (``abbr``) or names (``long``)."""

    name = "state"
    message = "%s is not a valid state"
    formats = {
        "abbr": re.compile(
            r"^(A[LKSZRAEP]|C[AOT]|D[EC]|F[LM]|G[AU]|HI|I[ADLN]|K[SY]|LA|M[ADEHINOPST]"
            r"|N[CDEHJMVY]|O[HKR]|P[ARW]|RI|S[CD]|T[NX]|UT|V[AIT]|W[AIVY])$",
            re.IGNORECASE
        ),
        "long": re.compile(
            r"^(%s)$" % "|".join(re.escape(state) for state in US_STATES),
            re.IGNORECASE
        ),
    }


class Telephone(FlagCheckDirective):
    name = "telephone"
    message = "%s is not a valid telephone number"
    regex = re.compile(r"^(?:\+?1)?[-. ]?\(?[2-9][0-8][0-9]\)?[-. ]?[2-9][0-9]{2}[-. ]?[0-9]{4}$")


class Time(FlagCheckDirective):
    """24 hour (HH:MM) or am/pm ([H]H:MM[a|p]m) times."""

    name = "time"
    message = "%s requires a valid time"
    regex = re.compile(r"^((0?[1-9]|1[012])(:[0-5]\d){0,2} ?([AP]M|[ap]m))$|^([01]\d|2[0-3])(:[0-5]\d){0,2}$")


class Toggle(Directive):
    """
    Call-scoped override of ``required``.

    ``+``/``1`` forces the field to be required and ``-``/``0`` makes it
    optional. The previous ``required`` setting is restored afterwards.
    """

    name = "toggle"
    field = True
    argument_types = FLAG_TYPES

    @staticmethod
    def switch(field: Field) -> Optional[str]:
        value = field.toggle if field.toggle is not None else field.get("toggle")
        if value is None:
            return None
        if isinstance(value, bool):
            return "+" if value else "-"
        return str(value).strip()

    def before_validation(self, engine, field, param):
        switch = self.switch(field)
        if switch is None:
            return
        saved = engine.scratch("toggle")
        saved[field.name] = ("required" in field, field.get("required"))
        if switch in ("+", "1"):
            field["required"] = True
        elif switch in ("-", "0"):
            field["required"] = False

    def after_validation(self, engine, field, param):
        saved = engine.scratch("toggle")
        if field.name not in saved:
            return
        present, value = saved.pop(field.name)
        if present:
            field["required"] = value
        else:
            del field["required"]


class UUID(FlagCheckDirective):
    name = "uuid"
    message = "%s is not a valid UUID"
    regex = re.compile(r"^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$", re.IGNORECASE)


class Validation(Directive):
    """Custom callback ``(engine, field, params) -> bool``, run after every other check."""

    name = "validation"
    field = True

    def accepts(self, argument):
        return argument is None or callable(argument)


class Zipcode(FlagCheckDirective):
    name = "zipcode"
    message = "%s is not a valid postal code"
    regex = re.compile(r"\A\b[0-9]{5}(?:-[0-9]{4})?\b\Z")


BUILTIN_DIRECTIVES = [
    Alias, Between, Creditcard, Date, Decimal, Default, DependsOn, Email,
    Error, Errors, Filtering, Filters, Help, Hostname, Label, Length, Matches,
    MaxAlpha, MaxDigits, MaxLength, MaxSum, MaxSymbols, Messages, MinAlpha,
    MinDigits, MinLength, MinSum, MinSymbols, MixinDirective, MixinField,
    Multiples, Name, Options, PatternDirective, Readonly, Required, SSN, State,
    Telephone, Time, Toggle, UUID, Validation, Zipcode,
]
