"""Parameter definitions and their translation to CLI arguments and REST fields.

Every VoxSigma method declares its parameters once as a
:class:`ParameterCollection`. A parameter maps one semantic name (``model``,
``max_speakers``...) to a CLI option and a REST form field; an empty string
on either side means the parameter does not exist for that transport.

Several parameters may feed the same destination. For example
``dual_channel`` (``d``), ``no_partitioning`` (``p``) and ``quality`` (``2``)
all write to ``-q`` / ``qopt`` and are emitted as the single composite
``-qdp2`` / ``qopt=dp2``.
"""

import logging
import shlex
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ParameterValue = str | int | float | bool

# A raw CLI option ending with this marker takes its value as a separate token
SEPARATE_MARKER = ":"


class ParameterType(Enum):
    """How a parameter value is serialized."""

    VALUE = "value"  # -lfre / model=fre
    FLAG = "flag"  # -qd / qopt=d
    FILE = "file"  # -a vocab.txt / vocfile=@vocab.txt


@dataclass(frozen=True)
class Parameter:
    """Definition of a single method parameter."""

    name: str
    cli_option: str
    rest_param: str
    type: ParameterType = ParameterType.VALUE
    flag_value: str | None = None  # fragment appended to a shared option
    forced_by: str | None = None  # flag that switches the CLI prefix to "<option>:"

    @property
    def cli_only(self) -> bool:
        return bool(self.cli_option) and not self.rest_param

    @property
    def rest_only(self) -> bool:
        return bool(self.rest_param) and not self.cli_option


class ParameterCollection:
    """Immutable, indexed set of the parameters of one method.

    Semantic names are unique. CLI options and REST fields may be shared by
    several parameters; lookups without a ``flag_value`` return the first one
    registered.
    """

    def __init__(self, parameters: Iterable[Parameter]):
        self._parameters: tuple[Parameter, ...] = tuple(parameters)
        self._by_name: dict[str, Parameter] = {}
        self._by_cli: dict[str, list[Parameter]] = {}
        self._by_rest: dict[str, list[Parameter]] = {}

        for param in self._parameters:
            if param.name in self._by_name:
                raise ValueError(f"Duplicate parameter: {param.name!r}")
            self._by_name[param.name] = param
            if param.cli_option:
                self._by_cli.setdefault(param.cli_option, []).append(param)
            if param.rest_param:
                self._by_rest.setdefault(param.rest_param, []).append(param)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._parameters)

    def __len__(self) -> int:
        return len(self._parameters)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"ParameterCollection({self.names()!r})"

    def has(self, name: str) -> bool:
        return name in self._by_name

    def names(self) -> list[str]:
        return [param.name for param in self._parameters]

    def find_by_name(self, name: str) -> Parameter | None:
        return self._by_name.get(name)

    def get(self, name: str) -> Parameter:
        """Get a parameter by semantic name.

        Raises:
            KeyError: If the method has no such parameter
        """
        if name not in self._by_name:
            raise KeyError(f"Unknown parameter: {name!r}")
        return self._by_name[name]

    def find_by_cli(self, option: str, flag_value: str | None = None) -> Parameter | None:
        """Find a parameter by CLI option.

        Accepts the option with or without its leading dash and separator
        marker (``-p``, ``p`` and ``-p:`` all find ``-p:``).
        """
        for candidate in (option, option + SEPARATE_MARKER):
            for key in (candidate, "-" + candidate):
                if key in self._by_cli:
                    return _pick(self._by_cli[key], flag_value)
        return None

    def find_by_rest(self, param: str, flag_value: str | None = None) -> Parameter | None:
        """Find a parameter by REST form field name."""
        if param not in self._by_rest:
            return None
        return _pick(self._by_rest[param], flag_value)

    def extend(self, parameters: Iterable[Parameter]) -> "ParameterCollection":
        """Return a new collection with additional parameters appended."""
        return ParameterCollection([*self._parameters, *parameters])


def _pick(candidates: list[Parameter], flag_value: str | None) -> Parameter | None:
    if flag_value is None:
        return candidates[0]
    for param in candidates:
        if param.flag_value == flag_value:
            return param
    return None


def format_value(value: Any) -> str:
    """Render a parameter value the way the engine expects it."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class _CliSlot:
    prefix: str
    separate: bool
    fragments: list[str] = field(default_factory=list)


def _log_dropped(values: Mapping[str, Any], definitions: ParameterCollection) -> None:
    dropped = [name for name in values if name not in definitions]
    if dropped:
        logger.debug("Ignoring parameters unknown to this method: %s", ", ".join(dropped))


def to_cli_args(values: Mapping[str, Any], definitions: ParameterCollection) -> list[str]:
    """Translate semantic parameter values into shell-quoted CLI tokens.

    Args:
        values: Semantic parameter name -> value
        definitions: Parameters of the method being invoked

    Returns:
        Tokens in parameter registration order, one occurrence per option
    """
    _log_dropped(values, definitions)
    slots: dict[str, _CliSlot] = {}

    for param in definitions:
        if not param.cli_option or values.get(param.name) is None:
            continue
        value = values[param.name]

        if param.type is ParameterType.FLAG:
            if not value:
                continue
            prefix, separate = param.cli_option, False
            fragment = param.flag_value or ""
        elif param.type is ParameterType.FILE:
            prefix, separate = param.cli_option, True
            fragment = str(value)
        elif param.type is ParameterType.VALUE:
            bare = param.cli_option.removesuffix(SEPARATE_MARKER)
            if param.forced_by and values.get(param.forced_by):
                prefix, separate = bare + SEPARATE_MARKER, False
            else:
                prefix, separate = bare, param.cli_option.endswith(SEPARATE_MARKER)
            fragment = format_value(value)
        else:
            raise ValueError(f"Unsupported parameter type: {param.type!r}")

        slot = slots.setdefault(param.cli_option, _CliSlot(prefix, separate))
        slot.fragments.append(fragment)

    args: list[str] = []
    for slot in slots.values():
        joined = "".join(slot.fragments)
        if slot.separate:
            args.extend([shlex.quote(slot.prefix), shlex.quote(joined)])
        else:
            args.append(shlex.quote(slot.prefix + joined))
    return args


def to_rest_fields(values: Mapping[str, Any], definitions: ParameterCollection) -> dict[str, str]:
    """Translate semantic parameter values into REST form fields.

    FILE parameters are not included; see :func:`rest_file_fields`.
    """
    _log_dropped(values, definitions)
    fragments: dict[str, list[str]] = {}

    for param in definitions:
        if not param.rest_param or values.get(param.name) is None:
            continue
        value = values[param.name]

        if param.type is ParameterType.FLAG:
            if not value:
                continue
            fragment = param.flag_value or "1"
        elif param.type is ParameterType.FILE:
            continue
        elif param.type is ParameterType.VALUE:
            fragment = format_value(value)
        else:
            raise ValueError(f"Unsupported parameter type: {param.type!r}")

        fragments.setdefault(param.rest_param, []).append(fragment)

    return {name: "".join(parts) for name, parts in fragments.items()}


def rest_file_fields(values: Mapping[str, Any], definitions: ParameterCollection) -> dict[str, str]:
    """Multipart file parts (field -> local path) for FILE parameters.

    Paths that do not exist locally are skipped.
    """
    files: dict[str, str] = {}
    for param in definitions:
        if param.type is not ParameterType.FILE or not param.rest_param:
            continue
        path = values.get(param.name)
        if path is None:
            continue
        if Path(path).exists():
            files[param.rest_param] = str(path)
        else:
            logger.debug("Skipping %s: %s does not exist", param.rest_param, path)
    return files
