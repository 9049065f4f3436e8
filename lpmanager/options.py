"""
Options accepted by `lp`.

GENERAL_OPTIONS are lp's own flags, PRINT_OPTIONS go through `-o`. Each
entry lists the aliases callers may use, the kind of value it expects
("none" for a bare flag) and the lp default where the man page gives one.
"""

from dataclasses import dataclass
from typing import Any, Optional

NONE = "none"
STRING = "string"
NUMBER = "number"


class OptionError(ValueError):
    pass


@dataclass(frozen=True)
class OptionSpec:
    key: str
    aliases: frozenset
    kind: str
    default: Optional[Any] = None
    description: str = ""


def _spec(key, aliases, kind, default=None, description=""):
    return OptionSpec(key, frozenset(aliases), kind, default, description)


GENERAL_OPTIONS = {
    s.key: s for s in (
        _spec("E", ["E", "encryption"], NONE, False, "Forces encryption when connecting to the server"),
        _spec("U", ["U", "Username", "username"], STRING, description="Username to use when connecting to the server"),
        _spec("c", ["c", "backwardsCompatibility"], NONE, False, "Copy the print file to the spool directory first"),
        _spec("d", ["d", "destination"], STRING, description="Prints files to the named printer"),
        _spec("h", ["h", "hostname"], STRING, description="Chooses an alternate server"),
        _spec("i", ["i", "job-id"], NUMBER, description="Specifies an existing job to modify"),
        _spec("m", ["m"], NONE, description="Sends an email when the job is completed"),
        _spec("n", ["n", "copies", "numCopies"], NUMBER, 1, "Number of copies, 1 to 100"),
        _spec("o", ["o"], STRING, "", '"name=value [name=value ...]" Sets one or more job options'),
        _spec("q", ["q", "priority"], NUMBER, 1, "Job priority from 1 (lowest) to 100 (highest)"),
        _spec("s", ["s"], NONE, description="Do not report the resulting job IDs"),
        _spec("t", ["t", "name"], STRING, description="Sets the job name"),
        _spec("H", ["H", "when"], STRING, "immediate", "immediate, hold, resume, restart or HH:MM"),
        _spec("P", ["P", "page-list"], STRING, description="Pages to print, e.g. 1,3-5,16"),
    )
}

PRINT_OPTIONS = {
    s.key: s for s in (
        _spec("media", ["media"], STRING, "a4", 'Page size, e.g. "a4", "letter", "legal"'),
        _spec("landscape", ["landscape"], NONE),
        _spec("orientation-requested", ["orientation-requested"], NUMBER),
        _spec("sides", ["sides"], STRING, description="one-sided, two-sided-long-edge or two-sided-short-edge"),
        _spec("fitplot", ["fitplot"], NONE, False, "Scales the print file to fit on the page"),
        _spec("scaling", ["scaling"], NUMBER, description="Percent of the page used by image files"),
        _spec("cpi", ["cpi"], NUMBER, description="Characters per inch for text files"),
        _spec("lpi", ["lpi"], NUMBER, description="Lines per inch for text files"),
        _spec("page-bottom", ["page-bottom"], NUMBER, description="Bottom margin in points"),
        _spec("page-left", ["page-left"], NUMBER, description="Left margin in points"),
        _spec("page-right", ["page-right"], NUMBER, description="Right margin in points"),
        _spec("page-top", ["page-top"], NUMBER, description="Top margin in points"),
    )
}

_ALIASES = {}
for _table in (GENERAL_OPTIONS, PRINT_OPTIONS):
    for _option in _table.values():
        for _alias in _option.aliases:
            _ALIASES[_alias] = _option


def resolve_option(name: str) -> OptionSpec:
    try:
        return _ALIASES[name]
    except KeyError:
        raise OptionError(f"Unknown print option: {name}") from None


def _format_value(spec, value):
    if spec.kind == NUMBER:
        if isinstance(value, bool):
            raise OptionError(f"Option {spec.key} expects a number, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise OptionError(f"Option {spec.key} expects a number, got {value!r}") from None
        return str(int(number)) if number.is_integer() else str(number)
    return str(value)


def build_print_args(options: dict) -> list[str]:
    """
    Turns an options mapping into lp arguments.

    >>> build_print_args({"copies": 2, "media": "letter", "fitplot": True})
    ['-n', '2', '-o', 'media=letter', '-o', 'fitplot']
    """
    general = []
    printing = []
    for name, value in (options or {}).items():
        spec = resolve_option(name)
        is_print_option = spec.key in PRINT_OPTIONS and spec is PRINT_OPTIONS[spec.key]

        if spec.kind == NONE:
            if not value:
                continue
            if is_print_option:
                printing.extend(["-o", spec.key])
            else:
                general.append(f"-{spec.key}")
            continue

        if value is None:
            continue
        formatted = _format_value(spec, value)
        if is_print_option:
            printing.extend(["-o", f"{spec.key}={formatted}"])
        else:
            general.extend([f"-{spec.key}", formatted])

    return general + printing
