import math

from .lines import split_lines
from .models import DriverRecord

DEFAULT_MAX_DRIVERS = 10
LINES_PER_DRIVER = 4

def parse_driver_catalog(output: str) -> list[DriverRecord]:
    """
    Parses `lpinfo -l -m` output. Each driver is four `label = value` lines:

    Model:  name = gutenprint.5.3://brother-hl-2030/expert
            natural_language = en
            make-and-model = Brother HL-2030 - CUPS+Gutenprint v5.3.4
            device-id = MFG:Brother;MDL:HL-2030;

    A trailing group with fewer than four lines is dropped.
    """
    lines = split_lines(output)
    drivers = []
    for start in range(0, len(lines) - LINES_PER_DRIVER + 1, LINES_PER_DRIVER):
        driver, lang, make_and_model, device_id = (
            _value(line) for line in lines[start:start + LINES_PER_DRIVER]
        )
        drivers.append(DriverRecord(driver=driver, lang=lang, make_and_model=make_and_model, id=device_id))
    return drivers

def _value(line):
    return line.partition('=')[2].strip()

def format_driver_catalog(drivers) -> str:
    """Renders driver records in the `lpinfo -l -m` layout."""
    lines = []
    for d in drivers:
        lines.append(f"Model:  name = {d.driver}")
        lines.append(f"        natural_language = {d.lang}")
        lines.append(f"        make-and-model = {d.make_and_model}")
        lines.append(f"        device-id = {d.id}")
    return "\n".join(lines) + "\n"

def fuzzy_score(pattern: str, text: str):
    """
    Scores `pattern` as a case-insensitive subsequence of `text`.
    Consecutive matches count progressively more. Returns None on no match.
    """
    pattern = pattern.lower()
    compare = text.lower()
    pattern_idx = 0
    total = 0
    run = 0
    for ch in compare:
        if pattern_idx < len(pattern) and ch == pattern[pattern_idx]:
            pattern_idx += 1
            run += 1 + run
        else:
            run = 0
        total += run

    if pattern_idx != len(pattern):
        return None
    if compare == pattern:
        return math.inf
    return total

def fuzzy_filter(pattern: str, items, extract=str) -> list:
    """Returns the items matching `pattern`, best score first, ties in input order."""
    hits = []
    for index, item in enumerate(items):
        score = fuzzy_score(pattern, extract(item))
        if score is not None:
            hits.append((score, index, item))
    hits.sort(key=lambda hit: (-hit[0], hit[1]))
    return [item for _, _, item in hits]

def match_slug(slug: str, drivers) -> list[DriverRecord]:
    # Longest prefix of the slug first; "Brother HL-5270DN" falls back to
    # "Brother" only when nothing matches the full model name.
    tokens = slug.split()
    for window in range(len(tokens), 0, -1):
        candidate = " ".join(tokens[:window])
        hits = fuzzy_filter(candidate, drivers, extract=lambda d: d.make_and_model)
        if hits:
            return hits
    return []

def match_drivers(slugs, drivers, maxsize: int = DEFAULT_MAX_DRIVERS) -> list[DriverRecord]:
    """
    Matches one or more free-text slugs against the driver catalog.

    :param slugs: a slug, a list of slugs, or None for the whole catalog
    :param drivers: parsed catalog, in catalog order
    :param maxsize: cap on the combined result
    """
    if slugs is None:
        return list(drivers)
    if isinstance(slugs, str):
        slugs = [slugs]

    results = []
    seen = set()
    for slug in slugs:
        for driver in match_slug(slug, drivers):
            if driver not in seen:
                seen.add(driver)
                results.append(driver)
    return results[:maxsize]
