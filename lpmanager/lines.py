import re

# \r\n must come first so it is consumed as a single break
LINE_BREAK = re.compile(r'\r\n|[\n\r\u0085\u2028\u2029]')

def split_lines(text: str, trim: bool = False, keep_empty: bool = False) -> list[str]:
    """
    Splits command output into physical lines.

    :param text: raw decoded output
    :param trim: strip surrounding whitespace from every line
    :param keep_empty: keep empty entries produced by the split
    """
    if not text:
        return []

    lines = LINE_BREAK.split(text)
    if trim:
        lines = [line.strip() for line in lines]
    if keep_empty:
        return lines
    return [line for line in lines if line]
