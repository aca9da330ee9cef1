"""Text and number formatting utilities"""


def count_chars(text: str) -> int:
    """Length in code points, so full-width characters count as one"""
    return len(text)


def format_number(value: int) -> str:
    """Group digits the way ja-JP number formatting does (1,234,567)"""
    return f"{value:,}"
