"""Spreadsheet column letter helpers."""


def column_to_letter(column: int) -> str:
    """Convert a 1-based column number to its letter (1 -> A, 27 -> AA)."""
    if column < 1:
        raise ValueError(f"Column numbers start at 1, got {column}")

    letters = ""
    while column > 0:
        column, remainder = divmod(column - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


def letter_to_column(letters: str) -> int:
    """Convert a column letter to its 1-based number (A -> 1, AA -> 27)."""
    letters = letters.strip().upper()
    if not letters or not letters.isalpha():
        raise ValueError(f"Invalid column letter '{letters}'")

    column = 0
    for char in letters:
        column = column * 26 + (ord(char) - 64)
    return column
