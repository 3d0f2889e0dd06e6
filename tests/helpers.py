"""Helpers shared by the test modules."""


def data_file(*lines: str) -> str:
    """Join data-language lines into file text."""
    return "\n".join(lines) + "\n"
