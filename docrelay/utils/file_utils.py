from pathlib import Path


def file_extension(file_name: str) -> str:
    """
    Lower-cased text after the last period of a file name.

    A name without a period is returned whole (lower-cased).
    """
    return file_name.rsplit(".", 1)[-1].lower()


def lookup_key(identifier: str, file_name: str) -> str:
    return f"{identifier}.{file_extension(file_name)}"


def ensure_directory_exists(directory_path: Path) -> None:
    """
    Ensure that a directory exists, creating it if necessary.
    """
    directory_path.mkdir(parents=True, exist_ok=True)
